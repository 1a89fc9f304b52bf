"""
Command-line interface for the bargaining simulator.
Provides commands to play or replay a session, inspect the offer
distributions, and generate example configurations.
"""

import logging.config
from pathlib import Path
from typing import List, Optional, Tuple

import typer
import yaml
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .errors import BargainingError
from .evaluation import offer_statistics, sample_shares, summarize_sessions
from .generator import OfferGenerator
from .models import Decision, SessionConfig, SessionStatus, SessionView, Variant
from .recording import export_filename, history_to_json, write_transcript
from .session import NegotiationSession

app = typer.Typer(help="Bilateral bargaining simulator")
console = Console()

STATUS_LABELS = {
    SessionStatus.IN_PROGRESS: "[yellow]In progress[/yellow]",
    SessionStatus.ACCEPTED: "[green]Accepted[/green]",
    SessionStatus.REJECTED: "[red]Rejected (no agreement)[/red]",
}


# ===== COMMANDS =====

@app.command()
def play(
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML session configuration"),
    variant: Optional[Variant] = typer.Option(None, help="Game variant"),
    max_rounds: Optional[int] = typer.Option(None, min=0, help="Number of rounds"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible offers"),
    output: Optional[Path] = typer.Option(None, help="Transcript file (.csv/.json) or directory"),
    save: bool = typer.Option(False, "--save", help="Write the transcript into OUTPUT_DIR"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Play an interactive session as the responder."""
    setup_logging(verbose)
    try:
        session = NegotiationSession(build_config(config_file, variant, max_rounds, seed))
        view = session.start()
        console.print(f"[cyan]Session {view.session_id}[/cyan]")
        finished: List[SessionView] = []

        while True:
            display_view(view)
            if view.is_terminal:
                again = typer.prompt("[n]ew session or [q]uit", default="q").strip().lower()
                if again.startswith("n"):
                    finished.append(view)
                    view = session.reset()
                    console.print(f"[cyan]Session {view.session_id}[/cyan]")
                    continue
                break

            choices = "[a]ccept, [r]eject, [c]ounter, [q]uit" if session.generator.policy.allows_counter \
                else "[a]ccept, [r]eject, [q]uit"
            choice = typer.prompt(choices).strip().lower()
            if choice.startswith("a"):
                view = session.accept()
            elif choice.startswith("r"):
                view = session.reject()
            elif choice.startswith("c") and session.generator.policy.allows_counter:
                view = session.counter(typer.prompt("Counter share for A (0-1)"))
            elif choice.startswith("q"):
                break
            else:
                console.print(f"[red]Unknown choice: {choice}[/red]")

        display_transcript(view)
        if finished:
            display_summary(summarize_sessions(finished + [view]))
        write_output(view, output, save)
    except BargainingError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def replay(
    decisions: str = typer.Argument(..., help="Comma-separated decisions: accept, reject, counter:<value>"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML session configuration"),
    variant: Optional[Variant] = typer.Option(None, help="Game variant"),
    max_rounds: Optional[int] = typer.Option(None, min=0, help="Number of rounds"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible offers"),
    output: Optional[Path] = typer.Option(None, help="Transcript file (.csv/.json) or directory"),
    save: bool = typer.Option(False, "--save", help="Write the transcript into OUTPUT_DIR"),
    as_json: bool = typer.Option(False, "--json", help="Print the transcript as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Run a session non-interactively from a list of decisions."""
    setup_logging(verbose)
    steps = parse_decisions(decisions)
    try:
        session = NegotiationSession(build_config(config_file, variant, max_rounds, seed))
        view = session.start()
        for decision, value in steps:
            if decision is Decision.ACCEPT:
                view = session.accept()
            elif decision is Decision.REJECT:
                view = session.reject()
            else:
                view = session.counter(value)

        if as_json:
            typer.echo(history_to_json(view.history))
        else:
            display_view(view)
            display_transcript(view)

        write_output(view, output, save)
    except BargainingError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def sample(
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML session configuration"),
    variant: Optional[Variant] = typer.Option(None, help="Game variant"),
    max_rounds: Optional[int] = typer.Option(None, min=0, help="Number of rounds"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible offers"),
    samples: int = typer.Option(2000, min=1, help="Offers drawn per round"),
    plot: Optional[Path] = typer.Option(None, help="Save a histogram of the distributions (PNG)"),
):
    """Show the offer distribution the generator produces for each round."""
    setup_logging(False)
    try:
        config = build_config(config_file, variant, max_rounds, seed)
        generator = OfferGenerator.from_config(config)
        rounds = range(1, config.max_rounds + 1)
        stats = offer_statistics(generator, rounds, samples=samples)
    except BargainingError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    display_statistics(stats, config)

    if plot:
        from .visualization import plot_share_distributions

        shares = {r: sample_shares(generator, r, samples) for r in rounds}
        plot_share_distributions(shares, save_path=plot,
                                 title=f"Offer distribution by round ({config.variant.value})")
        console.print(f"[green]Plot saved to {plot}[/green]")


@app.command()
def example(
    directory: Path = typer.Argument(Path("examples"), help="Where to write the example files"),
):
    """Generate example configuration files."""
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for name, config in create_examples().items():
        path = directory / f"{name}.yaml"
        path.write_text(config.to_yaml(), encoding="utf-8")
        written.append(path)

    console.print(f"[green]Example configurations created in {directory}/[/green]")
    for path in written:
        console.print(f"  - {path}")


# ===== HELPER FUNCTIONS =====

def setup_logging(verbose: bool) -> None:
    settings = get_settings()
    if verbose:
        settings.LOG_LEVEL = "DEBUG"
    logging.config.dictConfig(settings.get_logging_config())


def load_config(config_file: Path) -> dict:
    """Load raw session settings from a YAML file."""
    with open(config_file, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{config_file} does not contain a mapping")
    return data


def build_config(config_file: Optional[Path],
                 variant: Optional[Variant],
                 max_rounds: Optional[int],
                 seed: Optional[int]) -> SessionConfig:
    """Merge environment settings, the YAML file, and command-line overrides."""
    data = load_config(config_file) if config_file else {}
    data.update({
        key: value
        for key, value in (("variant", variant), ("max_rounds", max_rounds), ("seed", seed))
        if value is not None
    })
    return get_settings().session_config(**data)


def parse_decisions(text: str) -> List[Tuple[Decision, Optional[str]]]:
    steps: List[Tuple[Decision, Optional[str]]] = []
    for token in (t.strip() for t in text.split(",")):
        if not token:
            continue
        name, _, value = token.partition(":")
        name = name.lower()
        if name in ("a", "accept"):
            steps.append((Decision.ACCEPT, None))
        elif name in ("r", "reject"):
            steps.append((Decision.REJECT, None))
        elif name in ("c", "counter"):
            steps.append((Decision.COUNTER, value))
        else:
            raise typer.BadParameter(f"Unknown decision: {token}")
    return steps


def save_transcript(view: SessionView, output: Path) -> Path:
    if output.is_dir() or not output.suffix:
        output.mkdir(parents=True, exist_ok=True)
        output = output / export_filename(view.session_id, view.variant)
    return write_transcript(view, output)


def write_output(view: SessionView, output: Optional[Path], save: bool) -> None:
    """Write the transcript to --output, or into OUTPUT_DIR with --save."""
    if output is None and save:
        output = get_settings().OUTPUT_DIR
    if output is None:
        return
    path = save_transcript(view, output)
    console.print(f"[green]Transcript saved to {path}[/green]")


def pct(x: float) -> str:
    return f"{100 * x:.1f}%"


def display_view(view: SessionView):
    """Display the current round, offer, and status."""
    console.print(f"\n[bold]Round: {view.round} / {view.max_rounds}[/bold]")
    if view.proposer is not None:
        console.print(f"Proposer: {view.proposer.value}")
    if view.offer is not None:
        console.print(f"Offer: A {pct(view.offer.share_a)}  |  B {pct(view.offer.share_b)}")
    else:
        console.print("Offer: —")
    console.print(f"Status: {STATUS_LABELS[view.status]}")


def display_transcript(view: SessionView):
    """Display the session history as a table."""
    if not view.history:
        console.print("[yellow]No decisions recorded.[/yellow]")
        return

    alternating = view.variant is Variant.ALTERNATING
    table = Table(show_header=True, header_style="bold magenta", title=f"Session {view.session_id}")
    table.add_column("Round", justify="right")
    if alternating:
        table.add_column("Proposer")
    table.add_column("Offer A", justify="right")
    table.add_column("Offer B", justify="right")
    table.add_column("Decision")
    if alternating:
        table.add_column("Counter A", justify="right")
    table.add_column("Time")

    for entry in view.history:
        row = [str(entry.round)]
        if alternating:
            row.append(entry.proposer.value if entry.proposer else "")
        row += [f"{entry.offer_a:.3f}", f"{entry.offer_b:.3f}", entry.decision.value]
        if alternating:
            row.append("" if entry.counter_value is None else f"{entry.counter_value:.3f}")
        row.append(entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
        table.add_row(*row)

    console.print(table)


def display_summary(summary: dict):
    """Display aggregate results over the sessions played."""
    table = Table(show_header=True, header_style="bold magenta", title="Sessions played")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    share_a = summary["avg_accepted_share_a"]
    share_b = summary["avg_accepted_share_b"]
    table.add_row("Sessions", str(summary["count"]))
    table.add_row("Agreement rate", pct(summary["agreement_rate"]))
    table.add_row("Impasse rate", pct(summary["impasse_rate"]))
    table.add_row("Avg rounds", f"{summary['avg_rounds']:.2f}")
    table.add_row("Avg accepted split", "-" if share_a is None else f"A {pct(share_a)} | B {pct(share_b)}")

    console.print(table)


def display_statistics(stats: List[dict], config: SessionConfig):
    """Display per-round offer statistics."""
    console.print(f"\n[bold cyan]Offer distribution ({config.variant.value}):[/bold cyan]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Round", justify="right")
    table.add_column("Proposer")
    table.add_column("Conc.", justify="right")
    table.add_column("Alpha", justify="right")
    table.add_column("Beta", justify="right")
    table.add_column("Expected A", justify="right")
    table.add_column("Mean A", justify="right")
    table.add_column("Std A", justify="right")

    for s in stats:
        table.add_row(
            str(s["round"]), s["proposer"] or "-", f"{s['concentration']:.1f}",
            f"{s['alpha']:.2f}", f"{s['beta']:.2f}", f"{s['expected_mean']:.3f}",
            f"{s['mean']:.3f}", f"{s['std']:.3f}",
        )

    console.print(table)


# ===== EXAMPLE CONFIGURATIONS =====

def create_examples() -> dict:
    """Example session configurations for both variants."""
    return {
        "b_favored": SessionConfig(variant=Variant.FIXED_SKEW, mean_a=0.30),
        "alternating": SessionConfig(variant=Variant.ALTERNATING, proposer_bias=0.08),
        "alternating_long": SessionConfig(
            variant=Variant.ALTERNATING, max_rounds=9, concentration_step=3.0,
        ),
    }


if __name__ == "__main__":
    app()
