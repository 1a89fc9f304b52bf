"""
Charts of the offer distributions the generator produces.
"""

from pathlib import Path
from typing import Dict, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np


def plot_share_distributions(shares_by_round: Dict[int, np.ndarray],
                             save_path: Optional[Path] = None,
                             title: str = "Offer distribution by round") -> plt.Figure:
    """
    Overlay histograms of party A's share, one per round. Later rounds should
    look visibly narrower as concentration grows.
    """
    fig, ax = plt.subplots(figsize=(10, 6))
    bins = np.linspace(0.0, 1.0, 51)

    for round_num, shares in sorted(shares_by_round.items()):
        ax.hist(shares, bins=bins, alpha=0.45, density=True,
                label=f"Round {round_num} (mean {np.mean(shares):.3f})")

    ax.axvline(x=0.5, color='gray', linestyle='--', alpha=0.7, label='Even split')
    ax.set_xlabel("Party A's share", fontsize=12)
    ax.set_ylabel('Density', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_xlim([0, 1])
    ax.legend(loc='best', framealpha=0.9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
