"""
Transcript export and import.

CSV layouts follow the game variant: the alternating variant adds the
proposer and counter-offer columns. JSON exports are the full history array.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .errors import TranscriptFormatError
from .models import HistoryEntry, SessionView, Variant

logger = logging.getLogger(__name__)

CSV_COLUMNS = {
    Variant.FIXED_SKEW: ["sessionId", "round", "offerA", "offerB", "decision", "timestamp"],
    Variant.ALTERNATING: [
        "sessionId", "round", "proposer", "offerA", "offerB",
        "decision", "counterA", "timestamp",
    ],
}

FILENAME_PREFIX = {
    Variant.FIXED_SKEW: "negotiation_b_favored",
    Variant.ALTERNATING: "negotiation_alternating",
}


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    text = ts.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _fmt(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.6f}"


def _csv_row(entry: HistoryEntry) -> Dict[str, str]:
    return {
        "sessionId": entry.session_id,
        "round": str(entry.round),
        "proposer": entry.proposer.value if entry.proposer else "",
        "offerA": _fmt(entry.offer_a),
        "offerB": _fmt(entry.offer_b),
        "decision": entry.decision.value,
        "counterA": _fmt(entry.counter_value),
        "timestamp": format_timestamp(entry.timestamp),
    }


# ===== CSV =====

def history_to_csv(history: Iterable[HistoryEntry], variant: Variant = Variant.FIXED_SKEW) -> str:
    columns = CSV_COLUMNS[variant]
    lines = [",".join(columns)]
    for entry in history:
        row = _csv_row(entry)
        lines.append(",".join(row[c] for c in columns))
    return "\n".join(lines)


def parse_csv(text: str) -> List[HistoryEntry]:
    """Parse a CSV export of either variant back into history entries.

    Raises:
        TranscriptFormatError: if the header or a row is malformed.
    """
    reader = csv.DictReader(io.StringIO(text))
    header = reader.fieldnames or []
    if header not in CSV_COLUMNS.values():
        raise TranscriptFormatError(f"Unrecognised transcript header: {header}")

    entries: List[HistoryEntry] = []
    for line_no, row in enumerate(reader, start=2):
        try:
            entries.append(
                HistoryEntry(
                    session_id=row["sessionId"],
                    round=int(row["round"]),
                    proposer=row.get("proposer") or None,
                    offer_a=float(row["offerA"]),
                    offer_b=float(row["offerB"]),
                    decision=row["decision"],
                    counter_value=float(row["counterA"]) if row.get("counterA") else None,
                    timestamp=parse_timestamp(row["timestamp"]),
                )
            )
        except (ValueError, TypeError, KeyError, ValidationError) as e:
            raise TranscriptFormatError(f"Malformed transcript row {line_no}: {e}") from e
    return entries


# ===== JSON =====

def history_to_json(history: Iterable[HistoryEntry]) -> str:
    return json.dumps([entry.to_dict() for entry in history], indent=2)


def history_from_json(text: str) -> List[HistoryEntry]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TranscriptFormatError(f"Invalid JSON transcript: {e}") from e
    if not isinstance(data, list):
        raise TranscriptFormatError("JSON transcript must be an array of entries")
    try:
        return [HistoryEntry.model_validate(item) for item in data]
    except ValidationError as e:
        raise TranscriptFormatError(f"Malformed JSON transcript entry: {e}") from e


# ===== FILES =====

def export_filename(session_id: str, variant: Variant, suffix: str = ".csv") -> str:
    return f"{FILENAME_PREFIX[variant]}_{session_id}{suffix}"


def write_transcript(view: SessionView, path: Union[str, Path]) -> Path:
    """Write a session transcript, choosing the format from the file suffix."""
    path = Path(path)
    if path.suffix == ".json":
        payload = history_to_json(view.history)
    elif path.suffix == ".csv":
        payload = history_to_csv(view.history, view.variant)
    else:
        raise TranscriptFormatError(f"Unsupported transcript format: {path.suffix or '(none)'}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")
    logger.info(f"Wrote {len(view.history)} transcript entries to {path}")
    return path
