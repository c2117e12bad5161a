"""Comparison and rendering helpers for parsed worker names."""

from __future__ import annotations

import csv
import json
from dataclasses import fields
from pathlib import Path

from workername.parser import ParsedWorkerName

NULL_PLACEHOLDER = "NULL"
FIELD_LABELS = {
    "primary_id": "BTC Address",
    "secondary_id": "Lightning ID",
    "domain": "Domain",
    "suffix": "Worker Name",
}


def optional_equal(a: str | None, b: str | None) -> bool:
    """Compare optional text: two absent values match, absent never matches present."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return a == b


def mismatched_fields(result: ParsedWorkerName, expected: ParsedWorkerName) -> list[str]:
    return [
        f.name
        for f in fields(ParsedWorkerName)
        if not optional_equal(getattr(result, f.name), getattr(expected, f.name))
    ]


def results_equal(result: ParsedWorkerName, expected: ParsedWorkerName) -> bool:
    return not mismatched_fields(result, expected)


def format_result(workername: str, result: ParsedWorkerName) -> str:
    """Render the four fields for diagnostics, NULL marking absent ones."""
    rule = "-" * 40
    lines = [f'Parsing results for: "{workername}"', rule]
    for name, label in FIELD_LABELS.items():
        value = getattr(result, name)
        lines.append(f"{label}: {NULL_PLACEHOLDER if value is None else value}")
    lines.append(rule)
    return "\n".join(lines)


def result_to_row(workername: str, result: ParsedWorkerName) -> dict[str, str | None]:
    """Flatten a parse result into a JSON/CSV-friendly row."""
    row: dict[str, str | None] = {"workername": workername}
    for f in fields(ParsedWorkerName):
        row[f.name] = getattr(result, f.name)
    return row


def append_csv(path: Path, row: dict) -> None:
    """Append a row to a CSV file, writing headers when the file is new.

    None becomes NULL so absent fields stay distinct from empty ones.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(row.keys()))
        if is_new:
            writer.writeheader()
        writer.writerow({k: NULL_PLACEHOLDER if v is None else v for k, v in row.items()})


def append_jsonl(path: Path, payload: dict) -> None:
    """Append a JSON line (UTF-8) to a log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(payload) + "\n")
