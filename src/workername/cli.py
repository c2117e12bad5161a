from dataclasses import dataclass
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from workername.parser import parse_workername
from workername.report import append_csv, append_jsonl, format_result, result_to_row
from workername.scenarios import PREDEFINED_SCENARIOS, Scenario, check_scenarios, load_scenarios

app = typer.Typer(help="Split pool worker names into payout id, lightning id, domain and suffix.")
console = Console(emoji=False)
# Longest worker name, in UTF-8 bytes, the pool accepts from a client.
DEFAULT_MAX_LENGTH = 255
PARSE_FORMATS = {"text", "json"}
BATCH_FORMATS = {"jsonl", "csv"}


@dataclass(frozen=True)
class BatchConfig:
    max_length: int = DEFAULT_MAX_LENGTH
    output_format: str = "jsonl"


def _truncate(workername: str, max_length: int) -> str:
    encoded = workername.encode("utf-8", errors="surrogateescape")
    if not max_length or len(encoded) <= max_length:
        return workername
    # Drops a multi-byte character cut in half at the limit.
    return encoded[:max_length].decode("utf-8", errors="ignore")


def _check_max_length(max_length: int) -> int:
    if max_length < 0:
        raise typer.BadParameter("--max-length must be zero (no limit) or positive.")
    return max_length


def _read_names(path: Path) -> list[str]:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"Input file is not valid UTF-8: {path}") from exc
    return [line for line in text.split("\n") if line.strip()]


@app.command()
def parse(
    names: list[str] = typer.Argument(..., help="Worker names to parse."),
    format: str = typer.Option("text", "--format", "-f", help="Output format: text | json."),
    max_length: int = typer.Option(
        DEFAULT_MAX_LENGTH,
        "--max-length",
        help="Truncate names to this many UTF-8 bytes (0 disables).",
    ),
) -> None:
    """Parse worker names given on the command line."""
    fmt = format.lower()
    if fmt not in PARSE_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {PARSE_FORMATS}.")
    _check_max_length(max_length)

    rows = []
    for name in names:
        workername = _truncate(name, max_length)
        result = parse_workername(workername)
        if fmt == "text":
            console.print(
                format_result(workername, result), markup=False, highlight=False, soft_wrap=True
            )
        else:
            rows.append(result_to_row(workername, result))
    if rows:
        payload = orjson.dumps(rows, option=orjson.OPT_INDENT_2).decode()
        console.print(payload, markup=False, soft_wrap=True)


@app.command()
def batch(
    input: Path = typer.Argument(..., help="File with one worker name per line."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write rows (replaced if present)."
    ),
    format: str = typer.Option("jsonl", "--format", "-f", help="Output format: jsonl | csv."),
    max_length: int = typer.Option(
        DEFAULT_MAX_LENGTH,
        "--max-length",
        help="Truncate names to this many UTF-8 bytes (0 disables).",
    ),
) -> None:
    """Parse every worker name in a file."""
    fmt = format.lower()
    if fmt not in BATCH_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {BATCH_FORMATS}.")
    config = BatchConfig(max_length=_check_max_length(max_length), output_format=fmt)

    names = _read_names(input)
    console.print(f"[bold green]Read[/] {len(names)} worker names from {escape(str(input))}")
    rows = [
        result_to_row(workername, parse_workername(workername))
        for workername in (_truncate(name, config.max_length) for name in names)
    ]

    if output:
        output.unlink(missing_ok=True)
        for row in rows:
            if config.output_format == "csv":
                append_csv(output, row)
            else:
                append_jsonl(output, row)
        console.print(f"[bold green]Wrote[/] {len(rows)} rows to {escape(str(output))}")
    else:
        for row in rows:
            console.print(orjson.dumps(row).decode(), markup=False, soft_wrap=True)


@app.command()
def check(
    cases: Path | None = typer.Option(
        None, "--cases", "-c", help="YAML or JSON file with extra scenarios."
    ),
    predefined: bool = typer.Option(
        True, "--predefined/--no-predefined", help="Include the built-in scenario table."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the summary JSON."
    ),
) -> None:
    """Run the parser against expected outcomes; exit 1 on any mismatch."""
    scenarios: list[Scenario] = list(PREDEFINED_SCENARIOS) if predefined else []
    if cases:
        if not cases.is_file():
            raise typer.BadParameter(f"Scenario file not found: {cases}")
        try:
            scenarios.extend(load_scenarios(cases))
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    if not scenarios:
        raise typer.BadParameter("No scenarios to check.")

    summary = check_scenarios(scenarios)
    if summary.failures:
        table = Table(title="Scenario failures")
        table.add_column("Worker name")
        table.add_column("Field")
        table.add_column("Expected")
        table.add_column("Found")
        for failure in summary.failures:
            table.add_row(
                Text(failure.workername),
                Text(failure.field),
                Text(repr(failure.expected)),
                Text(repr(failure.found)),
            )
        console.print(table)

    colour = "green" if summary.ok else "red"
    console.print(f"[bold {colour}]{summary.passed}/{summary.total}[/] scenarios passed")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(
            orjson.dumps(
                {
                    "total": summary.total,
                    "passed": summary.passed,
                    "failures": [f.__dict__ for f in summary.failures],
                },
                option=orjson.OPT_INDENT_2,
            )
        )
        console.print(f"[bold green]Wrote check summary[/] to {escape(str(output))}")

    if not summary.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
