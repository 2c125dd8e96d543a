"""Command-line interface for the record normalizer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .config import load_config
from .errors import ErrorBudgetExhausted
from .logging import configure_logging, get_logger
from .normalize import RecordProcessor, decode_input, normalize_lines
from .rules import OUTPUT_ENCODING

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Normalize 8-column CSV records")


@app.command()
def normalize(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV file to read"),
    output_file: Path = typer.Argument(..., dir_okay=False, help="Where to write the normalized CSV"),
    max_errors: Optional[int] = typer.Option(
        None,
        "--max-errors",
        min=1,
        help="Stop after this many rejected lines (default from NORMALIZER_MAX_ERRORS, else 100)",
    ),
) -> None:
    config = load_config()
    configure_logging(config.log_level)

    text, enc_report = decode_input(input_file.read_bytes())
    if enc_report["decode_fallback"]:
        logger.warning("input_decode_fallback", path=str(input_file), encoding=enc_report["decode_used"])

    processor = RecordProcessor(max_errors or config.max_errors)
    try:
        output = normalize_lines(text.split("\n"), processor)
    except ErrorBudgetExhausted as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    with output_file.open("w", encoding=OUTPUT_ENCODING, newline="\n") as fh:
        for line in output:
            fh.write(line + "\n")

    logger.info(
        "output_generated",
        path=str(output_file),
        lines_in=processor.line_number,
        lines_out=len(output),
        errors=len(processor.errors),
    )
    typer.echo(f"{output_file} has been generated")


def main() -> None:
    app()
