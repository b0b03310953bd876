"""Command line entry point for Redline.

Reads transcription-result JSON files (``text``, ``words``, ``entities``)
and prints aligned entities, masked text or an aggregated CSV table.

Usage:
    redline align result.json --key-terms "Acme, onboarding"
    redline redact result.json
    redline aggregate a.json b.json -c Name -c Card -o table.csv
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

import redline.logging
from redline import __version__
from redline.common.constants import sensitive_types
from redline.common.models import SourceDocument
from redline.config import get_settings
from redline.pipeline.aggregation import aggregate_documents
from redline.pipeline.exceptions import IngestionError
from redline.pipeline.export import export_csv
from redline.pipeline.processor import process_transcription
from redline.pipeline.redaction import mask_text

app = typer.Typer(
    name="redline",
    help="Redline CLI - entity alignment, redaction and aggregation for transcripts.",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Handle --version flag."""
    if value:
        print(f"redline {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log pipeline events to stderr."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Redline CLI - entity alignment, redaction and aggregation for transcripts."""
    redline.logging.configure(
        "cli",
        default_level="INFO" if verbose else "WARNING",
        stream=sys.stderr,
        cache_loggers=False,
    )


def _load_payload(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        error_console.print(f"[red]Error:[/red] Cannot read {path}: {e}")
        raise typer.Exit(code=1) from e


def _process(path: Path, key_terms: str | None):
    redline.logging.reset_context(source=str(path))
    try:
        return process_transcription(_load_payload(path), key_terms=key_terms)
    except IngestionError as e:
        error_console.print(f"[red]Error:[/red] {path}: {e}")
        for detail in e.errors:
            loc = ".".join(str(part) for part in detail.get("loc", ()))
            error_console.print(f"  {loc}: {detail.get('msg', '')}")
        raise typer.Exit(code=1) from e


KeyTermsOption = Annotated[
    str | None,
    typer.Option("--key-terms", "-k", help="Comma-separated key terms to search for."),
]

SafeModeOption = Annotated[
    bool | None,
    typer.Option(
        "--safe-mode/--no-safe-mode",
        help="Mask sensitive values (default from REDLINE_SAFE_MODE).",
    ),
]

PersonNamesOption = Annotated[
    bool | None,
    typer.Option(
        "--person-names/--no-person-names",
        help="Also treat person_name entities as sensitive (default from REDLINE_REDACT_PERSON_NAMES).",
    ),
]


def _include_person_names(person_names: bool | None) -> bool:
    if person_names is None:
        return get_settings().redact_person_names
    return person_names


@app.command()
def align(
    file: Annotated[Path, typer.Argument(help="Transcription result JSON file.")],
    key_terms: KeyTermsOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Output entities as JSON."),
    ] = False,
) -> None:
    """Align entities to timestamps and list them."""
    processed = _process(file, key_terms)

    if as_json:
        console.print_json(
            data={
                "drift_offset": processed.drift_offset,
                "entities": [e.model_dump(mode="json") for e in processed.entities],
            }
        )
        return

    table = Table(title=f"Entities (drift offset {processed.drift_offset:+d})")
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Text")
    for entity in processed.entities:
        time = entity.formatted_timestamp if entity.located else "-"
        table.add_row(time, entity.entity_type, entity.text)
    console.print(table)


@app.command()
def redact(
    file: Annotated[Path, typer.Argument(help="Transcription result JSON file.")],
    key_terms: KeyTermsOption = None,
    safe_mode: SafeModeOption = None,
    person_names: PersonNamesOption = None,
) -> None:
    """Print the transcript with sensitive values masked."""
    settings = get_settings()
    processed = _process(file, key_terms)
    text = processed.transcript.full_text

    if settings.safe_mode if safe_mode is None else safe_mode:
        types = sensitive_types(_include_person_names(person_names))
        text = mask_text(text, processed.entities, types)

    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def aggregate(
    files: Annotated[
        list[Path],
        typer.Argument(help="Transcription result JSON files, one row each."),
    ],
    column: Annotated[
        list[str],
        typer.Option("--column", "-c", help="Table column (repeatable)."),
    ],
    key_terms: KeyTermsOption = None,
    safe_mode: SafeModeOption = None,
    person_names: PersonNamesOption = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write CSV to this file."),
    ] = None,
) -> None:
    """Consolidate entities from many files into one CSV table."""
    settings = get_settings()
    documents = [
        SourceDocument(
            source_id=str(path),
            title=path.name,
            entities=_process(path, key_terms).entities,
        )
        for path in files
    ]

    rows = aggregate_documents(
        documents,
        column,
        safe_mode=settings.safe_mode if safe_mode is None else safe_mode,
        types=sensitive_types(_include_person_names(person_names)),
        max_workers=settings.aggregation_workers,
    )
    content = export_csv(column, rows)

    if output:
        output.write_text(content + "\n", encoding="utf-8")
        error_console.print(f"Written to {output}")
    else:
        console.print(content, markup=False, highlight=False, soft_wrap=True)


@app.command("sensitive-types")
def list_sensitive_types(
    person_names: Annotated[
        bool,
        typer.Option("--person-names", help="Include the person-name variant."),
    ] = False,
) -> None:
    """List entity types treated as sensitive."""
    for entity_type in sorted(sensitive_types(person_names)):
        console.print(entity_type)


if __name__ == "__main__":
    app()
