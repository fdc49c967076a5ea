"""CLI entry point for the card manager."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from card_manager.config import Settings
from card_manager.errors import CardManagerError
from card_manager.extractor.replicate import ReplicateExtractor
from card_manager.models.contact import ContactFields, ExtractedFields

app = typer.Typer(
    name="cardmgr",
    help="Extract contacts from business cards and serve the card manager API.",
    add_completion=False,
)
console = Console()


def configure_logging(level: str) -> None:
    """Send log records through rich at the given level."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_settings() -> Settings:
    load_dotenv()
    try:
        settings = Settings.from_env()
    except CardManagerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(settings.log_level)
    return settings


def _create_scanner(settings: Settings, lang: str):
    """Build a CardScanner backed by PaddleOCR."""
    try:
        from card_manager.ocr.paddle_ocr import PaddleOCRBackend
    except ImportError as e:
        console.print(
            "[red]Error:[/red] PaddleOCR is not installed. "
            "Install it with: pip install 'card-manager[ocr]'"
        )
        raise typer.Exit(1) from e
    from card_manager.scanner import CardScanner

    return CardScanner(
        ocr=PaddleOCRBackend(lang=lang),
        extractor=ReplicateExtractor.from_settings(settings),
    )


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 8000,
):
    """Run the HTTP API."""
    import uvicorn

    from card_manager.api import create_app

    settings = _load_settings()
    if not settings.api_token:
        logging.getLogger(__name__).warning(
            "REPLICATE_API_TOKEN is not set; AI endpoints will return errors"
        )
    uvicorn.run(create_app(settings=settings), host=host, port=port, log_config=None)


@app.command()
def extract(
    text_file: Annotated[
        str,
        typer.Argument(help="File containing OCR text, or '-' to read stdin"),
    ],
    output_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output raw JSON instead of formatted output"),
    ] = False,
):
    """Extract contact fields from already-recognized card text."""
    settings = _load_settings()
    try:
        if text_file == "-":
            text = sys.stdin.read()
        else:
            text = Path(text_file).read_text(encoding="utf-8")
        fields = ReplicateExtractor.from_settings(settings).extract_fields(text)
    except (CardManagerError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output_json:
        print(fields.model_dump_json(indent=2))
    else:
        _print_fields(fields)


@app.command()
def email(
    name: Annotated[str, typer.Option("--name", "-n", help="Contact name")],
    company: Annotated[str, typer.Option("--company", "-c", help="Contact company")],
    title: Annotated[str, typer.Option("--title", "-t", help="Contact job title")] = "",
):
    """Draft a follow-up email for a contact."""
    settings = _load_settings()
    card = ContactFields(name=name, title=title, company=company)
    try:
        text = ReplicateExtractor.from_settings(settings).draft_email(card)
    except CardManagerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(Panel(text.strip(), title=f"Follow-up for {name}", border_style="blue"))


@app.command()
def scan(
    image_path: Annotated[
        Path,
        typer.Argument(help="Path to the business card image", exists=True, readable=True),
    ],
    output_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output raw JSON instead of formatted output"),
    ] = False,
    ocr_only: Annotated[
        bool,
        typer.Option("--ocr-only", help="Only run OCR, skip field extraction"),
    ] = False,
    lang: Annotated[str, typer.Option("--lang", "-l", help="OCR language")] = "en",
):
    """Read a business card image and extract its contact fields."""
    settings = _load_settings()
    scanner = _create_scanner(settings, lang)

    try:
        if ocr_only:
            text = scanner.recognize_only(image_path)
            if output_json:
                print(json.dumps({"raw_text": text}, indent=2, ensure_ascii=False))
            else:
                console.print(Panel(text, title="OCR Result", border_style="blue"))
            return

        result = scanner.scan(image_path)
    except (CardManagerError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output_json:
        print(result.model_dump_json(indent=2))
        return

    _print_fields(result.fields)
    if result.metadata:
        console.print(
            f"[dim]Processed in {result.metadata.processing_time_ms:.0f}ms "
            f"(OCR: {result.metadata.ocr_backend}, "
            f"Extractor: {result.metadata.extractor_backend})[/dim]"
        )


@app.command()
def batch(
    inputs: Annotated[
        list[Path],
        typer.Argument(help="Image files or directories to process"),
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path (JSON or CSV)"),
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json or csv"),
    ] = "json",
    lang: Annotated[str, typer.Option("--lang", "-l", help="OCR language")] = "en",
):
    """Scan multiple business card images into a JSON or CSV file."""
    from card_manager.batch import BatchProcessor

    format = format.lower()
    if format not in ("json", "csv"):
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Use 'json' or 'csv'.")
        raise typer.Exit(1)

    settings = _load_settings()
    processor = BatchProcessor(_create_scanner(settings, lang))

    images = processor.collect_images(inputs)
    if not images:
        console.print("[yellow]Warning:[/yellow] No images found to process.")
        raise typer.Exit(0)

    console.print(f"Processing {len(images)} image(s)...")
    result = processor.process(images)

    content = processor.to_csv(result) if format == "csv" else processor.to_json(result)
    output.write_text(content, encoding="utf-8")

    console.print(
        f"[green]Done:[/green] {result.succeeded} succeeded, "
        f"{result.failed} failed, {result.total_time_ms:.1f}ms total"
    )
    console.print(f"Output: {output}")


@app.command()
def version():
    """Show version information."""
    from card_manager import __version__

    console.print(f"cardmgr version {__version__}")


def _print_fields(fields: ExtractedFields):
    console.print()
    console.print(f"[bold cyan]{fields.name or 'Unknown'}[/bold cyan]")
    if fields.title:
        console.print(f"[dim]{fields.title}[/dim]")
    if fields.company:
        console.print(f"[green]{fields.company}[/green]")

    table = Table(show_header=False, box=None)
    table.add_column("Type", style="dim")
    table.add_column("Value")
    if fields.phone:
        table.add_row("Phone", fields.phone)
    if fields.email:
        table.add_row("Email", fields.email)
    if table.row_count:
        console.print()
        console.print(table)
    console.print()


if __name__ == "__main__":
    app()
