"""
BMP Decoder CLI

Inspect BMP headers, dump decoded pixels and check files decode cleanly.
"""

import itertools
import json
import logging
import sys
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from bmp_decoder.errors import BmpError
from bmp_decoder.reader import open as open_bmp
from bmp_decoder.results import DecodeResult, header_to_dict, scan_source

logger = logging.getLogger("bmp_decoder")

console = Console()

app = typer.Typer(help="BMP decoder - inspect and decode Windows Bitmap files")


def print_header(text: str) -> None:
    console.print(Panel(text, expand=False, style="bold blue"))


def print_success(text: str) -> None:
    console.print(f"✓ {text}", style="green")


def print_error(text: str) -> None:
    console.print(f"❌ {text}", style="red")


def _require_file(path: Path) -> None:
    if not path.is_file():
        print_error(f"File not found: {path}")
        raise typer.Exit(1)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Decode BMP files (1/2/4/8/16/24/32 bpp, V2 to V5 headers)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=Console(stderr=True))],
    )


@app.command()
def info(
    path: Path = typer.Argument(..., help="Path to a .bmp file"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON for scripting"),
) -> None:
    """Show the decoded header of a BMP file."""
    _require_file(path)
    try:
        with path.open("rb") as f:
            reader = open_bmp(f)
    except (BmpError, OSError) as e:
        print_error(f"{path.name}: {e}")
        raise typer.Exit(1)

    fields = header_to_dict(reader.header)
    if output_json:
        console.print_json(json.dumps(fields))
        return

    table = Table(title=f"BMP Header: {path.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for name, value in fields.items():
        if isinstance(value, list):
            value = " ".join(value)
        table.add_row(name, str(value))
    console.print(table)


@app.command()
def pixels(
    path: Path = typer.Argument(..., help="Path to a .bmp file"),
    limit: int = typer.Option(16, "--limit", "-n", min=1, help="Number of pixels to show"),
) -> None:
    """Show the first decoded pixels in file order (8-bit RGBA)."""
    _require_file(path)

    table = Table(title=f"Pixels: {path.name}")
    table.add_column("x", style="dim", justify="right")
    table.add_column("y", style="dim", justify="right")
    table.add_column("RGBA", style="green")
    table.add_column("Error", style="red")

    try:
        with path.open("rb") as f:
            reader = open_bmp(f)
            for item in itertools.islice(reader, limit):
                if item.ok:
                    rgba = " ".join(f"{c:02X}" for c in item.pixel.to_rgba8())
                    table.add_row(str(item.x), str(item.y), rgba, "")
                else:
                    table.add_row(str(item.x), str(item.y), "", str(item.error))
    except (BmpError, OSError) as e:
        print_error(f"{path.name}: {e}")
        raise typer.Exit(1)

    console.print(table)


@app.command()
def check(
    paths: List[Path] = typer.Argument(..., help="One or more .bmp files"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON for scripting"),
) -> None:
    """Decode every pixel of each file and report failures."""
    results = []
    for path in paths:
        _require_file(path)
        logger.debug(f"Checking {path}")
        try:
            with path.open("rb") as f:
                results.append(scan_source(f, path.name))
        except OSError as e:
            logger.debug(f"{path}: could not be read: {e}")
            results.append(DecodeResult.failure(path.name, f"{type(e).__name__}: {e}"))

    if output_json:
        console.print_json(json.dumps([r.to_dict() for r in results]))
    else:
        print_header("BMP Decode Check")
        for result in results:
            console.print(result.to_summary(), style="green" if result.ok else "red", markup=False)

    failed = [r for r in results if not r.ok]
    if failed:
        raise typer.Exit(1)
    if not output_json:
        print_success(f"{len(results)} file(s) decoded cleanly")


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"\n[red bold]Fatal error:[/red bold] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
