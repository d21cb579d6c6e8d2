# physconst/cli/constants.py
import json
from contextlib import nullcontext
from typing import Optional

import typer
from rich import print

from physconst.codata2019 import CODATA2019
from physconst.core.config import MIN_WORKING_BITS
from physconst.core.display import as_dict, describe
from physconst.core.enums import Precision
from physconst.core.precision import working_precision

constants_app = typer.Typer(help="View the CODATA 2019 constants.")


@constants_app.command("list")
def list_constants():
    """List all constants (names, symbols and descriptions)."""
    for const in CODATA2019:
        kind = " [dim](derived)[/dim]" if const.is_derived else ""
        print(f"[bold cyan]{const.name}[/bold cyan] ({const.symbol}): {const.description}{kind}")


@constants_app.command("show")
def show_constant(
    name: str = typer.Argument(..., help="Constant name or symbol"),
    precision: Precision = typer.Option(Precision.FIXED, help="Numeric precision: fixed|arbitrary"),
    bits: Optional[int] = typer.Option(None, help="Working precision in bits for --precision arbitrary"),
    format: str = typer.Option("plain", help="Output format: plain|json")
):
    """Show value, uncertainty and provenance of a constant."""
    const = CODATA2019.get(name)
    if const is None:
        print(f"[red]Constant not found:[/red] {name}")
        raise typer.Exit(1)
    if format not in ("plain", "json"):
        raise typer.BadParameter(f"Unknown format '{format}'", param_hint="--format")

    if bits is not None and bits < MIN_WORKING_BITS:
        raise typer.BadParameter(f"must be >= {MIN_WORKING_BITS}", param_hint="--bits")

    # Plain echo: rich would wrap long arbitrary-precision digits
    with working_precision(bits) if bits is not None else nullcontext():
        if format == "json":
            typer.echo(json.dumps(as_dict(const, precision), indent=2, ensure_ascii=False))
        else:
            typer.echo(describe(const, precision))
