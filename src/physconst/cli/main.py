# src/physconst/cli/main.py
import typer
from physconst.cli.constants import constants_app

app = typer.Typer(
    help="physconst: physical constants CLI",
    context_settings={"help_option_names": ["-h", "--help"]}
)

# Add sub-commands
app.add_typer(constants_app, name="constants")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", help="Show version and exit")
):
    """
    Inspect the physical constants shipped with physconst.

    Use 'physconst COMMAND --help' to see options for specific commands.
    """
    if version:
        from physconst import __version__
        typer.echo(f"physconst version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    if verbose:
        from physconst.core.logging import enable_logging
        enable_logging("DEBUG")

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


if __name__ == "__main__":
    app()
