"""AttendQL CLI - Main entry point."""

from typing import Annotated

import typer

import attendql
from attendql.cli.context import CLIContext
from attendql.core.config import get_database_url

app = typer.Typer(
    name="attendql",
    help="AttendQL CLI - ask natural language questions about student attendance",
    no_args_is_help=True,
)

@app.callback()
def main_callback(
    ctx: typer.Context,
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            envvar="ATTENDQL_DATABASE_URL",
            help="Database URL (PostgreSQL or SQLite)",
        ),
    ] = None,
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements to console",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    cli_ctx = CLIContext(
        database_url=get_database_url(database),
        echo=echo,
        json_output=json_output,
    )

    # Store in Typer context for command access
    ctx.obj = cli_ctx


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"AttendQL v{attendql.__version__}")


# Register commands
from attendql.cli.commands import ask, store  # noqa: E402

app.command(name="init")(store.init)
app.command(name="schema")(store.schema)
app.command(name="prompt")(ask.prompt)
app.command(name="ask")(ask.ask)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
