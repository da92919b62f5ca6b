"""Store setup and schema inspection commands."""

import typer

import attendql
from attendql.cli.context import CLIContext
from attendql.cli.output import OutputFormatter
from attendql.query.context import get_schema_context


def init(ctx: typer.Context) -> None:
    """Create the attendance tables in the database.

    Existing tables are left untouched.

    Examples:

        attendql init
        attendql --database postgresql://localhost/school init
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        connection = cli_ctx.get_connection()
        connection.create_tables()

        formatter.print_success(
            "Database initialized",
            {
                "database": cli_ctx.database_url,
                "version": attendql.__version__,
            },
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


def schema(ctx: typer.Context) -> None:
    """Show the schema context used to generate SQL.

    Examples:

        attendql schema
        attendql --json schema
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)
    context = get_schema_context()

    if cli_ctx.json_output:
        formatter.print_data(context.to_dict())
        return

    for entity in context.entities:
        formatter.print_table(
            f"{entity.name} ({entity.table})",
            [
                {"Column": c.name, "Type": c.type, "Description": c.description}
                for c in entity.columns
            ],
            ["Column", "Type", "Description"],
        )
        for relationship in entity.relationships:
            formatter.print_text(f"  {relationship}", style="dim")
    for note in context.notes:
        formatter.print_text(f"Note: {note}")
