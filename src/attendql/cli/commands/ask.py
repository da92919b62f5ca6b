"""Natural language question commands."""

from typing import Annotated

import typer

from attendql.cli.context import CLIContext
from attendql.cli.output import OutputFormatter
from attendql.query.prompt import build_prompt


def prompt(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Natural language question")],
) -> None:
    """Print the translation prompt for a question without calling the model.

    Examples:

        attendql prompt "students absent on 2024-04-10"
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    text = build_prompt(question)
    if cli_ctx.json_output:
        formatter.print_data({"question": question, "prompt": text})
    else:
        typer.echo(text)


def ask(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Natural language question")],
    show_query: Annotated[
        bool,
        typer.Option("--show-query/--hide-query", help="Show the executed SQL"),
    ] = True,
) -> None:
    """Answer a natural language question about attendance.

    Examples:

        attendql ask "students with perfect attendance"
        attendql ask "students with more than 9 absence hours in INFORMATIQUE"
        attendql --json ask "students absent between 2024-04-01 and 2024-04-30"
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        pipeline = cli_ctx.get_pipeline()
        response = pipeline.ask(question)

        if cli_ctx.json_output:
            formatter.print_data(response.model_dump())
        else:
            formatter.print_text(response.summary)
            if response.students:
                formatter.print_table(
                    f"Students ({response.total_results} total)",
                    [
                        {
                            "Code": s.student_code,
                            "Name": s.full_name,
                            "Department": s.department or "",
                            "Semester": s.semester or "",
                            "Absence Hours": s.absence_hours,
                        }
                        for s in response.students
                    ],
                    ["Code", "Name", "Department", "Semester", "Absence Hours"],
                )
            if show_query and response.generated_query:
                formatter.print_text(f"\nQuery: {response.generated_query}", style="dim")

        if response.error is not None:
            raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
