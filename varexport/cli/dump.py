import io

import typer

from varexport.cli.bootstrap import bootstrap
from varexport.cli.constants import EXIT_ERROR, EXIT_NOT_FOUND
from varexport.cli.exceptions import CLIDumpError
from varexport.exceptions import VarExportError
from varexport.exporter import for_namespace


def dump(
    ctx: typer.Context,
    namespace: str = typer.Option("", "--namespace", "-n", help="Namespace to dump; global if omitted"),
    doc: bool = typer.Option(False, "--doc", "-d", help="Include documentation comments"),
    json_format: bool = typer.Option(False, "--json", "-j", help="Write a single {name='value'} object"),
    imports: list[str] | None = typer.Option(
        None, "--import", "-i", help="Module (dotted name or .py path) to import first. Repeatable."
    ),
) -> None:
    """
    Dumps every variable of a namespace.
    """
    try:
        settings = bootstrap(ctx, imports)
        exporter = for_namespace(namespace)

        out = io.StringIO()
        if json_format:
            exporter.dump_json(out)
            out.write("\n")
        else:
            exporter.dump(out, include_doc=doc or settings.include_doc)

    except VarExportError as e:
        CLIDumpError(
            message=f"Failed to dump namespace '{namespace}': {e}",
            hint="A variable whose value cannot be read aborts the dump. Check the exporting code.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=EXIT_ERROR) from None

    except Exception as e:
        CLIDumpError(
            message=f"Unexpected error while dumping namespace '{namespace}': {e}",
            hint="A custom Variable implementation may have failed. Check the exporting code.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=EXIT_ERROR) from None

    typer.echo(out.getvalue(), nl=False)


def get(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Variable name, or <name>#<key> for one entry of a map"),
    namespace: str = typer.Option("", "--namespace", "-n", help="Namespace to look in; global if omitted"),
    imports: list[str] | None = typer.Option(
        None, "--import", "-i", help="Module (dotted name or .py path) to import first. Repeatable."
    ),
) -> None:
    """
    Prints the current value of one variable.
    """
    try:
        bootstrap(ctx, imports)
        variable = for_namespace(namespace).get_variable(name)
        value = None if variable is None else variable.value_string()

    except VarExportError as e:
        CLIDumpError(
            message=f"Failed to read variable '{name}': {e}",
            hint="Check the code exporting this variable.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=EXIT_ERROR) from None

    except Exception as e:
        CLIDumpError(
            message=f"Unexpected error while reading variable '{name}': {e}",
            hint="A custom Variable implementation may have failed. Check the exporting code.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=EXIT_ERROR) from None

    if variable is None:
        CLIDumpError(
            message=f"No variable named '{name}' in namespace '{namespace}'",
            hint="Run 'varexport dump' to list the exported variables.",
        ).show()
        raise typer.Exit(code=EXIT_NOT_FOUND)

    typer.echo(value)
