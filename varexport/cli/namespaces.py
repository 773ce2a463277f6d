from collections.abc import Callable

import typer
from tabulate import tabulate
from termcolor import colored

from varexport.cli.bootstrap import bootstrap
from varexport.cli.constants import EXIT_ERROR, GLOBAL_NAMESPACE_LABEL, MAX_VALUE_DISPLAY_LENGTH
from varexport.cli.exceptions import CLINamespacesError
from varexport.exceptions import VarExportError
from varexport.exporter import VarExporter, for_namespace, list_namespaces


def namespaces(
    ctx: typer.Context,
    variables: bool = typer.Option(False, "--variables", "-v", help="Also list each namespace's variables"),
    imports: list[str] | None = typer.Option(
        None, "--import", "-i", help="Module (dotted name or .py path) to import first. Repeatable."
    ),
) -> None:
    """
    Displays the known namespaces.
    """
    try:
        bootstrap(ctx, imports)
        show_formatted_table(
            "NAMESPACES", render_namespaces_table_data, ["Namespace", "Variables", "Parent"], None
        )
        if variables:
            for namespace in sorted(list_namespaces()):
                show_formatted_table(
                    f"VARIABLES: {label(namespace)}",
                    render_variables_table_data,
                    ["Name", "Value", "Description"],
                    for_namespace(namespace),
                )

    except VarExportError as e:
        CLINamespacesError(
            message=f"Failed to list namespaces: {e}",
            hint="Check the modules given with --import or in the settings file.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=EXIT_ERROR) from None

    except Exception as e:
        CLINamespacesError(
            message=f"Unexpected error while listing namespaces: {e}",
            hint="A custom Variable implementation may have failed. Check the exporting code.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=EXIT_ERROR) from None


def label(namespace: str) -> str:
    """Display label of a namespace."""
    return namespace or GLOBAL_NAMESPACE_LABEL


def truncate(text: str, length: int = MAX_VALUE_DISPLAY_LENGTH) -> str:
    return text if len(text) <= length else text[: length - 3] + "..."


def render_namespaces_table_data(_: None) -> list[list[str]]:
    """Render one row per namespace: name, variable count, parent."""
    rows = []
    for namespace in sorted(list_namespaces()):
        exporter = for_namespace(namespace)
        parent = exporter.parent_namespace
        rows.append([label(namespace), str(len(exporter)), label(parent.namespace) if parent else ""])
    return rows


def render_variables_table_data(exporter: VarExporter) -> list[list[str]]:
    """Render one row per visited variable of an exporter."""
    return [
        [variable.name, truncate(variable.value_string()), variable.doc]
        for variable in exporter.variables()
    ]


def show_formatted_table(
    banner_text: str,
    table_data_renderer: Callable[[VarExporter | None], list[list[str]]],
    headers: list[str],
    source: VarExporter | None,
) -> None:
    """Display information in a formatted table.

    Args:
        banner_text: The text to display in the banner.
        table_data_renderer: The function to prepare the data for the table.
        headers: The headers for the table.
        source: What the renderer reads from.
    """
    table_data = table_data_renderer(source)

    if not table_data:
        return

    colored_headers = get_colored_headers(headers, "blue")
    colalign = ["left"] * len(headers)
    table = tabulate(table_data, headers=colored_headers, tablefmt="rounded_grid", colalign=colalign)
    display_banner(banner_text, table)
    typer.echo(table)


def get_colored_headers(headers: list[str], color: str) -> list[str]:
    """Color the headers."""
    return [colored(header, color, attrs=["bold"]) for header in headers]


def display_banner(banner_text: str, table: str) -> None:
    """Display a banner centered above the table."""
    banner = colored(banner_text, "magenta", attrs=["bold", "underline"])
    table_width = len(table.split("\n")[0])
    typer.echo("\n" + banner.center(table_width + 5))
