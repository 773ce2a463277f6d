"""
Text renderings of an exporter's variables.

All functions consume `VarExporter.visit_variables`, so they share its ordering:
variables by name, expandable variables as one line per entry, the start-time
variable last.
"""

import io
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from varexport.exporter import VarExporter
    from varexport.variables import Variable


def dump(exporter: "VarExporter", out: TextIO, include_doc: bool = False) -> None:
    """
    Write one ``name=value`` line per variable, escaped for properties files.

    Args:
        exporter: Exporter to render.
        out: Text stream to write to.
        include_doc: Whether to precede each line with documentation comments.
    """
    exporter.visit_variables(lambda variable: variable.write(out, include_doc))


def dump_json(exporter: "VarExporter", out: TextIO) -> None:
    """
    Write variables as ``{name='value', name2='value2'}``.

    Names and values are not escaped and every value is stringified.
    """
    out.write("{")
    count = 0

    def visit(variable: "Variable") -> None:
        nonlocal count
        if count:
            out.write(", ")
        count += 1
        out.write(f"{variable.name}='{variable.value_string()}'")

    exporter.visit_variables(visit)
    out.write("}")


def dumps(exporter: "VarExporter", include_doc: bool = False) -> str:
    """`dump` into a string."""
    buffer = io.StringIO()
    dump(exporter, buffer, include_doc=include_doc)
    return buffer.getvalue()


def dumps_json(exporter: "VarExporter") -> str:
    """`dump_json` into a string."""
    buffer = io.StringIO()
    dump_json(exporter, buffer)
    return buffer.getvalue()

