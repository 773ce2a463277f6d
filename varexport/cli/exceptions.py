"""
varexport CLI exception hierarchy.

This module defines CLI-specific exceptions, rendered to stderr with rich.
"""

import traceback

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from varexport.exceptions import ExportError, VarExportError, VariableError

console = Console(stderr=True)


def describe_failure(exception: BaseException) -> list[str]:
    """
    Summarize what failed behind a CLI error, one markup line per fact.

    Names the variable or exported member involved, the underlying cause when the
    error wraps one, and, for errors raised outside varexport, where they were raised.
    """
    lines = [f"{type(exception).__name__}: {escape(str(exception))}"]

    if isinstance(exception, VariableError) and exception.var_name:
        lines.append(f"Variable: [bold]{escape(exception.var_name)}[/]")
    elif isinstance(exception, ExportError) and exception.member_name:
        owner = f"{exception.owner}." if exception.owner else ""
        lines.append(f"Member: [bold]{escape(owner + exception.member_name)}[/]")

    cause = exception.__cause__
    if cause is not None:
        lines.append(f"Caused by {type(cause).__name__}: {escape(str(cause))}")

    origin = cause if cause is not None else exception
    if not isinstance(origin, VarExportError):
        frames = traceback.extract_tb(origin.__traceback__)
        if frames:
            frame = frames[-1]
            lines.append(f"Raised at {escape(frame.filename)}:{frame.lineno} in {frame.name}")

    return lines


class VarExportCLIError(VarExportError):
    """
    Base exception class for CLI-related errors.

    These relate to command-line interface operations.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        code: int = 1,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.code = code
        self.original_exception = original_exception

    def format_rich(self) -> str:
        """Format the error message for rich display."""
        error_message = f"[red bold]Error:[/] {escape(self.message)}"

        if self.hint:
            error_message += f"\n[yellow]Hint:[/] {escape(self.hint)}"

        if self.original_exception:
            details = "\n".join(f"[dim]{line}[/]" for line in describe_failure(self.original_exception))
            error_message += f"\n\n{details}"

        return error_message

    def show(self) -> None:
        console.print(Panel(self.format_rich(), title="[red]varexport CLI Error[/]", border_style="red"))


class CLIDumpError(VarExportCLIError):
    """Raised when variables cannot be dumped or looked up."""


class CLINamespacesError(VarExportCLIError):
    """Raised when namespaces cannot be listed."""
