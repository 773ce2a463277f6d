import typer

from varexport.cli import dump, namespaces

app = typer.Typer(
    help="varexport inspects the variables a process exports, by namespace.",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    settings: str | None = typer.Option(
        None, "--settings", "-s", help="Specify a path to a custom settings file."
    ),
) -> None:
    """
    Priority order (highest to lowest):
    1. --settings CLI argument
    2. VAREXPORT_SETTINGS environment variable (handled by VarExportSettings.load)
    3. Default varexport.yaml (handled by VarExportSettings.load)
    """
    ctx.obj = {"settings": settings if settings else ""}


app.command()(dump.dump)
app.command()(dump.get)
app.command()(namespaces.namespaces)

if __name__ == "__main__":
    app()
