import logging

import typer

from varexport.constants import DEFAULT_START_TIME_FORMAT
from varexport.exporter import set_start_time_format
from varexport.logger import logger as varexport_logger
from varexport.settings import VarExportSettings
from varexport.utils import import_modules

logger = logging.getLogger(__name__)


def bootstrap(ctx: typer.Context, imports: list[str] | None = None) -> VarExportSettings:
    """
    Prepare the process for a CLI command.

    Loads settings (honoring the global ``--settings`` option), enables file logging
    when a log directory is configured, and imports the modules whose import-time
    side effects register the variables to inspect.

    Args:
        ctx: Typer context carrying the global options.
        imports: Extra modules given on the command line.

    Returns:
        The loaded settings.
    """
    settings_path = ctx.obj.get("settings") if ctx.obj else None
    settings = VarExportSettings.load(settings_path or None)

    if settings.log_dir:
        varexport_logger.configure(settings.log_dir, settings.log_level)

    if settings.start_time_format != DEFAULT_START_TIME_FORMAT:
        set_start_time_format(settings.start_time_format)

    modules = [*settings.imported_modules, *(imports or [])]
    import_modules(modules)
    logger.debug("CLI bootstrap complete, imported %d module(s)", len(modules))
    return settings
