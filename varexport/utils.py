import importlib
import importlib.util
import logging
from pathlib import Path
from types import ModuleType

from varexport.exceptions import VarExportError

logger = logging.getLogger(__name__)


def import_module_from_path(module_name: str, module_path: str | Path) -> ModuleType:
    """
    Import a module from a given file path.

    Args:
        module_name: Name to assign to the module.
        module_path: Path to the module file.

    Returns:
        Imported module.

    Raises:
        VarExportError: If there is an error importing the module.
    """
    try:
        spec = importlib.util.spec_from_file_location(module_name, str(module_path))
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    except Exception as e:
        raise VarExportError(f"Failed to import module '{module_name}' from '{module_path}': {e!s}") from e


def import_modules(modules: list[str]) -> list[ModuleType]:
    """
    Import modules so that their import-time registrations take effect.

    Entries ending in ``.py`` are treated as file paths, anything else as a dotted
    module name.

    Args:
        modules: Dotted module names or paths to Python files.

    Returns:
        The imported modules, in order.

    Raises:
        VarExportError: If any module cannot be imported.
    """
    imported: list[ModuleType] = []
    for module in modules:
        if module.endswith(".py"):
            path = Path(module)
            imported.append(import_module_from_path(path.stem, path))
        else:
            try:
                imported.append(importlib.import_module(module))
            except Exception as e:
                raise VarExportError(f"Failed to import module '{module}': {e!s}") from e
        logger.debug("Imported module '%s'", module)
    return imported
