"""
varexport exception hierarchy.

This module defines the exceptions raised by the variable registry, organized
hierarchically with clear inheritance paths.
"""

###############################################################################
# ROOT EXCEPTION
###############################################################################


class VarExportError(Exception):
    """
    Root exception class for all varexport errors.

    This exception serves as the base class for the entire exception hierarchy.
    It should never be raised directly but rather inherited from.
    """


###############################################################################
# VARIABLE EXCEPTIONS
###############################################################################


class VariableError(VarExportError):
    """
    Base exception class for variable-related errors.

    These relate to constructing variables and reading their values.
    """

    def __init__(self, message: str = "", var_name: str = ""):
        prefix = f"Variable '{var_name}': " if var_name else ""
        super().__init__(f"{prefix}{message}")
        self.var_name = var_name


class InvalidVariableError(VariableError):
    """Raised when a variable is constructed without its required attributes."""


class VariableAccessError(VariableError):
    """
    Raised when reading the underlying value of a variable fails.

    The original exception is always chained as ``__cause__``.
    """


###############################################################################
# EXPORT EXCEPTIONS
###############################################################################


class ExportError(VarExportError):
    """
    Base exception class for errors while exporting members of objects or classes.
    """

    def __init__(self, message: str = "", member_name: str = "", owner: str = ""):
        prefix = ""
        if member_name:
            prefix = f"Member '{member_name}'"
            if owner:
                prefix += f" of '{owner}'"
            prefix += ": "

        super().__init__(f"{prefix}{message}")
        self.member_name = member_name
        self.owner = owner


class UnsupportedMemberError(ExportError):
    """Raised when a member kind cannot be turned into a variable."""


###############################################################################
# SETTINGS EXCEPTIONS
###############################################################################


class SettingsError(VarExportError):
    """
    Base exception class for settings-related errors.
    """

    def __init__(self, message: str = "", setting: str = ""):
        prefix = f"Setting '{setting}': " if setting else ""
        super().__init__(f"{prefix}{message}")
        self.setting = setting
