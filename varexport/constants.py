# Name of the well-known variable reporting when the exporter machinery started
START_TIME_VARIABLE_NAME = "exporter-start-time"
START_TIME_VARIABLE_DOC = "global start time of variable exporter"

# ISO 8601, second precision, with the UTC offset of the local timezone
DEFAULT_START_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# The global namespace is keyed by the empty string
GLOBAL_NAMESPACE = ""

# "<container>#<key>" addresses one entry of an expandable variable
SUB_VARIABLE_SEPARATOR = "#"

# "<child namespace>-<variable name>" is the name a variable gets when forwarded to a parent
NAMESPACE_SEPARATOR = "-"

# Synthetic key used when a mapping could not be iterated during expansion
EXPANSION_ERROR_KEY = "error"

# Attribute set by the `export` decorator on exported functions
EXPORT_ATTRIBUTE = "__varexport__"

# Textual form of a missing value in dumps
NULL_VALUE_STRING = "null"

# Settings resolution
VAREXPORT_SETTINGS_ENV_VAR = "VAREXPORT_SETTINGS"
VAREXPORT_SETTINGS_ENV_PREFIX = "VAREXPORT_SETTINGS_"
VAREXPORT_DEFAULT_SETTINGS_FILE = "varexport.yaml"

VAREXPORT_DEFAULT_LOGGER = {
    "directory": ".varexport/logs",
    "level": "INFO",
}

# Keywords whose values are masked in log output
PROTECTED_KEYWORDS = ("password", "passwd", "secret", "token", "api_key", "apikey", "credential")
