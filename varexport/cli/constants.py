# Label shown for the global namespace, whose name is the empty string
GLOBAL_NAMESPACE_LABEL = "(global)"

# Table rendering parameters
MAX_VALUE_DISPLAY_LENGTH = 80

# Exit codes
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2
