from .ansi import (
    ASSISTANT_LABEL,
    ERROR_LABEL,
    WARNING_LABEL,
    console,
    err_console,
)
from .spinner import Spinner

__all__ = [
    "ASSISTANT_LABEL",
    "ERROR_LABEL",
    "WARNING_LABEL",
    "console",
    "err_console",
    "Spinner",
]
