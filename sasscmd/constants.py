"""Fixed names and vocabularies for the sass command."""

from __future__ import annotations

from enum import Enum

# ==========================================
# Package identity
# ==========================================

PACKAGE_NAME = "sass"
PACKAGE_VERSION = "1.0"
COMMAND_NAME = "sass"
LIBRARY_NAME = "libsass"

# ==========================================
# Command vocabulary
# ==========================================

VERB_COMPILE = "compile"
VERB_VERSION = "version"
VERBS: tuple[str, ...] = (VERB_COMPILE, VERB_VERSION)

FLAG_TYPE = "-type"
FLAG_OPTIONS = "-options"
FLAG_END = "--"


class OriginKind(str, Enum):
    """Where compiler input comes from."""

    UNSET = "unset"
    FILE = "file"
    DATA = "data"
    FOLDER = "folder"


# Only these two may be requested through ``-type``.
CONTEXT_TYPES: tuple[str, ...] = (OriginKind.DATA.value, OriginKind.FILE.value)

OUTPUT_STYLES: tuple[str, ...] = ("nested", "expanded", "compact", "compressed")

# libsass defaults, mirrored so the adapter can tell when to reformat output.
DEFAULT_PRECISION = 5
DEFAULT_OUTPUT_STYLE = "nested"
DEFAULT_INDENT = "  "
DEFAULT_LINEFEED = "\n"

# ==========================================
# Result keys
# ==========================================

KEY_ERROR_STATUS = "errorStatus"
KEY_OUTPUT_STRING = "outputString"
KEY_SOURCE_MAP_STRING = "sourceMapString"
KEY_ERROR_MESSAGE = "errorMessage"
KEY_ERROR_LINE = "errorLine"
KEY_ERROR_COLUMN = "errorColumn"


def join_choices(choices: tuple[str, ...] | list[str]) -> str:
    """Render ``a, b, or c`` the way script interpreters list valid values."""
    items = list(choices)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} or {items[1]}"
    return f"{', '.join(items[:-1])}, or {items[-1]}"
