"""sass command: libsass compilation driven by verb/flag arguments."""

from sasscmd.constants import LIBRARY_NAME, PACKAGE_VERSION
from sasscmd.dispatcher import SassCommand, compile_css, dispatch
from sasscmd.errors import CompilationError, SassCommandError

__version__ = PACKAGE_VERSION

__all__ = [
    "LIBRARY_NAME",
    "SassCommand",
    "compile_css",
    "dispatch",
    "CompilationError",
    "SassCommandError",
]
