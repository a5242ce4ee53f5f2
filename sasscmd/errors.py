"""Exception taxonomy for the sass command.

Every error carries a stable ``code`` so hosts can surface it without
string matching. All of them are recovered at the dispatcher boundary.
"""

from __future__ import annotations


class SassCommandError(Exception):
    """Base class for errors raised while handling a sass command."""

    code = "SASS"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ArgumentError(SassCommandError):
    """Raised when command arguments are structurally wrong."""

    code = "ARGUMENT"


class ArgumentArityError(ArgumentError):
    """Raised when a verb receives the wrong number of arguments."""

    code = "ARITY"


class UnknownVerbError(ArgumentError):
    """Raised when the first argument is neither compile nor version."""

    code = "UNKNOWN_VERB"


class UnknownOptionError(ArgumentError):
    """Raised when an options dictionary names an option nobody registered."""

    code = "UNKNOWN_OPTION"

    def __init__(self, message: str, valid_names: tuple[str, ...]) -> None:
        super().__init__(message)
        self.valid_names = valid_names


class ArgumentTypeError(ArgumentError):
    """Raised when a value does not resolve to its declared kind."""

    code = "ARGUMENT_TYPE"


class UnsupportedContextTypeError(ArgumentTypeError):
    """Raised when -type names something other than data or file."""

    code = "UNSUPPORTED_CONTEXT_TYPE"


class MalformedDictionaryError(ArgumentError):
    """Raised when an -options value is not an even key/value list."""

    code = "MALFORMED_DICTIONARY"


class UnsupportedOriginKindError(SassCommandError):
    """Raised when compilation is asked for an origin with no context."""

    code = "UNSUPPORTED_ORIGIN"


class AllocationFailureError(SassCommandError):
    """Raised when a native object could not be created."""

    code = "ALLOCATION_FAILURE"


class OptionSetterMissingError(SassCommandError):
    """Raised for a registry entry that has no setter and is not inert."""

    code = "SETTER_MISSING"


class CompilationError(SassCommandError):
    """Raised by the Python convenience API when libsass reports an error."""

    code = "COMPILATION"

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        status: int = 1,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
        self.status = status


class LifecycleError(SassCommandError):
    """Raised when the package cannot be registered into or removed from a host."""

    code = "LIFECYCLE"
