"""The ``sass`` command: verb resolution and the compile pipeline."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sasscmd import engine
from sasscmd.constants import (
    COMMAND_NAME,
    FLAG_END,
    FLAG_OPTIONS,
    FLAG_TYPE,
    LIBRARY_NAME,
    VERB_COMPILE,
    VERB_VERSION,
    VERBS,
    join_choices,
)
from sasscmd.errors import (
    ArgumentArityError,
    CompilationError,
    SassCommandError,
    UnknownVerbError,
)
from sasscmd.executor import execute
from sasscmd.marshal import marshal
from sasscmd.observability.metrics import COMMAND_ERRORS
from sasscmd.parser import parse_options
from sasscmd.schemas.command import CommandOutcome
from sasscmd.schemas.result import CompilationFailure, CompilationResult

logger = logging.getLogger(__name__)


class SassCommand:
    """Dispatches ``compile ?options? source`` and ``version``.

    ``invoke`` raises :class:`SassCommandError` subclasses; calling the
    command object recovers them into a failed :class:`CommandOutcome`,
    which is what hosts receive.
    """

    def __init__(self, name: str = COMMAND_NAME) -> None:
        self.name = name

    def __call__(self, *args: Any) -> CommandOutcome:
        return dispatch(args, self)

    def invoke(self, *args: Any) -> Any:
        if not args:
            raise ArgumentArityError(
                f'wrong # args: should be "{self.name} option ?arg ...?"'
            )
        verb = args[0]
        if verb == VERB_COMPILE:
            return self.compile_command(args)
        if verb == VERB_VERSION:
            return self.version_command(args)
        raise UnknownVerbError(f'bad option "{verb}": must be {join_choices(VERBS)}')

    def compile_command(self, args: Sequence[Any]) -> dict[str, Any]:
        if len(args) < 2:
            raise self._compile_usage()
        return self.run_compile(args, 1).as_result()

    def version_command(self, args: Sequence[Any]) -> list[str]:
        if len(args) != 1:
            raise ArgumentArityError(
                f'wrong # args: should be "{self.name} {VERB_VERSION}"'
            )
        return [LIBRARY_NAME, engine.libsass_version()]

    def run_compile(self, args: Sequence[Any], start: int) -> CompilationResult:
        """Parse flags from ``start``, compile the remaining source argument."""
        options = engine.make_options()
        try:
            parsed = parse_options(args, start, options)
            if parsed.index is None or parsed.index != len(args) - 1:
                raise self._compile_usage()
            source = args[parsed.index]
            parsed.request.source = source
            with execute(parsed.origin, options, source) as (context, _status):
                return marshal(context)
        finally:
            if not options.released:
                options.release()

    def _compile_usage(self) -> ArgumentArityError:
        return ArgumentArityError(
            f'wrong # args: should be "{self.name} {VERB_COMPILE} ?options? source"'
        )


def dispatch(args: Sequence[Any], command: SassCommand | None = None) -> CommandOutcome:
    """Run one command and turn any command error into a failed outcome."""
    command = command or SassCommand()
    try:
        return CommandOutcome.success(command.invoke(*args))
    except SassCommandError as exc:
        COMMAND_ERRORS.labels(exc.code).inc()
        logger.info("%s command rejected: %s", command.name, exc.message)
        return CommandOutcome.failure(exc.message, exc.code)


def compile_css(source: str, origin: str = "data", **options: Any) -> str:
    """Compile ``source`` and return the CSS, raising on libsass errors.

    ``origin`` is ``"data"`` for inline text or ``"file"`` for a path;
    keyword arguments are option names from the registry.
    """
    args: list[Any] = [VERB_COMPILE, FLAG_TYPE, origin]
    if options:
        args += [FLAG_OPTIONS, options]
    args += [FLAG_END, source]
    result = SassCommand().run_compile(args, 1)
    if isinstance(result, CompilationFailure):
        raise CompilationError(
            result.message, result.line, result.column, result.status
        )
    return result.output
