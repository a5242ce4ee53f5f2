"""Read a compiled context into a result record."""

from __future__ import annotations

from sasscmd.engine import CompilationContext
from sasscmd.schemas.result import (
    CompilationFailure,
    CompilationResult,
    CompilationSuccess,
)


def marshal(context: CompilationContext) -> CompilationResult:
    """Build the result for ``context`` without changing or releasing it.

    The source map is only reported when a non-empty ``source_map_file``
    option was set. Error positions are passed through as libsass gave them.
    """
    if context.error_status == 0:
        source_map = None
        if context.options is not None and context.options.source_map_file:
            source_map = context.source_map_string or ""
        return CompilationSuccess(
            output=context.output_string or "", source_map=source_map
        )
    return CompilationFailure(
        status=context.error_status,
        message=context.error_message or "",
        line=context.error_line,
        column=context.error_column,
    )
