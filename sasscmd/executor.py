"""Run one libsass compilation for a resolved origin kind."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from sasscmd import engine
from sasscmd.constants import OriginKind
from sasscmd.engine import CompilationContext, NativeOptions, SourceBuffer
from sasscmd.errors import ArgumentTypeError, UnsupportedOriginKindError
from sasscmd.observability.metrics import COMPILE_COUNTER, COMPILE_LATENCY
from sasscmd.observability.tracing import tracer

logger = logging.getLogger(__name__)


@contextmanager
def execute(
    origin: OriginKind,
    options: NativeOptions | None,
    source: str | bytes,
) -> Iterator[tuple[CompilationContext, int]]:
    """Create, configure and compile a context, then yield it for reading.

    ``options`` is attached to the context when given and belongs to it from
    then on. For data input the payload is copied into a ``SourceBuffer``
    that stays owned here; it is released after the context is destroyed.
    Both are released when the ``with`` block exits, however it exits.
    """
    buffer: SourceBuffer | None = None
    if origin is OriginKind.FILE:
        context: CompilationContext = engine.make_file_context(_as_text(source))
    elif origin is OriginKind.DATA:
        buffer = SourceBuffer.duplicate(
            source if isinstance(source, bytes) else str(source),
            input_path=options.input_path if options else "",
            indented=options.is_indented_syntax_src if options else False,
        )
        try:
            context = engine.make_data_context(buffer)
        except BaseException:
            buffer.release()
            raise
    else:
        raise UnsupportedOriginKindError(
            f'unsupported origin kind "{origin.value}": must be data or file'
        )

    try:
        if options is not None:
            context.attach_options(options)
        with tracer.start_as_current_span("sass.compile") as span:
            span.set_attribute("sass.origin", origin.value)
            start = time.perf_counter()
            status = context.compile()
            COMPILE_LATENCY.labels(origin.value).observe(time.perf_counter() - start)
            span.set_attribute("sass.status", status)
        COMPILE_COUNTER.labels(origin.value, "ok" if status == 0 else "error").inc()
        logger.debug("Compiled %s context, status=%s", origin.value, status)
        yield context, status
    finally:
        context.destroy()
        if buffer is not None:
            buffer.release()


def _as_text(source: str | bytes) -> str:
    if isinstance(source, bytes):
        try:
            return source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ArgumentTypeError(
                f"expected UTF-8 file path but got {source!r}"
            ) from exc
    return str(source)
