"""Scanner for the flags that precede the source argument of ``compile``."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sasscmd.constants import FLAG_END, FLAG_OPTIONS, FLAG_TYPE, OriginKind
from sasscmd.engine import NativeOptions
from sasscmd.errors import ArgumentError, MalformedDictionaryError
from sasscmd.registry import apply_option, resolve_context_type

logger = logging.getLogger(__name__)


@dataclass
class CompilationRequest:
    """What one ``compile`` invocation asked for."""

    origin: OriginKind = OriginKind.UNSET
    source: Any = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class ParsedArguments:
    origin: OriginKind
    index: int | None
    request: CompilationRequest


def dictionary_pairs(value: Any) -> dict[str, Any]:
    """Turn an ``-options`` value into name/value pairs.

    Accepts a mapping, a flat list or tuple, or a string holding a
    whitespace-separated list. Repeated names keep their last value.
    """
    if isinstance(value, Mapping):
        return {str(name): raw for name, raw in value.items()}
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        try:
            items: list[Any] = shlex.split(value)
        except ValueError as exc:
            raise MalformedDictionaryError(f"malformed dictionary: {exc}") from exc
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise MalformedDictionaryError(
            f"malformed dictionary: expected key/value list but got "
            f"{type(value).__name__}"
        )
    if len(items) % 2:
        raise MalformedDictionaryError(
            f"malformed dictionary: {len(items)} elements is not an even count"
        )
    names = [item if isinstance(item, str) else str(item) for item in items[::2]]
    return dict(zip(names, items[1::2]))


def parse_options(
    args: Sequence[Any], start: int, options: NativeOptions
) -> ParsedArguments:
    """Scan ``args`` from ``start`` until the first non-option argument.

    ``-type`` takes a context type, ``-options`` takes a dictionary that is
    applied to ``options`` pair by pair, and ``--`` ends the scan with the
    following index. Any other token ends the scan at its own index. The
    first error aborts the scan; options already applied stay applied.
    """
    request = CompilationRequest()
    seen_options = False
    index = start
    count = len(args)

    while index < count:
        token = args[index]
        if token == FLAG_TYPE:
            index += 1
            if index >= count:
                raise ArgumentError("missing context type")
            request.origin = resolve_context_type(args[index])
            index += 1
        elif token == FLAG_OPTIONS:
            index += 1
            if index >= count:
                raise ArgumentError("missing options dictionary")
            if seen_options:
                raise ArgumentError(f'option "{FLAG_OPTIONS}" may only be given once')
            seen_options = True
            for name, raw in dictionary_pairs(args[index]).items():
                request.options[name] = apply_option(options, name, raw)
            index += 1
        elif token == FLAG_END:
            index += 1
            return _finish(request, index if index < count else None)
        else:
            return _finish(request, index)

    return _finish(request, None)


def _finish(request: CompilationRequest, index: int | None) -> ParsedArguments:
    if request.origin is OriginKind.UNSET:
        request.origin = OriginKind.DATA
    logger.debug(
        "Parsed compile flags: origin=%s options=%s next=%s",
        request.origin.value,
        sorted(request.options),
        index,
    )
    return ParsedArguments(origin=request.origin, index=index, request=request)
