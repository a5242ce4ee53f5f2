"""Option registry and value resolvers.

Each registry entry is tagged with the kind of value it accepts and carries a
setter for that kind. Resolution picks the resolver for the entry's kind from
a single kind-to-resolver table, then hands the typed value to the setter.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sasscmd.constants import (
    CONTEXT_TYPES,
    OUTPUT_STYLES,
    OriginKind,
    join_choices,
)
from sasscmd.engine import NativeOptions
from sasscmd.errors import (
    ArgumentTypeError,
    OptionSetterMissingError,
    UnknownOptionError,
    UnsupportedContextTypeError,
)

TRUE_LITERALS = frozenset({"1", "true", "yes", "on"})
FALSE_LITERALS = frozenset({"0", "false", "no", "off"})

# libsass stores integer options in a C int.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class ValueKind(str, Enum):
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"
    OUTPUT_STYLE = "output_style"


@dataclass(frozen=True, slots=True)
class OptionDescriptor:
    """One entry of the option schema."""

    name: str
    kind: ValueKind
    setter: Callable[[NativeOptions, Any], None] | None
    inert: bool = False


# ==========================================
# Value resolvers
# ==========================================
def resolve_integer(raw: Any) -> int:
    value: int | None = None
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        try:
            value = int(text.strip(), 10)
        except ValueError:
            value = None
    if value is not None and INT_MIN <= value <= INT_MAX:
        return value
    raise ArgumentTypeError(f'expected integer but got "{raw}"')


def resolve_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        literal = raw.strip().lower()
        if literal in TRUE_LITERALS:
            return True
        if literal in FALSE_LITERALS:
            return False
    raise ArgumentTypeError(f'expected boolean value but got "{raw}"')


def resolve_string(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ArgumentTypeError(f"expected UTF-8 string but got {raw!r}") from exc
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    raise ArgumentTypeError(f"expected string but got {type(raw).__name__}")


def resolve_output_style(raw: Any) -> str:
    if isinstance(raw, str) and raw in OUTPUT_STYLES:
        return raw
    raise ArgumentTypeError(
        f'bad output style "{raw}": must be {join_choices(OUTPUT_STYLES)}'
    )


def resolve_context_type(raw: Any) -> OriginKind:
    """Resolve the ``-type`` flag value; it is not a dictionary option."""
    if isinstance(raw, str) and raw in CONTEXT_TYPES:
        return OriginKind(raw)
    raise UnsupportedContextTypeError(
        f'unsupported context type "{raw}": must be {join_choices(CONTEXT_TYPES)}'
    )


RESOLVERS: dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.INTEGER: resolve_integer,
    ValueKind.BOOLEAN: resolve_boolean,
    ValueKind.STRING: resolve_string,
    ValueKind.OUTPUT_STYLE: resolve_output_style,
}

if set(RESOLVERS) != set(ValueKind):  # pragma: no cover - import-time guard
    raise RuntimeError("every value kind needs a resolver")


# ==========================================
# Registry
# ==========================================
OPTIONS: tuple[OptionDescriptor, ...] = (
    OptionDescriptor("precision", ValueKind.INTEGER, NativeOptions.set_precision),
    OptionDescriptor(
        "output_style", ValueKind.OUTPUT_STYLE, NativeOptions.set_output_style
    ),
    OptionDescriptor(
        "source_comments", ValueKind.BOOLEAN, NativeOptions.set_source_comments
    ),
    OptionDescriptor(
        "source_map_embed", ValueKind.BOOLEAN, NativeOptions.set_source_map_embed
    ),
    OptionDescriptor(
        "source_map_contents",
        ValueKind.BOOLEAN,
        NativeOptions.set_source_map_contents,
    ),
    OptionDescriptor(
        "omit_source_map_url",
        ValueKind.BOOLEAN,
        NativeOptions.set_omit_source_map_url,
    ),
    OptionDescriptor(
        "is_indented_syntax_src",
        ValueKind.BOOLEAN,
        NativeOptions.set_is_indented_syntax_src,
    ),
    OptionDescriptor("indent", ValueKind.STRING, NativeOptions.set_indent),
    OptionDescriptor("linefeed", ValueKind.STRING, NativeOptions.set_linefeed),
    OptionDescriptor("input_path", ValueKind.STRING, NativeOptions.set_input_path),
    OptionDescriptor("output_path", ValueKind.STRING, NativeOptions.set_output_path),
    # libsass has no image path setting; the key is accepted and ignored.
    OptionDescriptor("image_path", ValueKind.STRING, None, inert=True),
    OptionDescriptor(
        "include_path", ValueKind.STRING, NativeOptions.set_include_path
    ),
    OptionDescriptor(
        "source_map_file", ValueKind.STRING, NativeOptions.set_source_map_file
    ),
)

OPTION_NAMES: tuple[str, ...] = tuple(descriptor.name for descriptor in OPTIONS)


def lookup(
    name: str, registry: tuple[OptionDescriptor, ...] = OPTIONS
) -> OptionDescriptor:
    """Find a descriptor by exact name."""
    for descriptor in registry:
        if descriptor.name == name:
            return descriptor
    valid_names = tuple(descriptor.name for descriptor in registry)
    raise UnknownOptionError(
        f'bad option "{name}": must be {join_choices(valid_names)}', valid_names
    )


def resolve(
    name: str, raw: Any, registry: tuple[OptionDescriptor, ...] = OPTIONS
) -> tuple[OptionDescriptor, Any]:
    descriptor = lookup(name, registry)
    return descriptor, RESOLVERS[descriptor.kind](raw)


def apply_option(
    options: NativeOptions,
    name: str,
    raw: Any,
    registry: tuple[OptionDescriptor, ...] = OPTIONS,
) -> Any:
    """Resolve ``raw`` for option ``name`` and store it in ``options``."""
    descriptor, value = resolve(name, raw, registry)
    if descriptor.setter is None:
        if descriptor.inert:
            return value
        raise OptionSetterMissingError(f'option "{name}" has no native setter')
    descriptor.setter(options, value)
    return value
