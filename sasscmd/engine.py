"""libsass adapter exposing the create/configure/compile/destroy lifecycle.

``sass.compile`` is a one-shot call. The command layer needs the staged
native contract instead: an options block populated by setters, a context
created per origin kind, a single compile, readable result fields, and an
explicit destroy. This module provides that contract on top of libsass.
"""

from __future__ import annotations

import base64
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any

import sass

from sasscmd.constants import (
    DEFAULT_INDENT,
    DEFAULT_LINEFEED,
    DEFAULT_OUTPUT_STYLE,
    DEFAULT_PRECISION,
    OriginKind,
)
from sasscmd.errors import AllocationFailureError

logger = logging.getLogger(__name__)

ERROR_STATUS = 1

# libsass ends its formatted messages with "on line L:C of <path>".
POSITION_PATTERN = re.compile(r"on line (\d+)(?::(\d+))?")

# Inline source map appended to the CSS by source_map_embed.
EMBEDDED_MAP_PATTERN = re.compile(
    r"(sourceMappingURL=data:application/json;(?:charset=utf-8;)?base64,)([A-Za-z0-9+/=]+)"
)

STDIN_NAME = "stdin"


def libsass_version() -> str:
    """Return the version string of the linked libsass."""
    return sass.libsass_version


class NativeOptions:
    """Option block consumed by a compilation context.

    A fresh block belongs to whoever created it. Attaching it to a context
    transfers ownership: the context releases it on destroy and the creator
    must no longer release it.
    """

    def __init__(self) -> None:
        self.precision = DEFAULT_PRECISION
        self.output_style = DEFAULT_OUTPUT_STYLE
        self.source_comments = False
        self.source_map_embed = False
        self.source_map_contents = False
        self.omit_source_map_url = False
        self.is_indented_syntax_src = False
        self.indent = DEFAULT_INDENT
        self.linefeed = DEFAULT_LINEFEED
        self.input_path = ""
        self.output_path = ""
        self.include_path = ""
        self.source_map_file = ""
        self.owner: CompilationContext | None = None
        self.released = False

    @property
    def attached(self) -> bool:
        return self.owner is not None

    def _check_live(self) -> None:
        if self.released:
            raise RuntimeError("options block used after release")

    def set_precision(self, value: int) -> None:
        self._check_live()
        self.precision = value

    def set_output_style(self, value: str) -> None:
        self._check_live()
        self.output_style = value

    def set_source_comments(self, value: bool) -> None:
        self._check_live()
        self.source_comments = value

    def set_source_map_embed(self, value: bool) -> None:
        self._check_live()
        self.source_map_embed = value

    def set_source_map_contents(self, value: bool) -> None:
        self._check_live()
        self.source_map_contents = value

    def set_omit_source_map_url(self, value: bool) -> None:
        self._check_live()
        self.omit_source_map_url = value

    def set_is_indented_syntax_src(self, value: bool) -> None:
        self._check_live()
        self.is_indented_syntax_src = value

    def set_indent(self, value: str) -> None:
        self._check_live()
        self.indent = value

    def set_linefeed(self, value: str) -> None:
        self._check_live()
        self.linefeed = value

    def set_input_path(self, value: str) -> None:
        self._check_live()
        self.input_path = value

    def set_output_path(self, value: str) -> None:
        self._check_live()
        self.output_path = value

    def set_include_path(self, value: str) -> None:
        self._check_live()
        self.include_path = value

    def set_source_map_file(self, value: str) -> None:
        self._check_live()
        self.source_map_file = value

    def include_paths(self) -> list[str]:
        return [item for item in self.include_path.split(os.pathsep) if item]

    def release(self) -> None:
        """Release a block that was never attached to a context."""
        if self.owner is not None:
            raise RuntimeError("options block is owned by a compilation context")
        self.released = True


def make_options() -> NativeOptions:
    return NativeOptions()


class SourceBuffer:
    """Private on-disk duplicate of an inline source payload.

    The buffer always stays with the caller that created it; contexts only
    read from it. ``release`` must run after the reading context is destroyed.
    """

    def __init__(
        self,
        directory: str,
        path: Path,
        import_root: str | None,
        display_name: str = STDIN_NAME,
    ) -> None:
        self.directory = directory
        self.path = path
        self.import_root = import_root
        self.display_name = display_name
        self.released = False

    @classmethod
    def duplicate(
        cls,
        payload: str | bytes,
        input_path: str = "",
        indented: bool = False,
    ) -> SourceBuffer:
        suffix = ".sass" if indented else ".scss"
        stem = Path(input_path).stem if input_path else STDIN_NAME
        import_root = str(Path(input_path).resolve().parent) if input_path else None
        directory = ""
        try:
            directory = tempfile.mkdtemp(prefix="sasscmd-")
            path = Path(directory) / f"{stem or STDIN_NAME}{suffix}"
            if isinstance(payload, bytes):
                path.write_bytes(payload)
            else:
                path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            if directory:
                shutil.rmtree(directory, ignore_errors=True)
            raise AllocationFailureError(
                f"source buffer allocation failed: {exc}"
            ) from exc
        logger.debug("Allocated source buffer %s", path)
        return cls(directory, path, import_root, input_path or STDIN_NAME)

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        try:
            shutil.rmtree(self.directory)
        except OSError:
            logger.warning("Could not remove source buffer %s", self.directory)


class CompilationContext:
    """One compilation: attach options, compile once, read, destroy."""

    origin = OriginKind.UNSET

    def __init__(self) -> None:
        self.options: NativeOptions | None = None
        self.error_status = 0
        self.output_string: str | None = None
        self.source_map_string: str | None = None
        self.error_message: str | None = None
        self.error_line: int | None = None
        self.error_column: int | None = None
        self.compiled = False
        self.destroyed = False

    def _check_live(self) -> None:
        if self.destroyed:
            raise RuntimeError("compilation context used after destroy")

    def attach_options(self, options: NativeOptions) -> None:
        self._check_live()
        if self.compiled:
            raise RuntimeError("options must be attached before compiling")
        if self.options is not None:
            raise RuntimeError("compilation context already has options")
        if options.released or options.owner is not None:
            raise RuntimeError("options block is not available for attachment")
        options.owner = self
        self.options = options

    def input_file(self) -> str:
        raise NotImplementedError

    def include_paths(self, options: NativeOptions) -> list[str]:
        return options.include_paths()

    def engine_arguments(self, options: NativeOptions) -> dict[str, Any]:
        arguments: dict[str, Any] = {
            "filename": self.input_file(),
            "output_style": options.output_style,
            "source_comments": options.source_comments,
            "precision": options.precision,
            "include_paths": self.include_paths(options),
            "source_map_contents": options.source_map_contents,
            "source_map_embed": options.source_map_embed,
            "omit_source_map_url": options.omit_source_map_url,
        }
        if options.source_map_file:
            arguments["source_map_filename"] = options.source_map_file
        if options.output_path:
            arguments["output_filename_hint"] = options.output_path
        return arguments

    def compile(self) -> int:
        """Run libsass once and return the native status code."""
        self._check_live()
        if self.compiled:
            raise RuntimeError("compilation context already compiled")
        self.compiled = True
        options = self.options or NativeOptions()
        try:
            result = sass.compile(**self.engine_arguments(options))
        except sass.CompileError as exc:
            self._record_failure(self.present(str(exc), options))
        except OSError:
            self._record_failure(
                self.present(
                    f"File to read not found or unreadable: {self.input_file()}",
                    options,
                )
            )
        else:
            if isinstance(result, tuple):
                css, source_map = result
            else:
                css, source_map = result, None
            self.output_string = apply_formatting(
                self.present(css, options), options.indent, options.linefeed
            )
            if source_map is not None:
                source_map = self.present(source_map, options)
            self.source_map_string = source_map
        return self.error_status

    def present(self, text: str, options: NativeOptions) -> str:
        """Adjust engine text before it is stored on the context."""
        return text

    def _record_failure(self, message: str) -> None:
        self.error_status = ERROR_STATUS
        self.error_message = message
        match = POSITION_PATTERN.search(message)
        if match:
            self.error_line = int(match.group(1))
            if match.group(2) is not None:
                self.error_column = int(match.group(2))

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        if self.options is not None:
            self.options.owner = None
            self.options.released = True


class FileContext(CompilationContext):
    origin = OriginKind.FILE

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path

    def input_file(self) -> str:
        return self.path


class DataContext(CompilationContext):
    """Context compiling a duplicated inline payload it does not own."""

    origin = OriginKind.DATA

    def __init__(self, buffer: SourceBuffer) -> None:
        super().__init__()
        if buffer.released:
            raise AllocationFailureError("source buffer was already released")
        self.buffer = buffer

    def input_file(self) -> str:
        return str(self.buffer.path)

    def include_paths(self, options: NativeOptions) -> list[str]:
        paths = options.include_paths()
        if self.buffer.import_root:
            paths.insert(0, self.buffer.import_root)
        return paths

    def present(self, text: str, options: NativeOptions) -> str:
        """Replace the spool location with the buffer's display name.

        libsass names the compiled file in source comments, diagnostics and
        source maps, relative to the working directory or to the output and
        map locations. None of those spellings may leak the temporary path.
        """
        aliases = self.spool_aliases(options)
        text = _replace_aliases(text, aliases)
        return EMBEDDED_MAP_PATTERN.sub(
            lambda match: match.group(1) + _rewrite_base64(match.group(2), aliases),
            text,
        )

    def spool_aliases(self, options: NativeOptions) -> list[tuple[str, str]]:
        """Return (spelling, replacement) pairs, longest spelling first."""
        files = {str(self.buffer.path), os.path.realpath(self.buffer.path)}
        directories = {self.buffer.directory, os.path.realpath(self.buffer.directory)}
        bases = {os.getcwd()}
        for target in (options.source_map_file, options.output_path):
            if target:
                bases.add(os.path.dirname(os.path.abspath(target)))
        for base in list(bases):
            for group in (files, directories):
                for path in list(group):
                    try:
                        group.add(os.path.relpath(path, base))
                    except ValueError:
                        continue
        aliases = {path: self.buffer.display_name for path in files}
        for directory in directories:
            if directory not in (os.curdir, ""):
                aliases[directory + "/"] = ""
        return sorted(aliases.items(), key=lambda item: len(item[0]), reverse=True)


def make_file_context(path: str) -> FileContext:
    return FileContext(path)


def make_data_context(buffer: SourceBuffer) -> DataContext:
    return DataContext(buffer)


def _replace_aliases(text: str, aliases: list[tuple[str, str]]) -> str:
    for spelling, replacement in aliases:
        text = text.replace(spelling, replacement)
    return text


def _rewrite_base64(encoded: str, aliases: list[tuple[str, str]]) -> str:
    decoded = base64.b64decode(encoded).decode("utf-8")
    return base64.b64encode(_replace_aliases(decoded, aliases).encode("utf-8")).decode(
        "ascii"
    )


def apply_formatting(css: str, indent: str, linefeed: str) -> str:
    """Re-emit libsass output with a custom indent and line terminator."""
    if indent == DEFAULT_INDENT and linefeed == DEFAULT_LINEFEED:
        return css
    lines = css.split(DEFAULT_LINEFEED)
    if indent != DEFAULT_INDENT:
        lines = [_reindent(line, indent) for line in lines]
    return linefeed.join(lines)


def _reindent(line: str, indent: str) -> str:
    body = line.lstrip(" ")
    leading = len(line) - len(body)
    depth, rest = divmod(leading, len(DEFAULT_INDENT))
    return f"{indent * depth}{' ' * rest}{body}"
