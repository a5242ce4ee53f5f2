"""Pydantic schemas for compilation results."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, field_validator

from sasscmd.constants import (
    KEY_ERROR_COLUMN,
    KEY_ERROR_LINE,
    KEY_ERROR_MESSAGE,
    KEY_ERROR_STATUS,
    KEY_OUTPUT_STRING,
    KEY_SOURCE_MAP_STRING,
)


class CompilationSuccess(BaseModel):
    """CSS produced by libsass, with the source map when one was requested."""

    kind: Literal["success"] = "success"
    output: str
    source_map: str | None = None

    @property
    def status(self) -> int:
        return 0

    def as_result(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            KEY_ERROR_STATUS: 0,
            KEY_OUTPUT_STRING: self.output,
        }
        if self.source_map is not None:
            result[KEY_SOURCE_MAP_STRING] = self.source_map
        return result


class CompilationFailure(BaseModel):
    """Diagnostic reported by libsass. Positions are 1-based when present."""

    kind: Literal["failure"] = "failure"
    status: int
    message: str
    line: int | None = None
    column: int | None = None

    @field_validator("status")
    @classmethod
    def status_is_an_error(cls, value: int) -> int:
        if value == 0:
            raise ValueError("a failed compilation has a nonzero status")
        return value

    def as_result(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            KEY_ERROR_STATUS: self.status,
            KEY_ERROR_MESSAGE: self.message,
        }
        if self.line is not None:
            result[KEY_ERROR_LINE] = self.line
        if self.column is not None:
            result[KEY_ERROR_COLUMN] = self.column
        return result


CompilationResult = CompilationSuccess | CompilationFailure
