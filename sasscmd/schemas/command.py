"""Pydantic schemas for command invocations and their outcomes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommandRequest(BaseModel):
    """Arguments of one ``sass`` command, verb first."""

    args: list[Any] = Field(default_factory=list, max_length=64)


class CommandOutcome(BaseModel):
    """What a host gets back: a result on success, a message otherwise."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    result: Any = None
    error: str | None = None
    error_code: str | None = Field(default=None, alias="errorCode")

    @classmethod
    def success(cls, result: Any) -> CommandOutcome:
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, error: str, error_code: str) -> CommandOutcome:
        return cls(ok=False, error=error, error_code=error_code)


class VersionInfo(BaseModel):
    library: str
    version: str
