"""A small command host: named commands plus per-host association data.

This is the surface the package registers itself into. The HTTP service and
the CLI each own one host.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sasscmd.errors import LifecycleError
from sasscmd.schemas.command import CommandOutcome

logger = logging.getLogger(__name__)

CommandProc = Callable[..., CommandOutcome]


@dataclass(slots=True)
class CommandToken:
    """Handle for a registered command, used to delete exactly that command."""

    name: str
    proc: CommandProc
    delete_proc: Callable[[], None] | None = None


class CommandHost:
    def __init__(self, safe: bool = False) -> None:
        self.safe = safe
        self._commands: dict[str, CommandToken] = {}
        self._assoc_data: dict[str, Any] = {}
        self.packages: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create_command(
        self,
        name: str,
        proc: CommandProc,
        delete_proc: Callable[[], None] | None = None,
    ) -> CommandToken:
        """Register ``proc`` under ``name``, replacing any existing command."""
        if not name:
            raise LifecycleError("command creation failed: empty name")
        existing = self._commands.get(name)
        if existing is not None:
            self.delete_command_from_token(existing)
        token = CommandToken(name=name, proc=proc, delete_proc=delete_proc)
        self._commands[name] = token
        return token

    def delete_command_from_token(self, token: CommandToken) -> None:
        if self._commands.get(token.name) is not token:
            raise LifecycleError(f'command deletion failed: "{token.name}" not found')
        del self._commands[token.name]
        if token.delete_proc is not None:
            token.delete_proc()

    def has_command(self, name: str) -> bool:
        return name in self._commands

    def command_names(self) -> list[str]:
        return sorted(self._commands)

    # ------------------------------------------------------------------
    # Association data
    # ------------------------------------------------------------------
    def get_assoc_data(self, key: str) -> Any:
        return self._assoc_data.get(key)

    def set_assoc_data(self, key: str, value: Any) -> None:
        self._assoc_data[key] = value

    def delete_assoc_data(self, key: str) -> None:
        self._assoc_data.pop(key, None)

    # ------------------------------------------------------------------
    # Packages and evaluation
    # ------------------------------------------------------------------
    def provide_package(self, name: str, version: str) -> None:
        current = self.packages.get(name)
        if current is not None and current != version:
            raise LifecycleError(
                f'conflicting versions provided for package "{name}": '
                f"{current}, then {version}"
            )
        self.packages[name] = version

    def eval(self, name: str, *args: Any) -> CommandOutcome:
        token = self._commands.get(name)
        if token is None:
            return CommandOutcome.failure(
                f'invalid command name "{name}"', "UNKNOWN_COMMAND"
            )
        return token.proc(*args)

    def close(self) -> None:
        """Delete every command, as a host being torn down would."""
        for token in list(self._commands.values()):
            self.delete_command_from_token(token)
        self._assoc_data.clear()
