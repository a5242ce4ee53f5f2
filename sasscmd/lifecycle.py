"""Registration of the ``sass`` command into a host and process teardown."""

from __future__ import annotations

import atexit
import logging
from enum import IntFlag

from sasscmd.config import Settings, settings
from sasscmd.dispatcher import SassCommand
from sasscmd.errors import LifecycleError
from sasscmd.host import CommandHost

logger = logging.getLogger(__name__)


class UnloadFlags(IntFlag):
    NONE = 0
    DETACH_FROM_INTERPRETER = 1 << 0
    DETACH_FROM_PROCESS = 1 << 1
    # Cleanup after a failed init; never passed by hosts.
    FROM_INIT = 1 << 2


class SassPackage:
    """Installs the command into hosts and owns the process exit handler.

    ``init`` registers the command and keeps its token as host association
    data so ``unload`` can delete exactly that command later. The exit
    handler is registered at most once per process no matter how many hosts
    load the package.
    """

    def __init__(self, config: Settings = settings) -> None:
        self.command_name = config.command_name
        self.package_name = config.package_name
        self.package_version = config.package_version
        self.exit_handler_installed = False

    def init(self, host: CommandHost) -> None:
        if host is None:
            raise LifecycleError("no host to initialize")

        self._remove_exit_handler()
        self._install_exit_handler()

        try:
            token = host.create_command(
                self.command_name,
                SassCommand(self.command_name),
                delete_proc=lambda: host.delete_assoc_data(self.package_name),
            )
            host.set_assoc_data(self.package_name, token)
            host.provide_package(self.package_name, self.package_version)
        except LifecycleError:
            self._cleanup_failed_init(host)
            raise
        logger.debug(
            "Loaded package %s %s (safe=%s)",
            self.package_name,
            self.package_version,
            host.safe,
        )

    def safe_init(self, host: CommandHost) -> None:
        self.init(host)

    def unload(
        self,
        host: CommandHost | None,
        flags: UnloadFlags = UnloadFlags.DETACH_FROM_INTERPRETER,
    ) -> None:
        """Remove the command from ``host`` and, when leaving the process,
        the exit handler as well."""
        ok = False
        try:
            if host is not None:
                token = host.get_assoc_data(self.package_name)
                if token is not None:
                    host.delete_command_from_token(token)
                host.delete_assoc_data(self.package_name)
                host.packages.pop(self.package_name, None)
            if flags & UnloadFlags.DETACH_FROM_PROCESS:
                self._remove_exit_handler()
            ok = True
        finally:
            logger.debug("Unload(host=%r, flags=%#x, ok=%s)", host, int(flags), ok)

    def safe_unload(
        self,
        host: CommandHost | None,
        flags: UnloadFlags = UnloadFlags.DETACH_FROM_INTERPRETER,
    ) -> None:
        self.unload(host, flags)

    def _cleanup_failed_init(self, host: CommandHost) -> None:
        try:
            self.unload(host, UnloadFlags.FROM_INIT)
        except LifecycleError:
            logger.critical("Unload failed via init for package %s", self.package_name)

    def _exit_proc(self) -> None:
        try:
            self.unload(None, UnloadFlags.DETACH_FROM_PROCESS)
        except LifecycleError:
            logger.critical(
                "Unload failed via exit handler for package %s", self.package_name
            )

    def _install_exit_handler(self) -> None:
        atexit.register(self._exit_proc)
        self.exit_handler_installed = True

    def _remove_exit_handler(self) -> None:
        atexit.unregister(self._exit_proc)
        self.exit_handler_installed = False


sass_package = SassPackage()
