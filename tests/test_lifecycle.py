"""Tests for sasscmd/lifecycle.py: registration, unload and the exit handler."""

from __future__ import annotations

import logging

import pytest

from sasscmd.config import Settings
from sasscmd.dispatcher import SassCommand
from sasscmd.errors import LifecycleError
from sasscmd.host import CommandHost
from sasscmd.lifecycle import SassPackage, UnloadFlags


@pytest.fixture
def package(exit_handlers):
    return SassPackage()


def test_init_registers_command(package, exit_handlers):
    host = CommandHost()
    package.init(host)
    assert host.has_command("sass")
    assert host.packages == {"sass": "1.0"}
    token = host.get_assoc_data("sass")
    assert token.name == "sass"
    assert isinstance(token.proc, SassCommand)
    assert exit_handlers == [package._exit_proc]


def test_registered_command_compiles(host):
    outcome = host.eval("sass", "compile", "a { b: c; }")
    assert outcome.ok
    assert outcome.result["errorStatus"] == 0


def test_exit_handler_registered_once(package, exit_handlers):
    package.init(CommandHost())
    package.init(CommandHost())
    package.safe_init(CommandHost(safe=True))
    assert exit_handlers == [package._exit_proc]
    assert package.exit_handler_installed


def test_unload_from_interpreter_keeps_exit_handler(package, exit_handlers):
    host = CommandHost()
    package.init(host)
    package.unload(host, UnloadFlags.DETACH_FROM_INTERPRETER)
    assert not host.has_command("sass")
    assert host.get_assoc_data("sass") is None
    assert "sass" not in host.packages
    assert exit_handlers == [package._exit_proc]


def test_unload_from_process_removes_exit_handler(package, exit_handlers):
    host = CommandHost()
    package.init(host)
    package.safe_unload(host, UnloadFlags.DETACH_FROM_PROCESS)
    assert exit_handlers == []
    assert not package.exit_handler_installed


def test_unload_without_host(package, exit_handlers):
    package.init(CommandHost())
    package.unload(None, UnloadFlags.DETACH_FROM_PROCESS)
    assert exit_handlers == []


def test_unload_after_command_was_deleted(package):
    host = CommandHost()
    package.init(host)
    host.delete_command_from_token(host.get_assoc_data("sass"))
    assert host.get_assoc_data("sass") is None
    package.unload(host)
    assert not host.has_command("sass")


def test_unload_leaves_replacement_command(package):
    host = CommandHost()
    package.init(host)
    host.create_command("sass", SassCommand())
    package.unload(host)
    assert host.has_command("sass")


def test_failed_init_cleans_up(package):
    host = CommandHost()
    host.provide_package("sass", "0.9")
    with pytest.raises(LifecycleError):
        package.init(host)
    assert not host.has_command("sass")
    assert host.get_assoc_data("sass") is None


def test_exit_proc_logs_failed_teardown(package, monkeypatch, caplog):
    def fail(host, flags=UnloadFlags.NONE):
        raise LifecycleError("host already gone")

    monkeypatch.setattr(package, "unload", fail)
    with caplog.at_level(logging.CRITICAL, logger="sasscmd.lifecycle"):
        package._exit_proc()
    assert "Unload failed via exit handler" in caplog.text


def test_command_name_from_settings(monkeypatch, exit_handlers):
    monkeypatch.setenv("SASS_COMMAND_NAME", "scss")
    package = SassPackage(Settings())
    host = CommandHost()
    package.init(host)
    assert host.has_command("scss")
    assert host.eval("scss", "version").ok
    package.unload(host, UnloadFlags.DETACH_FROM_PROCESS)


def test_unload_flags_are_distinct():
    flags = [
        UnloadFlags.DETACH_FROM_INTERPRETER,
        UnloadFlags.DETACH_FROM_PROCESS,
        UnloadFlags.FROM_INIT,
    ]
    assert len({int(flag) for flag in flags}) == 3
    assert not UnloadFlags.FROM_INIT & UnloadFlags.DETACH_FROM_PROCESS
