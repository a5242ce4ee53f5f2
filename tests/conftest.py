"""Shared fixtures: sample stylesheets, a command host, and the API client."""

from __future__ import annotations

import atexit

import pytest
from fastapi.testclient import TestClient

from sasscmd.host import CommandHost
from sasscmd.lifecycle import UnloadFlags, sass_package

VALID_SCSS = "$accent: #336699;\n.panel {\n  color: $accent;\n  .title { margin: 0; }\n}\n"
VALID_SASS = ".panel\n  color: red\n"
BROKEN_SCSS = ".panel {\n  color: red;\n"
SIMPLE_SCSS = "a { b: c; }"


@pytest.fixture
def exit_handlers(monkeypatch):
    """Record atexit registrations instead of touching the real registry."""
    registered: list = []

    def register(func, *args, **kwargs):
        registered.append(func)
        return func

    def unregister(func):
        registered[:] = [item for item in registered if item != func]

    monkeypatch.setattr(atexit, "register", register)
    monkeypatch.setattr(atexit, "unregister", unregister)
    return registered


@pytest.fixture
def host(exit_handlers):
    command_host = CommandHost()
    sass_package.init(command_host)
    yield command_host
    sass_package.unload(command_host, UnloadFlags.DETACH_FROM_PROCESS)


@pytest.fixture
def scss_file(tmp_path):
    path = tmp_path / "style.scss"
    path.write_text(VALID_SCSS, encoding="utf-8")
    return path


@pytest.fixture(scope="session")
def client():
    from sasscmd.main import app

    with TestClient(app) as test_client:
        yield test_client
