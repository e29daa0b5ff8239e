"""Shared fixtures for dockhand unit tests."""

from __future__ import annotations

import os
import shutil
import tempfile

import pytest

from fakes import FakeDaemon


@pytest.fixture
def socket_dir():
    # Kept short: AF_UNIX paths are limited to ~108 bytes.
    path = tempfile.mkdtemp(prefix="dh-")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fake_daemon(socket_dir):
    """Factory starting FakeDaemon instances that are stopped after the test."""
    daemons: list[FakeDaemon] = []

    def start(response: bytes = b"", *, hang: bool = False) -> FakeDaemon:
        path = os.path.join(socket_dir, f"d{len(daemons)}.sock")
        daemon = FakeDaemon(path, response, hang=hang).start()
        daemons.append(daemon)
        return daemon

    yield start
    for daemon in daemons:
        daemon.stop()
