# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest configuration for dockhand integration tests.

These talk to a real Docker daemon. They are skipped unless the daemon's
Unix socket exists (DOCKER_HOST, or /var/run/docker.sock).
"""

from __future__ import annotations

import os

import pytest

from dockhand.host import UnixSocket, resolve_host


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(scope="session")
def docker_socket() -> str:
    """Path of the daemon socket, or skip the test."""
    target = resolve_host()
    if not isinstance(target, UnixSocket) or not os.path.exists(target.path):
        pytest.skip("no Docker daemon socket available")
    return target.path
