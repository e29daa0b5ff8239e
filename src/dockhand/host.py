# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Docker host string resolution.

Docker host strings use URI schemes to encode the transport:

    unix:///var/run/docker.sock   Unix-domain socket
    tcp://192.168.1.10:2375       plain TCP, rewritten to http://
    http://192.168.1.10:2375      plain HTTP over TCP
    https://192.168.1.10:2376     HTTPS over TCP

Parsing is pure; nothing here touches the network or the filesystem.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Union
from urllib.parse import urlsplit

from .errors import ConfigurationError

DEFAULT_HOST = "unix:///var/run/docker.sock"


@dataclass(frozen=True)
class UnixSocket:
    """Connect through the Unix-domain socket at ``path``."""

    path: str

    def __post_init__(self) -> None:
        if not self.path:
            raise ConfigurationError("unix socket path must not be empty")

    def __str__(self) -> str:
        return f"unix://{self.path}"


@dataclass(frozen=True)
class TCP:
    """Connect over HTTP(S) to ``base_url``."""

    base_url: str

    def __str__(self) -> str:
        return self.base_url


ConnectionTarget = Union[UnixSocket, TCP]


def parse(raw: str) -> ConnectionTarget:
    """Parse a Docker host string into a connection target.

    Args:
        raw: A host string, e.g. ``"unix:///var/run/docker.sock"`` or
            ``"tcp://192.168.1.10:2375"``.

    Returns:
        ``UnixSocket`` for ``unix://`` hosts, ``TCP`` for everything else.

    Raises:
        ConfigurationError: If ``raw`` is not a URI, has an unsupported
            scheme, or is a ``unix://`` URI without a socket path.
    """
    if not raw or any(c.isspace() for c in raw):
        raise ConfigurationError(f"invalid Docker host: {raw!r}")

    try:
        parts = urlsplit(raw)
        # Accessing .port validates it.
        parts.port
    except ValueError as e:
        raise ConfigurationError(f"invalid Docker host: {raw!r} ({e})") from None

    scheme = parts.scheme.lower()
    if not scheme:
        raise ConfigurationError(f"invalid Docker host: {raw!r} (missing scheme)")

    if scheme == "unix":
        if not parts.path:
            raise ConfigurationError(f"unix:// host has no socket path: {raw!r}")
        return UnixSocket(parts.path)

    if scheme == "tcp":
        if not parts.hostname:
            raise ConfigurationError(f"tcp:// host has no address: {raw!r}")
        return TCP("http" + raw[len("tcp"):])

    if scheme in ("http", "https"):
        if not parts.hostname:
            raise ConfigurationError(f"{scheme}:// host has no address: {raw!r}")
        return TCP(raw)

    raise ConfigurationError(f"unsupported Docker host scheme {parts.scheme!r} in {raw!r}")


def resolve_host(
    host: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ConnectionTarget:
    """Pick a connection target the way the docker CLI does.

    Order: explicit ``host``, then a non-empty ``DOCKER_HOST``, then the
    standard Linux socket.
    """
    if environ is None:
        environ = os.environ
    raw = host or environ.get("DOCKER_HOST") or DEFAULT_HOST
    return parse(raw)
