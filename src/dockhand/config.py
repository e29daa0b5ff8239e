# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""dockhand configuration.

Settings are layered with systemd-style precedence:

1. $XDG_CONFIG_HOME/dockhand/dockhand.conf  (user overrides - highest priority)
2. /etc/dockhand/dockhand.conf              (admin/system overrides)

The environment beats both: DOCKER_HOST and DOCKER_API_VERSION are honoured
the same way the docker CLI honours them.

Configuration options (section [dockhand]):
- host: Docker host string, e.g. unix:///var/run/docker.sock
- api_version: API version path component, e.g. v1.53
- timeout: Per-request timeout in seconds
"""

from __future__ import annotations

import configparser
import logging
import os
from pathlib import Path
from typing import Mapping, NamedTuple

from .host import DEFAULT_HOST

logger = logging.getLogger(__name__)

SECTION = "dockhand"

DEFAULT_API_VERSION = "v1.53"
# Long enough for long-polling endpoints such as /containers/{id}/wait.
DEFAULT_TIMEOUT = 300.0


class DockhandConfig(NamedTuple):
    """Effective client configuration."""

    host: str
    api_version: str
    timeout: float


def get_config_paths(home_dir: str | None = None) -> list[Path]:
    """Get all config file paths in priority order (highest first).

    Args:
        home_dir: Home directory to use for user config. If None, uses current user's.
    """
    if home_dir:
        user_path = Path(home_dir) / ".config" / "dockhand" / "dockhand.conf"
    else:
        config_home = os.environ.get("XDG_CONFIG_HOME", "")
        if not config_home:
            config_home = os.path.expanduser("~/.config")
        user_path = Path(config_home) / "dockhand" / "dockhand.conf"

    return [user_path, Path("/etc/dockhand/dockhand.conf")]


def load_config(
    home_dir: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> DockhandConfig:
    """Load configuration from all config paths and the environment.

    Reads config files from lowest to highest priority, with higher
    priority values overriding lower ones, then applies the environment.

    Args:
        home_dir: Home directory to use for user config. If None, uses current user's.
        environ: Environment to read. Defaults to os.environ.
    """
    if environ is None:
        environ = os.environ

    host = DEFAULT_HOST
    api_version = DEFAULT_API_VERSION
    timeout = DEFAULT_TIMEOUT

    for config_path in reversed(get_config_paths(home_dir=home_dir)):
        if not config_path.exists():
            continue

        parser = configparser.ConfigParser()
        try:
            parser.read(config_path)
        except configparser.Error:
            logger.warning("Ignoring malformed config file %s", config_path)
            continue

        if not parser.has_section(SECTION):
            continue
        if parser.has_option(SECTION, "host"):
            host = parser.get(SECTION, "host")
        if parser.has_option(SECTION, "api_version"):
            api_version = parser.get(SECTION, "api_version")
        if parser.has_option(SECTION, "timeout"):
            try:
                timeout = parser.getfloat(SECTION, "timeout")
            except ValueError:
                logger.warning(
                    "Ignoring invalid timeout %r in %s",
                    parser.get(SECTION, "timeout"), config_path,
                )

    if environ.get("DOCKER_HOST"):
        host = environ["DOCKER_HOST"]
    if environ.get("DOCKER_API_VERSION"):
        api_version = environ["DOCKER_API_VERSION"]

    return DockhandConfig(host=host, api_version=normalize_api_version(api_version), timeout=timeout)


def normalize_api_version(version: str) -> str:
    """Return ``version`` with a leading ``v`` (``1.53`` -> ``v1.53``)."""
    version = version.strip().strip("/")
    if version and not version.startswith("v"):
        version = f"v{version}"
    return version
