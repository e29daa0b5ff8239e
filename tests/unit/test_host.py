"""Tests for Docker host string resolution."""

import pytest

from dockhand.errors import ConfigurationError, ErrorKind
from dockhand.host import DEFAULT_HOST, TCP, UnixSocket, parse, resolve_host


def test_unix_socket():
    assert parse("unix:///var/run/docker.sock") == UnixSocket("/var/run/docker.sock")


def test_unix_socket_home_path():
    target = parse("unix:///Users/me/.docker/run/docker.sock")
    assert target == UnixSocket("/Users/me/.docker/run/docker.sock")


def test_tcp_rewritten_to_http():
    assert parse("tcp://1.2.3.4:2375") == TCP("http://1.2.3.4:2375")


def test_http_and_https_pass_through():
    assert parse("http://10.0.0.5:2375") == TCP("http://10.0.0.5:2375")
    assert parse("https://10.0.0.5:2376") == TCP("https://10.0.0.5:2376")


def test_scheme_is_case_insensitive():
    assert parse("UNIX:///var/run/docker.sock") == UnixSocket("/var/run/docker.sock")
    assert parse("TCP://1.2.3.4:2375") == TCP("http://1.2.3.4:2375")


def test_unsupported_scheme():
    with pytest.raises(ConfigurationError) as exc_info:
        parse("ftp://x")
    assert exc_info.value.kind is ErrorKind.CONFIGURATION
    assert "ftp" in str(exc_info.value)


@pytest.mark.parametrize("raw", [
    "unix://",
    "",
    "/var/run/docker.sock",
    "tcp://host name:2375",
    "tcp://1.2.3.4:notaport",
    "http://[::1",
    "tcp://:2375",
    "http://:2375",
    "https://",
])
def test_invalid_hosts(raw):
    with pytest.raises(ConfigurationError):
        parse(raw)


def test_unix_socket_requires_path():
    with pytest.raises(ConfigurationError):
        UnixSocket("")


def test_parse_has_no_side_effects_on_missing_socket():
    # Resolution never touches the filesystem.
    assert parse("unix:///does/not/exist.sock") == UnixSocket("/does/not/exist.sock")


def test_str_round_trips():
    assert str(parse("unix:///var/run/docker.sock")) == "unix:///var/run/docker.sock"
    assert str(parse("tcp://1.2.3.4:2375")) == "http://1.2.3.4:2375"


def test_resolve_host_prefers_explicit():
    env = {"DOCKER_HOST": "tcp://1.2.3.4:2375"}
    assert resolve_host("unix:///tmp/d.sock", env) == UnixSocket("/tmp/d.sock")


def test_resolve_host_uses_docker_host():
    env = {"DOCKER_HOST": "tcp://1.2.3.4:2375"}
    assert resolve_host(None, env) == TCP("http://1.2.3.4:2375")


def test_resolve_host_falls_back_to_default():
    assert resolve_host(None, {"DOCKER_HOST": ""}) == parse(DEFAULT_HOST)
    assert resolve_host(None, {}) == UnixSocket("/var/run/docker.sock")


def test_tcp_ipv6_literal():
    assert parse("tcp://[::1]:2375") == TCP("http://[::1]:2375")
