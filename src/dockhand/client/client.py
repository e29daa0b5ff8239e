# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Async client for the Docker Engine API.

Resolves a host string to a transport, prefixes the API version, encodes
query strings and JSON bodies, and turns HTTP error statuses into
``APIError``. Unix-socket hosts go through ``AsyncUnixSocketTransport``;
TCP hosts go through httpx.
"""

from __future__ import annotations

import asyncio
import json as jsonlib
import logging
from typing import Any, Mapping, Protocol

import httpx

from .. import stream
from ..auth import REGISTRY_AUTH_HEADER, RegistryAuth, RegistryIdentityToken
from ..config import DEFAULT_API_VERSION, DEFAULT_TIMEOUT, load_config, normalize_api_version
from ..errors import APIError, ConnectionFailed, ProtocolError, RequestTimeout
from ..host import TCP, ConnectionTarget, UnixSocket, parse
from ..transport import AsyncUnixSocketTransport, IncomingResponse, OutgoingRequest

logger = logging.getLogger(__name__)


class AsyncTransport(Protocol):
    """Anything that can carry one request to the daemon."""

    async def send(
        self, request: OutgoingRequest, timeout: float | None = None
    ) -> IncomingResponse: ...


class HTTPXTransport:
    """Carries requests to a TCP daemon with an httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def send(
        self, request: OutgoingRequest, timeout: float | None = None
    ) -> IncomingResponse:
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body or None,
                **kwargs,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"request to {self._client.base_url} timed out") from e
        except httpx.RemoteProtocolError as e:
            raise ProtocolError(str(e)) from e
        except httpx.TransportError as e:
            raise ConnectionFailed(f"cannot reach {self._client.base_url}: {e}") from e

        return IncomingResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
            reason_phrase=response.reason_phrase,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def encode_params(params: Mapping[str, Any]) -> httpx.QueryParams:
    """Encode query parameters the way the Docker API expects them.

    Booleans become ``true``/``false``, lists and dicts become JSON, and
    ``None`` values are dropped.
    """
    encoded: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, dict)):
            value = jsonlib.dumps(value, separators=(",", ":"))
        encoded.append((key, str(value)))
    return httpx.QueryParams(encoded)


def _error_message(response: IncomingResponse) -> str:
    try:
        data = response.json()
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
    except ValueError:
        pass
    return response.text.strip() or response.reason_phrase or f"HTTP {response.status_code}"


class DockerClient:
    """Async client for a Docker daemon.

    Usage:
        async with DockerClient() as docker:
            response = await docker.get("/version")
            print(response.json()["Version"])

    With no host, the configured host is used (DOCKER_HOST, then the config
    files, then unix:///var/run/docker.sock).

    Args:
        host: Docker host string or an already parsed target.
        api_version: API version path component, e.g. ``"v1.53"``.
        registry_auth: Credentials sent as ``X-Registry-Auth`` on every request.
        timeout: Per-request timeout in seconds.
        transport: Custom transport; overrides the one chosen from ``host``.
    """

    def __init__(
        self,
        host: str | ConnectionTarget | None = None,
        *,
        api_version: str | None = None,
        registry_auth: RegistryAuth | RegistryIdentityToken | None = None,
        timeout: float | None = None,
        transport: AsyncTransport | None = None,
    ):
        if host is None or api_version is None or timeout is None:
            config = load_config()
            host = host if host is not None else config.host
            api_version = api_version if api_version is not None else config.api_version
            timeout = timeout if timeout is not None else config.timeout

        self.target = parse(host) if isinstance(host, str) else host
        self.api_version = normalize_api_version(api_version or DEFAULT_API_VERSION)
        self.timeout = timeout
        self._registry_auth = registry_auth.encoded_value() if registry_auth else None

        if transport is not None:
            self._transport = transport
        elif isinstance(self.target, UnixSocket):
            self._transport = AsyncUnixSocketTransport(self.target.path, timeout=timeout)
        elif isinstance(self.target, TCP):
            self._transport = HTTPXTransport(self.target.base_url.rstrip("/"), timeout=timeout)
        else:
            raise TypeError(f"unsupported connection target: {self.target!r}")

    def __repr__(self) -> str:
        return f"<DockerClient {self.target} {self.api_version}>"

    async def __aenter__(self) -> DockerClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        """Release the transport, if it holds anything."""
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    def build_request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> OutgoingRequest:
        """Build the request ``request`` would send, without sending it."""
        url = f"/{self.api_version}/{path.lstrip('/')}" if self.api_version else f"/{path.lstrip('/')}"
        if params:
            query = encode_params(params)
            if query:
                url = str(httpx.URL(url).copy_merge_params(query))

        req_headers = httpx.Headers(headers or {})
        body = b""
        if json is not None:
            body = jsonlib.dumps(json).encode("utf-8")
            req_headers["Content-Type"] = "application/json"
        elif content is not None:
            body = content
        if self._registry_auth is not None:
            req_headers[REGISTRY_AUTH_HEADER] = self._registry_auth

        return OutgoingRequest(method.upper(), url, req_headers, body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> IncomingResponse:
        """Send a request to the daemon.

        Args:
            method: HTTP method.
            path: API path without the version prefix, e.g. ``/containers/json``.
            params: Query parameters.
            json: Body to send as JSON.
            content: Raw body bytes (ignored when ``json`` is given).
            headers: Extra request headers.
            timeout: Overrides the client timeout for this call.

        Returns:
            The daemon's response.

        Raises:
            APIError: The daemon answered with status 400 or above.
        """
        request = self.build_request(
            method, path, params=params, json=json, content=content, headers=headers
        )
        response = await self._transport.send(
            request, self.timeout if timeout is None else timeout
        )

        if response.status_code >= 400:
            message = _error_message(response)
            logger.debug("%s %s failed: %d %s", method, path, response.status_code, message)
            raise APIError(message, response.status_code)
        return response

    async def get(self, path: str, **kwargs: Any) -> IncomingResponse:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> IncomingResponse:
        """Make a POST request."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> IncomingResponse:
        """Make a PUT request."""
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> IncomingResponse:
        """Make a DELETE request."""
        return await self.request("DELETE", path, **kwargs)

    async def wait_for_exec(self, exec_id: str, poll_interval: float = 0.05) -> int:
        """Poll an exec instance until its process exits.

        Args:
            exec_id: ID returned by ``POST /containers/{id}/exec``.
            poll_interval: Seconds to sleep between inspections.

        Returns:
            The process exit code, or -1 if the daemon reports none.

        Raises:
            APIError: The exec instance cannot be inspected.
        """
        while True:
            response = await self.get(f"/exec/{exec_id}/json")
            info = response.json()
            if info.get("Running") is False:
                exit_code = info.get("ExitCode")
                logger.debug("exec %s finished with exit code %s", exec_id, exit_code)
                return exit_code if exit_code is not None else -1
            await asyncio.sleep(poll_interval)

    @staticmethod
    def read_output(response: IncomingResponse, include_stderr: bool = False) -> str:
        """Text of a logs/exec/attach response.

        Multiplexed bodies are demultiplexed; anything else (e.g. output of
        a TTY container) is decoded as UTF-8.
        """
        if response.is_multiplexed:
            return stream.text(response.body, include_stderr=include_stderr)
        return response.text
