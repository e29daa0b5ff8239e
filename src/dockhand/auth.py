"""Registry credentials for the ``X-Registry-Auth`` header."""

from __future__ import annotations

import base64
import json

from pydantic import BaseModel, ConfigDict

REGISTRY_AUTH_HEADER = "X-Registry-Auth"


def _encode(payload: dict[str, str]) -> str:
    # base64url (RFC 4648 section 5) without padding.
    data = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class RegistryAuth(BaseModel):
    """Username/password credentials for a registry."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    server_address: str

    def encoded_value(self) -> str:
        return _encode({
            "username": self.username,
            "password": self.password,
            "serveraddress": self.server_address,
        })


class RegistryIdentityToken(BaseModel):
    """An identity token obtained from the daemon's ``/auth`` endpoint."""

    model_config = ConfigDict(frozen=True)

    identity_token: str

    def encoded_value(self) -> str:
        return _encode({"identitytoken": self.identity_token})
