"""OAuth 2.0 para aplicaciones web (usuario final involucrado).

Flujo:
1. `build_authorization_url` -> el usuario inicia sesión y autoriza la app.
2. `acquire_token(code)` -> access token + refresh token.
3. `refresh_token(refresh)` -> nuevo access token (el refresh token no se reemite).
4. `revoke(token)` -> revoca access o refresh token; no limpia estado local.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import urlencode

from adapters.json_codec import decode_body
from adapters.token_endpoint import request_token
from core.domain.decoding import DecodeTarget
from core.domain.models import ApiResponse, Token, WebCredential
from core.endpoints import AUTH_URL, REVOKE_URL, SCOPE_URL
from core.errors import MissingCredentialFieldsError
from core.interfaces.transport import Transport

logger = logging.getLogger(__name__)


class WebApplicationStrategy:
    """Estrategia authorization-code + refresh + revoke."""

    flow = "web"

    def __init__(self, credential: WebCredential, transport: Transport) -> None:
        self.credential = credential
        self._transport = transport

    def _require(self, *fields: str) -> None:
        missing = self.credential.missing_fields(fields)
        if missing:
            raise MissingCredentialFieldsError(missing, flow=self.flow)

    def build_authorization_url(self, params: Mapping[str, str] | None = None) -> str:
        """URL de login para el usuario; los parámetros del caller ganan."""

        self._require("client_id", "redirect_uri")
        query = {
            "response_type": "code",
            "client_id": self.credential.client_id,
            "redirect_uri": self.credential.redirect_uri,
            "scope": SCOPE_URL,
            "access_type": "offline",
            "approval_prompt": "force",
        }
        query.update(params or {})
        return f"{AUTH_URL}?{urlencode(query)}"

    def acquire_token(self, data: Any = None, *, now: float | None = None) -> Token:
        """Canjea el authorization code (`data`) por access + refresh token.

        `now` no se usa en este flujo.
        """

        self._require("client_id", "client_secret", "redirect_uri")
        code = str(data or "").strip()
        if not code:
            raise MissingCredentialFieldsError(("code",), flow=self.flow)
        params = {
            "code": code,
            "client_id": self.credential.client_id,
            "client_secret": self.credential.client_secret,
            "redirect_uri": self.credential.redirect_uri,
            "grant_type": "authorization_code",
        }
        return request_token(self._transport, params, flow=self.flow)

    def refresh_token(self, refresh_token: str) -> Token:
        """Nuevo access token a partir del refresh token. No requiere redirect URI."""

        self._require("client_id", "client_secret")
        params = {
            "client_id": self.credential.client_id,
            "client_secret": self.credential.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }
        return request_token(self._transport, params, flow=self.flow)

    def revoke(self, token: str, *, decode: DecodeTarget = DecodeTarget.MAPPING) -> ApiResponse:
        """Revoca `token`. Un token ya inválido no es un error a este nivel."""

        logger.debug("Revoking token")
        response = self._transport.send(REVOKE_URL, {"token": token})
        return ApiResponse(
            status_code=response.status_code,
            data=decode_body(response.body, decode, status_code=response.status_code),
            text=response.body,
            url=response.url,
        )
