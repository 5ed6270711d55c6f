"""POST al token endpoint compartido por ambos grant flows."""

from __future__ import annotations

import logging
from typing import Mapping

from adapters.json_codec import decode_body
from core.domain.models import Token
from core.endpoints import TOKEN_URL
from core.interfaces.transport import Transport

logger = logging.getLogger(__name__)


def request_token(transport: Transport, params: Mapping[str, str], *, flow: str) -> Token:
    """Envía `params` como formulario y decodifica la respuesta en un `Token`.

    Un status no exitoso no se lanza: el `Token` resultante queda sin
    `access_token` y conserva `status_code` y `raw` (o `text` si el cuerpo
    de error no es JSON).
    """

    logger.debug("Requesting token (%s, grant_type=%s)", flow, params.get("grant_type"))
    response = transport.send(TOKEN_URL, params, as_post=True)
    payload = decode_body(response.body, status_code=response.status_code)

    if payload is None:
        token = Token.from_payload({}, status_code=response.status_code, text=response.body)
    else:
        if not isinstance(payload, dict):
            payload = {"value": payload}
        token = Token.from_payload(payload, status_code=response.status_code)

    if not token.is_valid:
        logger.warning(
            "Token endpoint returned HTTP %s without access token (%s)",
            response.status_code,
            token.raw.get("error", "no error field"),
        )
    return token
