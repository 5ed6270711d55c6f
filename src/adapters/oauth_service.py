"""OAuth 2.0 para aplicaciones de servicio (server-to-server).

Intercambia una aserción JWT firmada por un access token. Este grant nunca
emite refresh token: cuando el access token expira, se vuelve a llamar a
`acquire_token`.
"""

from __future__ import annotations

import time
from typing import Any, Callable

from adapters.jwt_assertion import build_assertion
from adapters.token_endpoint import request_token
from core.domain.models import ServiceCredential, Token
from core.endpoints import JWT_BEARER_GRANT_TYPE
from core.errors import MissingCredentialFieldsError
from core.interfaces.transport import Transport

_REQUIRED = ("client_id", "service_account_email", "private_key_source")


class ServiceAccountStrategy:
    """Estrategia JWT-bearer."""

    flow = "service"

    def __init__(
        self,
        credential: ServiceCredential,
        transport: Transport,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.credential = credential
        self._transport = transport
        self._clock = clock

    def acquire_token(self, data: Any = None, *, now: float | None = None) -> Token:
        """Obtiene un access token. `data` no se usa en este flujo.

        `now` fija el instante `iat` de la aserción; por defecto se usa el reloj
        inyectado en el constructor.
        """

        missing = self.credential.missing_fields(_REQUIRED)
        if missing:
            raise MissingCredentialFieldsError(missing, flow=self.flow)

        assertion = build_assertion(self.credential, self._clock() if now is None else now)
        params = {
            "grant_type": JWT_BEARER_GRANT_TYPE,
            "assertion": assertion.encoded,
        }
        return request_token(self._transport, params, flow=self.flow)
