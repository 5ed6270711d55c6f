"""Contrato común de las estrategias de credenciales."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import Token


@runtime_checkable
class CredentialStrategy(Protocol):
    """Capacidad compartida por los dos grant flows.

    - Servicio: `data` se ignora; firma una aserción JWT nueva en cada llamada
      con `iat = now` (o el reloj de la estrategia).
    - Web: `data` es el authorization code recibido en el redirect; `now` se
      ignora.

    `refresh_token`, `revoke` y `build_authorization_url` solo existen en la
    estrategia web.
    """

    flow: str

    def acquire_token(self, data: Any = None, *, now: float | None = None) -> Token:
        ...
