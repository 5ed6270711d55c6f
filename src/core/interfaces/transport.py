"""Contrato del transporte HTTP.

`send` realiza exactamente un round trip: GET con query string o POST con
cuerpo `application/x-www-form-urlencoded`. Sin reintentos, sin seguir
redirecciones, sin rate limiting.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from core.domain.models import TransportResponse


@runtime_checkable
class Transport(Protocol):
    """Contrato mínimo para enviar una petición.

    Reglas de diseño:
    - Un status no exitoso se devuelve, no se lanza.
    - Los fallos de red se lanzan como `core.errors.TransportError`.
    """

    def send(
        self,
        url: str,
        params: Mapping[str, str],
        *,
        as_post: bool = False,
    ) -> TransportResponse:
        ...
