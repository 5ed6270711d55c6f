"""Wrapper de httpx.

- Estandariza timeouts y headers para el token endpoint y la API de reporting.
- `HttpxTransport` implementa `core.interfaces.transport.Transport`; en tests
  se sustituye por un stub o por un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Mapping

import httpx

from core.config import AppSettings
from core.domain.models import TransportResponse
from core.errors import TransportError

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults para la API.

    Las redirecciones NO se siguen: un 3xx se devuelve al caller como cualquier
    otro status.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """Transporte síncrono sobre `httpx.Client`."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_client(settings)

    def send(
        self,
        url: str,
        params: Mapping[str, str],
        *,
        as_post: bool = False,
    ) -> TransportResponse:
        method = "POST" if as_post else "GET"
        logger.debug("%s %s (%d params)", method, url, len(params))
        try:
            if as_post:
                # httpx codifica `data=` como application/x-www-form-urlencoded.
                response = self._client.post(url, data=dict(params))
            else:
                response = self._client.get(url, params=dict(params))
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(
                f"Network error calling {url}: {exc}",
                url=url,
                method=method,
            ) from exc

        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return TransportResponse(
            status_code=response.status_code,
            body=response.text,
            url=url,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
