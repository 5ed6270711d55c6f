"""Composición de parámetros de consulta.

Orden de capas (la posterior gana en colisión de claves):
1. defaults de proceso (`build_default_params`: último mes + `ga:visits`)
2. defaults del facade (fijados una vez por el caller)
3. identidad forzada (`access_token`, `ids`)
4. parámetros por llamada (preset del atajo + overrides reales)

El resultado es un único diccionario plano que se envía por GET al endpoint
de reporting.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Any, Mapping

from adapters.json_codec import decode_body
from core.domain.decoding import DecodeTarget
from core.domain.models import AccountIdentity, ApiResponse
from core.endpoints import API_URL
from core.errors import MissingIdentityError
from core.interfaces.transport import Transport

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def one_month_before(day: date) -> date:
    """Mismo día del mes anterior, recortado al último día si no existe."""

    year, month = (day.year - 1, 12) if day.month == 1 else (day.year, day.month - 1)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def build_default_params(today: date) -> dict[str, str]:
    return {
        "start-date": one_month_before(today).strftime(DATE_FORMAT),
        "end-date": today.strftime(DATE_FORMAT),
        "metrics": "ga:visits",
    }


def merge_layers(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


def _stringify(params: Mapping[str, Any]) -> dict[str, str]:
    return {str(k): v if isinstance(v, str) else str(v) for k, v in params.items()}


class QueryComposer:
    """Une las capas de parámetros y delega en el `Transport`."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def compose(
        self,
        identity: AccountIdentity,
        layered_defaults: Mapping[str, Any] | None,
        caller_params: Mapping[str, Any] | None = None,
    ) -> dict[str, str]:
        missing = identity.missing_fields()
        if missing:
            raise MissingIdentityError(missing)

        forced = {"access_token": identity.access_token, "ids": identity.account_id}
        return _stringify(merge_layers(layered_defaults, forced, caller_params))

    def execute(
        self,
        identity: AccountIdentity,
        layered_defaults: Mapping[str, Any] | None,
        caller_params: Mapping[str, Any] | None = None,
        *,
        decode: DecodeTarget = DecodeTarget.MAPPING,
    ) -> ApiResponse:
        params = self.compose(identity, layered_defaults, caller_params)
        logger.debug(
            "Query ids=%s metrics=%s dimensions=%s",
            params.get("ids"),
            params.get("metrics"),
            params.get("dimensions"),
        )
        return self._get(API_URL, params, decode)

    def fetch_management(
        self,
        url: str,
        access_token: str,
        *,
        decode: DecodeTarget = DecodeTarget.MAPPING,
    ) -> ApiResponse:
        """GET a un endpoint de management: solo requiere el access token."""

        if not access_token:
            raise MissingIdentityError(("access_token",))
        return self._get(url, {"access_token": access_token}, decode)

    def _get(self, url: str, params: Mapping[str, str], decode: DecodeTarget) -> ApiResponse:
        response = self._transport.send(url, params)
        return ApiResponse(
            status_code=response.status_code,
            data=decode_body(response.body, decode, status_code=response.status_code),
            text=response.body,
            url=response.url,
        )
