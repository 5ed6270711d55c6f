"""Facade del cliente de reporting.

Mantiene la estrategia de credenciales activa, el access token, el account id
y los defaults de consulta; expone el `QueryComposer` y los atajos con
nombre. No refresca tokens: detectar la expiración es responsabilidad del
caller.

Concurrencia: las consultas leen una instantánea de defaults/identidad por
llamada. Si se comparten instancias entre hilos mientras se modifican, usar
una instancia por access token o sincronización externa.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Mapping

from adapters.http_client import HttpxTransport
from adapters.strategy_factory import build_strategy
from core.config import AppSettings
from core.domain.decoding import DecodeTarget
from core.domain.models import AccountIdentity, ApiResponse
from core.endpoints import PROFILES_URL, WEBPROPERTIES_URL
from core.interfaces.credentials import CredentialStrategy
from core.interfaces.transport import Transport
from core.services.presets import SHORTCUT_PRESETS
from core.services.query_composer import QueryComposer, build_default_params, merge_layers


def _shortcut(name: str) -> Callable[..., ApiResponse]:
    def method(
        self: "AnalyticsClient",
        params: Mapping[str, Any] | None = None,
        *,
        decode: DecodeTarget | None = None,
    ) -> ApiResponse:
        return self.run_shortcut(name, params, decode=decode)

    method.__name__ = name
    method.__doc__ = f"Atajo `{name}`: {dict(SHORTCUT_PRESETS[name])}"
    return method


class AnalyticsClient:
    """Punto de entrada para consultar la API de reporting."""

    def __init__(
        self,
        strategy: CredentialStrategy,
        transport: Transport,
        *,
        access_token: str = "",
        account_id: str = "",
        decode: DecodeTarget = DecodeTarget.MAPPING,
        today: date | None = None,
    ) -> None:
        self.strategy = strategy
        self._composer = QueryComposer(transport)
        self._access_token = access_token
        self._account_id = account_id
        self._decode = decode
        self._process_defaults = build_default_params(today or date.today())
        self._default_query_params: dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: AppSettings, transport: Transport | None = None) -> "AnalyticsClient":
        """Construye el facade desde `AppSettings`.

        Con `service_account_email` configurado se usa el flujo de servicio;
        en otro caso, el flujo web.
        """

        transport = transport or HttpxTransport(settings=settings)
        credential = (
            settings.service_credential()
            if settings.service_account_email
            else settings.web_credential()
        )
        return cls(
            build_strategy(credential, transport),
            transport,
            access_token=settings.access_token,
            account_id=settings.account_id,
            decode=settings.decode_target,
        )

    @property
    def strategy(self) -> CredentialStrategy:
        return self._strategy

    @strategy.setter
    def strategy(self, value: CredentialStrategy) -> None:
        if not isinstance(value, CredentialStrategy):
            raise TypeError("strategy must implement CredentialStrategy (flow + acquire_token)")
        self._strategy = value

    @property
    def decode(self) -> DecodeTarget:
        return self._decode

    def set_access_token(self, token: str) -> None:
        self._access_token = token

    def set_account_id(self, identifier: str) -> None:
        self._account_id = str(identifier)

    @property
    def identity(self) -> AccountIdentity:
        return AccountIdentity(access_token=self._access_token, account_id=self._account_id)

    def set_default_query_params(self, params: Mapping[str, Any]) -> None:
        """Fija defaults del facade (útil: start-date, end-date, max-results).

        Se mezclan sobre los defaults ya fijados.
        """

        self._default_query_params = merge_layers(self._default_query_params, params)

    @property
    def default_query_params(self) -> dict[str, Any]:
        return merge_layers(self._process_defaults, self._default_query_params)

    def query(
        self,
        params: Mapping[str, Any] | None = None,
        *,
        decode: DecodeTarget | None = None,
    ) -> ApiResponse:
        return self._composer.execute(
            self.identity,
            self.default_query_params,
            params,
            decode=decode or self._decode,
        )

    def run_shortcut(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        *,
        decode: DecodeTarget | None = None,
    ) -> ApiResponse:
        try:
            preset = SHORTCUT_PRESETS[name]
        except KeyError:
            raise ValueError(f"Unknown shortcut: {name!r}") from None
        return self.query(merge_layers(preset, params), decode=decode)

    def get_web_properties(self, *, decode: DecodeTarget | None = None) -> ApiResponse:
        return self._composer.fetch_management(
            WEBPROPERTIES_URL, self._access_token, decode=decode or self._decode
        )

    def get_profiles(self, *, decode: DecodeTarget | None = None) -> ApiResponse:
        return self._composer.fetch_management(
            PROFILES_URL, self._access_token, decode=decode or self._decode
        )

    # Audience
    visits_by_date = _shortcut("visits_by_date")
    audience_statistics = _shortcut("audience_statistics")
    visits_by_countries = _shortcut("visits_by_countries")
    visits_by_cities = _shortcut("visits_by_cities")
    visits_by_languages = _shortcut("visits_by_languages")
    visits_by_system_browsers = _shortcut("visits_by_system_browsers")
    visits_by_system_os = _shortcut("visits_by_system_os")
    visits_by_system_resolutions = _shortcut("visits_by_system_resolutions")
    visits_by_mobile_os = _shortcut("visits_by_mobile_os")
    visits_by_mobile_resolutions = _shortcut("visits_by_mobile_resolutions")
    # Content
    pageviews_by_date = _shortcut("pageviews_by_date")
    content_statistics = _shortcut("content_statistics")
    content_top_pages = _shortcut("content_top_pages")
    # Traffic sources
    traffic_sources = _shortcut("traffic_sources")
    keywords = _shortcut("keywords")
    referral_traffic = _shortcut("referral_traffic")
