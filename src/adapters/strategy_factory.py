"""Selección de estrategia según la variante de credencial."""

from __future__ import annotations

from adapters.oauth_service import ServiceAccountStrategy
from adapters.oauth_web import WebApplicationStrategy
from core.domain.models import Credential, ServiceCredential, WebCredential
from core.interfaces.transport import Transport


def build_strategy(
    credential: Credential,
    transport: Transport,
) -> ServiceAccountStrategy | WebApplicationStrategy:
    if isinstance(credential, ServiceCredential):
        return ServiceAccountStrategy(credential, transport)
    if isinstance(credential, WebCredential):
        return WebApplicationStrategy(credential, transport)
    raise TypeError(f"Unsupported credential type: {type(credential).__name__}")
