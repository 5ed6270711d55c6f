"""Servicios del Core: composición de consultas y facade del cliente."""

from core.services.analytics_client import AnalyticsClient
from core.services.query_composer import QueryComposer, build_default_params, merge_layers

__all__ = [
    "AnalyticsClient",
    "QueryComposer",
    "build_default_params",
    "merge_layers",
]
