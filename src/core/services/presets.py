"""Atajos de consulta: presets estáticos `{metrics, dimensions, sort, segment}`.

Se aplican como defaults de la capa 4, antes de los overrides por llamada.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

_MOBILE_SEGMENT = "gaid::-11"

_PRESETS: dict[str, dict[str, str]] = {
    # Audience
    "visits_by_date": {"metrics": "ga:visits", "dimensions": "ga:date"},
    "audience_statistics": {
        "metrics": (
            "ga:visitors,ga:newVisits,ga:percentNewVisits,ga:visits,ga:bounces,ga:pageviews,"
            "ga:visitBounceRate,ga:timeOnSite,ga:avgTimeOnSite"
        ),
    },
    "visits_by_countries": {"metrics": "ga:visits", "dimensions": "ga:country", "sort": "-ga:visits"},
    "visits_by_cities": {"metrics": "ga:visits", "dimensions": "ga:city", "sort": "-ga:visits"},
    "visits_by_languages": {"metrics": "ga:visits", "dimensions": "ga:language", "sort": "-ga:visits"},
    "visits_by_system_browsers": {"metrics": "ga:visits", "dimensions": "ga:browser", "sort": "-ga:visits"},
    "visits_by_system_os": {"metrics": "ga:visits", "dimensions": "ga:operatingSystem", "sort": "-ga:visits"},
    "visits_by_system_resolutions": {
        "metrics": "ga:visits",
        "dimensions": "ga:screenResolution",
        "sort": "-ga:visits",
    },
    "visits_by_mobile_os": {
        "metrics": "ga:visits",
        "dimensions": "ga:operatingSystem",
        "sort": "-ga:visits",
        "segment": _MOBILE_SEGMENT,
    },
    "visits_by_mobile_resolutions": {
        "metrics": "ga:visits",
        "dimensions": "ga:screenResolution",
        "sort": "-ga:visits",
        "segment": _MOBILE_SEGMENT,
    },
    # Content
    "pageviews_by_date": {"metrics": "ga:pageviews", "dimensions": "ga:date"},
    "content_statistics": {"metrics": "ga:pageviews,ga:uniquePageviews"},
    "content_top_pages": {"metrics": "ga:pageviews", "dimensions": "ga:pagePath", "sort": "-ga:pageviews"},
    # Traffic sources
    "traffic_sources": {"metrics": "ga:visits", "dimensions": "ga:medium"},
    "keywords": {"metrics": "ga:visits", "dimensions": "ga:keyword", "sort": "-ga:visits"},
    "referral_traffic": {"metrics": "ga:visits", "dimensions": "ga:source", "sort": "-ga:visits"},
}

SHORTCUT_PRESETS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {name: MappingProxyType(preset) for name, preset in _PRESETS.items()}
)
