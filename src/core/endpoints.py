"""Endpoints fijos del servicio remoto (no configurables)."""

from __future__ import annotations

TOKEN_URL = "https://accounts.google.com/o/oauth2/token"
AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
REVOKE_URL = "https://accounts.google.com/o/oauth2/revoke"
SCOPE_URL = "https://www.googleapis.com/auth/analytics.readonly"

API_URL = "https://www.googleapis.com/analytics/v3/data/ga"
WEBPROPERTIES_URL = "https://www.googleapis.com/analytics/v3/management/accounts/~all/webproperties"
PROFILES_URL = (
    "https://www.googleapis.com/analytics/v3/management/accounts/~all/webproperties/~all/profiles"
)

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
MAX_ASSERTION_LIFETIME_SECONDS = 3600
