"""Construcción y firma de aserciones JWT (RS256) para el grant JWT-bearer.

Algoritmo:
1. header `{"alg": "RS256", "typ": "JWT"}` y claim set `{iss, scope, aud, exp, iat}`.
2. La clave RSA se carga del contenedor PKCS#12 o PEM (`cryptography`).
3. PyJWT serializa, firma (PKCS#1 v1.5 + SHA-256) y codifica en base64url.

Cada aserción vive 3600 segundos y se construye de nuevo en cada petición
de token; nunca se cachea.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from core.domain.models import JWTAssertion, ServiceCredential
from core.endpoints import MAX_ASSERTION_LIFETIME_SECONDS, SCOPE_URL, TOKEN_URL
from core.errors import KeyFormatError, KeyMaterialError, SigningError

logger = logging.getLogger(__name__)

ALGORITHM = "RS256"
_PEM_MARKER = b"-----BEGIN"


def _read_key_bytes(source: Path | bytes | str | None) -> bytes:
    if source is None:
        raise KeyMaterialError("No private key source configured")
    if isinstance(source, bytes):
        if not source:
            raise KeyMaterialError("Private key source is empty")
        return source

    path = Path(source)
    if not path.is_file():
        raise KeyMaterialError(f"Private key does not exist: {path}")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise KeyMaterialError(f"Could not read private key {path}: {exc}") from exc


def _load_pem(data: bytes, passphrase: str) -> Any:
    try:
        return serialization.load_pem_private_key(data, password=None)
    except TypeError:
        # Clave PEM cifrada: se reintenta con la passphrase configurada.
        pass
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError(f"Could not parse PEM private key: {exc}") from exc

    try:
        return serialization.load_pem_private_key(data, password=passphrase.encode("utf-8") or None)
    except (TypeError, ValueError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError(f"Could not decrypt PEM private key: {exc}") from exc


def _load_pkcs12(data: bytes, passphrase: str) -> Any:
    try:
        key, _cert, _extra = pkcs12.load_key_and_certificates(
            data, passphrase.encode("utf-8") or None
        )
    except (TypeError, ValueError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError(f"Could not parse .p12 file: {exc}") from exc
    if key is None:
        raise KeyFormatError("Could not find private key in .p12 file")
    return key


def load_private_key(source: Path | bytes | str | None, passphrase: str = "notasecret") -> rsa.RSAPrivateKey:
    """Carga la clave RSA desde un contenedor PKCS#12 o un PEM (PKCS#8/PKCS#1).

    Raises:
        KeyMaterialError: la fuente no existe o no se puede leer.
        KeyFormatError: el contenedor no se parsea o no contiene una clave RSA.
    """

    data = _read_key_bytes(source)
    if data.lstrip().startswith(_PEM_MARKER):
        key = _load_pem(data, passphrase)
    else:
        key = _load_pkcs12(data, passphrase)

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyFormatError(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def sign_claims(key: rsa.RSAPrivateKey, claims: dict[str, Any]) -> str:
    """Firma `claims` con RS256 y devuelve el JWT compacto."""

    try:
        return jwt.encode(claims, key, algorithm=ALGORITHM, headers={"typ": "JWT"})
    except (jwt.PyJWTError, TypeError, ValueError, UnsupportedAlgorithm) as exc:
        raise SigningError(f"Could not sign data: {exc}") from exc


def build_claims(email: str, now: int) -> dict[str, Any]:
    return {
        "iss": email,
        "scope": SCOPE_URL,
        "aud": TOKEN_URL,
        "exp": now + MAX_ASSERTION_LIFETIME_SECONDS,
        "iat": now,
    }


def build_assertion(credential: ServiceCredential, now: float) -> JWTAssertion:
    """Construye y firma una aserción JWT nueva para `credential`."""

    issued_at = int(now)
    key = load_private_key(credential.private_key_source, credential.private_key_passphrase)
    encoded = sign_claims(key, build_claims(credential.service_account_email, issued_at))

    header_segment, claim_segment, signature_segment = encoded.split(".")
    logger.debug("Signed JWT assertion for %s (iat=%d)", credential.service_account_email, issued_at)
    return JWTAssertion(
        header_segment=header_segment,
        claim_segment=claim_segment,
        signature_segment=signature_segment,
    )
