"""Fixtures compartidas: transporte stub y material de clave generado al vuelo."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from core.domain.models import ServiceCredential, TransportResponse, WebCredential


@dataclass
class SentRequest:
    url: str
    params: dict[str, str]
    as_post: bool


@dataclass
class RecordingTransport:
    """Transport fake: registra cada envío y devuelve respuestas en cola."""

    responses: list[TransportResponse] = field(default_factory=list)
    calls: list[SentRequest] = field(default_factory=list)
    closed: bool = False

    def queue(self, payload: Any, status_code: int = 200) -> "RecordingTransport":
        body = payload if isinstance(payload, str) else json.dumps(payload)
        self.responses.append(TransportResponse(status_code=status_code, body=body))
        return self

    def send(self, url: str, params: Mapping[str, str], *, as_post: bool = False) -> TransportResponse:
        self.calls.append(SentRequest(url=url, params=dict(params), as_post=as_post))
        response = self.responses.pop(0) if self.responses else TransportResponse(200, "{}")
        return TransportResponse(response.status_code, response.body, url)

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> SentRequest:
        return self.calls[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def p12_bytes(rsa_key) -> bytes:
    return pkcs12.serialize_key_and_certificates(
        name=b"service-account",
        key=rsa_key,
        cert=None,
        cas=None,
        encryption_algorithm=serialization.BestAvailableEncryption(b"notasecret"),
    )


@pytest.fixture
def p12_file(tmp_path: Path, p12_bytes: bytes) -> Path:
    path = tmp_path / "valid.p12"
    path.write_bytes(p12_bytes)
    return path


@pytest.fixture
def pem_file(tmp_path: Path, rsa_key) -> Path:
    path = tmp_path / "key.pem"
    path.write_bytes(
        rsa_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def service_credential(p12_file: Path) -> ServiceCredential:
    return ServiceCredential(
        client_id="c1",
        service_account_email="e@x.com",
        private_key_source=p12_file,
    )


@pytest.fixture
def web_credential() -> WebCredential:
    return WebCredential(
        client_id="web-client",
        client_secret="s3cret",
        redirect_uri="https://app.example.com/oauth2callback",
    )
