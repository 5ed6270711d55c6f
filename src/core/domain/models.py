"""Modelos del dominio (Pydantic v2).

- Credenciales: unión etiquetada `ServiceCredential | WebCredential`; cada
  variante declara solo sus propios campos y rechaza claves desconocidas.
- Tokens y aserciones JWT: resultados inmutables de una llamada de estrategia.
- Respuestas: cuerpo crudo + status HTTP, sin interpretar el sobre de error
  del servicio remoto.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class _CredentialBase(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    def missing_fields(self, required: tuple[str, ...]) -> tuple[str, ...]:
        """Campos requeridos vacíos (cadena vacía o `None`)."""

        return tuple(name for name in required if not getattr(self, name))


class ServiceCredential(_CredentialBase):
    """Credencial de cuenta de servicio (grant JWT-bearer)."""

    kind: Literal["service"] = "service"
    client_id: str = Field(
        default="",
        description="Client-ID del proyecto.",
    )
    service_account_email: str = Field(
        default="",
        description="E-mail de la cuenta de servicio; se usa como `iss` del JWT.",
    )
    private_key_source: Path | bytes | None = Field(
        default=None,
        description="Ruta al contenedor de clave (.p12/PEM) o su contenido en bytes.",
    )
    private_key_passphrase: str = Field(
        default="notasecret",
        description="Passphrase del contenedor PKCS#12.",
    )

    @field_validator("private_key_source", mode="before")
    @classmethod
    def _blank_source_is_missing(cls, value: Any) -> Any:
        # "" y b"" cuentan como campo vacío, no como Path(".").
        if isinstance(value, (str, bytes)) and not value.strip():
            return None
        return value


class WebCredential(_CredentialBase):
    """Credencial de aplicación web (grant authorization-code)."""

    kind: Literal["web"] = "web"
    client_id: str = Field(
        default="",
        description="Client-ID de la aplicación web.",
    )
    client_secret: str = Field(
        default="",
        description="Client-Secret de la aplicación web.",
    )
    redirect_uri: str = Field(
        default="",
        description="Redirect URI registrada en la consola de Google APIs.",
    )


Credential = Annotated[Union[ServiceCredential, WebCredential], Field(discriminator="kind")]


class Token(BaseModel):
    """Resultado de una llamada al token endpoint.

    Si el servicio remoto rechaza la petición, `access_token` queda vacío y
    `raw`/`status_code` conservan la respuesta tal cual para que el caller la
    interprete.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(
        default="",
        description="Access token de corta duración.",
    )
    refresh_token: str | None = Field(
        default=None,
        description="Refresh token (solo grant authorization-code).",
    )
    expires_in_seconds: int = Field(
        default=0,
        ge=0,
        description="Vida útil declarada por el servidor.",
    )
    token_type: str | None = Field(
        default=None,
        description="Tipo de token devuelto (típicamente 'Bearer').",
    )
    status_code: int = Field(
        default=200,
        description="Status HTTP de la respuesta del token endpoint.",
    )
    raw: dict[str, Any] = Field(
        default_factory=dict,
        description="Cuerpo decodificado completo, para auditoría.",
    )
    text: str | None = Field(
        default=None,
        description="Cuerpo crudo cuando la respuesta de error no es JSON.",
    )

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        *,
        status_code: int = 200,
        text: str | None = None,
    ) -> "Token":
        expires_in = payload.get("expires_in")
        try:
            expires = max(int(expires_in), 0) if expires_in is not None else 0
        except (TypeError, ValueError):
            expires = 0
        refresh = payload.get("refresh_token")
        return cls(
            access_token=str(payload.get("access_token") or ""),
            refresh_token=str(refresh) if refresh else None,
            expires_in_seconds=expires,
            token_type=payload.get("token_type"),
            status_code=status_code,
            raw=dict(payload),
            text=text,
        )

    @property
    def is_valid(self) -> bool:
        return bool(self.access_token) and 200 <= self.status_code < 300

    def expires_at(self, issued_at: datetime) -> datetime:
        """Momento de expiración dado el instante en que se emitió."""

        return issued_at + timedelta(seconds=self.expires_in_seconds)


class JWTAssertion(BaseModel):
    """Aserción JWT firmada, de un solo uso."""

    model_config = ConfigDict(frozen=True)

    header_segment: str
    claim_segment: str
    signature_segment: str

    @property
    def signing_input(self) -> str:
        return f"{self.header_segment}.{self.claim_segment}"

    @property
    def encoded(self) -> str:
        return f"{self.signing_input}.{self.signature_segment}"

    def __str__(self) -> str:
        return self.encoded


class AccountIdentity(BaseModel):
    """Identidad obligatoria de cada consulta de datos.

    No se valida al construir: la identidad puede completarse después y se
    exige en cada llamada del `QueryComposer`.
    """

    access_token: str = ""
    account_id: str = ""

    def missing_fields(self) -> tuple[str, ...]:
        missing = []
        if not self.access_token:
            missing.append("access_token")
        if not self.account_id:
            missing.append("account_id")
        return tuple(missing)


@dataclass(frozen=True)
class TransportResponse:
    """Respuesta cruda del transporte."""

    status_code: int
    body: str
    url: str = ""


@dataclass(frozen=True)
class ApiResponse:
    """Cuerpo decodificado + status HTTP, sin interpretar."""

    status_code: int
    data: Any
    text: str = ""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
