"""Configuración del cliente.

- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los servicios del Core reciben valores explícitos; solo la CLI y
  `AnalyticsClient.from_settings` leen esta configuración.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.decoding import DecodeTarget
from core.domain.models import ServiceCredential, WebCredential


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ga-report"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ga-report"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ga-report"
    return Path.home() / ".config" / "ga-report"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Las claves existentes se conservan; los valores `None` no pisan nada.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ga-report user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="GA_REPORT_",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="ga-report/0.1 (+https://local)",
        min_length=1,
        description="User-Agent enviado al token endpoint y a la API de reporting.",
    )

    client_id: str = Field(
        default="",
        description="Client-ID del proyecto en la consola de Google APIs.",
    )
    client_secret: str = Field(
        default="",
        description="Client-Secret (solo flujo web).",
    )
    redirect_uri: str = Field(
        default="",
        description="Redirect URI registrada para el flujo web.",
    )
    service_account_email: str = Field(
        default="",
        description="E-mail de la cuenta de servicio (flujo server-to-server).",
    )
    private_key_path: Path | None = Field(
        default=None,
        description="Ruta a la clave privada (.p12 o PEM) de la cuenta de servicio.",
    )
    private_key_passphrase: str = Field(
        default="notasecret",
        description="Passphrase del contenedor PKCS#12 (Google usa 'notasecret').",
    )

    account_id: str = Field(
        default="",
        description="Vista/perfil a consultar, p.ej. 'ga:12345678'.",
    )
    access_token: str = Field(
        default="",
        description="Access token ya obtenido (opcional, atajo para la CLI).",
    )
    decode_target: DecodeTarget = Field(
        default=DecodeTarget.MAPPING,
        description="Forma de decodificar los cuerpos JSON (mapping/object).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging para la CLI.",
    )

    def service_credential(self) -> ServiceCredential:
        return ServiceCredential(
            client_id=self.client_id,
            service_account_email=self.service_account_email,
            private_key_source=self.private_key_path,
            private_key_passphrase=self.private_key_passphrase,
        )

    def web_credential(self) -> WebCredential:
        return WebCredential(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
        )
