"""Doctor command for environment diagnostics."""

from __future__ import annotations

import time

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from adapters.jwt_assertion import load_private_key
from cli.ui_components import mask_secret, print_banner
from core.config import AppSettings, get_user_env_file
from core.endpoints import TOKEN_URL
from core.errors import JWTAssertionError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    started = time.monotonic()
    try:
        with build_client(settings) as client:
            response = client.get(url)
    except httpx.HTTPError as exc:
        return False, str(exc)
    elapsed_ms = (time.monotonic() - started) * 1000
    # Cualquier respuesta HTTP (incluido 4xx) prueba conectividad.
    return True, f"HTTP {response.status_code} in {elapsed_ms:.0f} ms"


def _check_private_key(settings: AppSettings) -> tuple[str, str]:
    if not settings.private_key_path:
        return "OPTIONAL", "No private key -> service flow disabled"
    try:
        key = load_private_key(settings.private_key_path, settings.private_key_passphrase)
    except JWTAssertionError as exc:
        return "FAIL", str(exc)
    return "OK", f"RSA {key.key_size} bits"


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Skip the connectivity check."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    print_banner(_console)

    table = Table(title="ga-report Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("User config", "OK" if get_user_env_file().exists() else "MISSING", str(get_user_env_file()))
    table.add_row("Client ID", "OK" if settings.client_id else "MISSING", settings.client_id or "-")

    # Flujo web
    web_ready = bool(settings.client_secret and settings.redirect_uri)
    table.add_row(
        "Web flow",
        "OK" if web_ready else "OPTIONAL",
        f"secret={mask_secret(settings.client_secret)} redirect={settings.redirect_uri or '-'}",
    )

    # Flujo de servicio
    table.add_row(
        "Service account",
        "OK" if settings.service_account_email else "OPTIONAL",
        settings.service_account_email or "-",
    )
    key_status, key_detail = _check_private_key(settings)
    table.add_row("Private key", key_status, key_detail)

    table.add_row("Account id", "OK" if settings.account_id else "MISSING", settings.account_id or "-")

    if not offline:
        ok_http, detail_http = _check_http(settings, TOKEN_URL)
        table.add_row("Token endpoint", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not settings.client_id:
        _console.print("\n[yellow]Note:[/yellow] run `ga-report configure` to store credentials.")
