"""CLI `ga-report` (Typer + Rich).

Comandos:
- Flujo web: `auth-url`, `exchange-code`, `refresh`, `revoke`.
- Flujo de servicio: `service-token`.
- Datos: `query`, `shortcut`, `shortcuts`, `web-properties`, `profiles`.
- Configuración: `configure`, `doctor`.

La CLI es un caller más: no persiste tokens entre ejecuciones; el token se
pasa con `--access-token` o `GA_REPORT_ACCESS_TOKEN`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.http_client import HttpxTransport
from adapters.json_codec import dumps
from adapters.oauth_service import ServiceAccountStrategy
from adapters.oauth_web import WebApplicationStrategy
from cli import doctor
from cli.ui_components import (
    build_params_table,
    build_response_panel,
    build_token_table,
    mask_secret,
)
from core.config import AppSettings, write_user_env_vars
from core.domain.decoding import DecodeTarget
from core.domain.models import ApiResponse, Token
from core.errors import AnalyticsClientError
from core.interfaces.transport import Transport
from core.services.analytics_client import AnalyticsClient
from core.services.presets import SHORTCUT_PRESETS

app = typer.Typer(no_args_is_help=True, help="Google Analytics reporting client with OAuth 2.0.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

_PARAM_OPTION = typer.Option(None, "--param", "-p", help="Query parameter as key=value (repeatable).")
_JSON_OPTION = typer.Option(False, "--json", help="Print the raw decoded body.")


def build_transport(settings: AppSettings) -> Transport:
    return HttpxTransport(settings=settings)


@contextmanager
def _open_transport(settings: AppSettings) -> Iterator[Transport]:
    transport = build_transport(settings)
    try:
        yield transport
    finally:
        close = getattr(transport, "close", None)
        if callable(close):
            close()


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except AnalyticsClientError as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _parse_params(items: Optional[List[str]]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got {item!r}")
        params[key.strip()] = value
    return params


def _print_token(token: Token, as_json: bool) -> None:
    if as_json:
        typer.echo(dumps(token.raw) if token.text is None else token.text)
    else:
        _console.print(build_token_table(token))
    if not token.is_valid:
        raise typer.Exit(code=2)


def _print_response(response: ApiResponse, as_json: bool) -> None:
    if as_json:
        typer.echo(response.text if response.data is None else dumps(response.data))
    else:
        _console.print(build_response_panel(response))
    if not response.ok:
        raise typer.Exit(code=2)


def _build_client(
    settings: AppSettings,
    transport: Transport,
    *,
    access_token: str | None,
    account_id: str | None,
) -> AnalyticsClient:
    client = AnalyticsClient.from_settings(settings, transport)
    client.set_access_token(access_token or settings.access_token)
    client.set_account_id(account_id or settings.account_id)

    # Con cuenta de servicio y sin token explícito, se obtiene uno al vuelo.
    if not client.identity.access_token and isinstance(client.strategy, ServiceAccountStrategy):
        token = client.strategy.acquire_token()
        if token.is_valid:
            client.set_access_token(token.access_token)
        else:
            _console.print(f"[yellow]Token endpoint returned HTTP {token.status_code}[/yellow]")

    return client


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    level = "DEBUG" if verbose else AppSettings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command("auth-url")
def auth_url(params: Optional[List[str]] = _PARAM_OPTION) -> None:
    """Print the authorization URL the user must open."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        strategy = WebApplicationStrategy(settings.web_credential(), transport)
        typer.echo(strategy.build_authorization_url(_parse_params(params)))


@app.command("exchange-code")
def exchange_code(code: str, as_json: bool = _JSON_OPTION) -> None:
    """Exchange an authorization code for access and refresh tokens."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        token = WebApplicationStrategy(settings.web_credential(), transport).acquire_token(code)
    _print_token(token, as_json)


@app.command()
def refresh(refresh_token: str, as_json: bool = _JSON_OPTION) -> None:
    """Get a new access token from a refresh token."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        token = WebApplicationStrategy(settings.web_credential(), transport).refresh_token(refresh_token)
    _print_token(token, as_json)


@app.command()
def revoke(token: str, as_json: bool = _JSON_OPTION) -> None:
    """Revoke an access or refresh token."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        response = WebApplicationStrategy(settings.web_credential(), transport).revoke(token)
    if not as_json:
        status = "Revoked" if response.ok else "Revoke failed for"
        _console.print(f"{status} {mask_secret(token)}")
    _print_response(response, as_json)


@app.command("service-token")
def service_token(as_json: bool = _JSON_OPTION) -> None:
    """Get an access token with the service account (JWT-bearer grant)."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        token = ServiceAccountStrategy(settings.service_credential(), transport).acquire_token()
    _print_token(token, as_json)


@app.command()
def query(
    params: Optional[List[str]] = _PARAM_OPTION,
    access_token: Optional[str] = typer.Option(None, "--access-token", help="Overrides GA_REPORT_ACCESS_TOKEN."),
    account_id: Optional[str] = typer.Option(None, "--account-id", "--ids", help="View id, e.g. ga:12345678."),
    objects: bool = typer.Option(False, "--objects", help="Decode JSON objects as attribute objects."),
    as_json: bool = _JSON_OPTION,
) -> None:
    """Run a reporting query with default parameters plus overrides."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        client = _build_client(
            settings, transport, access_token=access_token, account_id=account_id
        )
        decode = DecodeTarget.OBJECT if objects else None
        response = client.query(_parse_params(params), decode=decode)
    _print_response(response, as_json)


@app.command()
def shortcut(
    name: str,
    params: Optional[List[str]] = _PARAM_OPTION,
    access_token: Optional[str] = typer.Option(None, "--access-token"),
    account_id: Optional[str] = typer.Option(None, "--account-id", "--ids"),
    as_json: bool = _JSON_OPTION,
) -> None:
    """Run a named shortcut query (see `shortcuts`)."""

    if name not in SHORTCUT_PRESETS:
        raise typer.BadParameter(f"Unknown shortcut {name!r}. Run `ga-report shortcuts`.")

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        client = _build_client(
            settings, transport, access_token=access_token, account_id=account_id
        )
        response = client.run_shortcut(name, _parse_params(params))
    _print_response(response, as_json)


@app.command()
def shortcuts() -> None:
    """List the named shortcut presets."""

    _console.print(build_params_table("Shortcuts", SHORTCUT_PRESETS.items()))


@app.command("web-properties")
def web_properties(
    access_token: Optional[str] = typer.Option(None, "--access-token"),
    as_json: bool = _JSON_OPTION,
) -> None:
    """List all web properties visible to the token."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        client = _build_client(settings, transport, access_token=access_token, account_id=None)
        response = client.get_web_properties()
    _print_response(response, as_json)


@app.command()
def profiles(
    access_token: Optional[str] = typer.Option(None, "--access-token"),
    as_json: bool = _JSON_OPTION,
) -> None:
    """List all profiles (views) visible to the token."""

    settings = AppSettings()
    with _handle_errors(), _open_transport(settings) as transport:
        client = _build_client(settings, transport, access_token=access_token, account_id=None)
        response = client.get_profiles()
    _print_response(response, as_json)


@app.command()
def configure(
    flow: str = typer.Option("web", "--flow", help="web or service."),
) -> None:
    """Interactive setup (stores config in the user config .env)."""

    flow = flow.strip().lower()
    if flow not in {"web", "service"}:
        raise typer.BadParameter("flow must be 'web' or 'service'")

    values: dict[str, str | None] = {
        "GA_REPORT_CLIENT_ID": typer.prompt("Client ID").strip(),
    }
    if flow == "web":
        values["GA_REPORT_CLIENT_SECRET"] = typer.prompt("Client secret", hide_input=True).strip()
        values["GA_REPORT_REDIRECT_URI"] = typer.prompt("Redirect URI").strip()
    else:
        values["GA_REPORT_SERVICE_ACCOUNT_EMAIL"] = typer.prompt("Service account e-mail").strip()
        values["GA_REPORT_PRIVATE_KEY_PATH"] = typer.prompt("Private key path (.p12/.pem)").strip()
    account = typer.prompt("Default account id (ga:XXXX)", default="", show_default=False).strip()
    values["GA_REPORT_ACCOUNT_ID"] = account or None

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")


def run() -> None:
    app()
