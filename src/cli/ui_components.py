"""Componentes de UI para CLI (Rich).

- Evita mezclar lógica de comandos con detalles visuales.
- Ningún secreto se imprime completo: tokens y client secrets pasan por
  `mask_secret`.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.json_codec import dumps
from core.domain.models import ApiResponse, Token


def mask_secret(value: str | None, *, visible: int = 6) -> str:
    """`ya29.a0AfH6SM...` -> `ya29.a…` (nunca revela más de `visible` caracteres)."""

    if not value:
        return "-"
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "…"


def print_banner(console: Console) -> None:
    title = Text("ga-report", style="bold cyan")
    subtitle = Text("OAuth 2.0 • Analytics reporting", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_token_table(token: Token, *, reveal: bool = False) -> Table:
    """Tabla Rich para un `Token`."""

    show = (lambda v: v or "-") if reveal else mask_secret

    table = Table(title="Token")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("HTTP status", str(token.status_code))
    table.add_row("access_token", show(token.access_token))
    table.add_row("refresh_token", show(token.refresh_token))
    table.add_row("expires_in", f"{token.expires_in_seconds}s")
    table.add_row("token_type", token.token_type or "-")
    if not token.is_valid and token.raw:
        table.add_row("error", str(token.raw.get("error", "-")), style="red")
    elif not token.is_valid and token.text:
        table.add_row("body", token.text, style="red")
    return table


def build_response_panel(response: ApiResponse) -> Panel:
    """Panel con el status HTTP y el cuerpo decodificado."""

    style = "green" if response.ok else "red"
    title = Text(f"HTTP {response.status_code}", style=f"bold {style}")
    body = response.text if response.data is None else dumps(response.data)
    return Panel(Text(body), title=title, border_style=style)


def build_params_table(title: str, rows: Iterable[tuple[str, Mapping[str, str]]]) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("metrics", style="white")
    table.add_column("dimensions", style="white")
    table.add_column("sort", style="magenta")
    table.add_column("segment", style="dim")
    for name, params in rows:
        table.add_row(
            name,
            params.get("metrics", ""),
            params.get("dimensions", ""),
            params.get("sort", ""),
            params.get("segment", ""),
        )
    return table
