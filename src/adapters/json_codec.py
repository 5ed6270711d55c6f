"""Decodificación JSON de cuerpos de respuesta.

- `DecodeTarget.MAPPING` -> dicts/lists.
- `DecodeTarget.OBJECT` -> árboles de `types.SimpleNamespace` (acceso por atributo).
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

from core.domain.decoding import DecodeTarget
from core.errors import ResponseDecodeError


def decode_body(text: str, target: DecodeTarget = DecodeTarget.MAPPING, *, status_code: int = 200) -> Any:
    """Decodifica `text` sin interpretar el contenido.

    Un cuerpo vacío (p.ej. revoke devuelve 200 sin cuerpo) se decodifica como
    un mapping vacío. Un cuerpo no-JSON con status no exitoso (página HTML de
    un proxy, texto plano) devuelve `None`: el caller conserva status y texto.
    Solo un 2xx no-JSON lanza `ResponseDecodeError`.
    """

    if not text or not text.strip():
        return SimpleNamespace() if target is DecodeTarget.OBJECT else {}

    hook = (lambda d: SimpleNamespace(**d)) if target is DecodeTarget.OBJECT else None
    try:
        return json.loads(text, object_hook=hook)
    except json.JSONDecodeError as exc:
        if not 200 <= status_code < 300:
            return None
        raise ResponseDecodeError(
            f"Response body is not valid JSON (HTTP {status_code}): {exc}",
            status_code=status_code,
            body=text,
        ) from exc


def to_plain(value: Any) -> Any:
    """Convierte un árbol de `SimpleNamespace` a dicts/lists (para exportar/imprimir)."""

    if isinstance(value, SimpleNamespace):
        return {k: to_plain(v) for k, v in vars(value).items()}
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    return value


def dumps(value: Any) -> str:
    """JSON UTF-8 con formato estable."""

    return json.dumps(to_plain(value), ensure_ascii=False, indent=2, sort_keys=True)
