"""Jerarquía de errores del cliente.

Todos se lanzan de forma síncrona en el punto de la llamada; ninguno se
reintenta internamente. Un status HTTP no exitoso NO es un error: se devuelve
tal cual dentro de `ApiResponse`/`Token`.
"""

from __future__ import annotations


class AnalyticsClientError(Exception):
    """Base para todos los errores del cliente."""


class MissingCredentialFieldsError(AnalyticsClientError):
    """Falta un campo de credencial antes de cualquier I/O."""

    def __init__(self, missing: tuple[str, ...], flow: str = "") -> None:
        self.missing = tuple(missing)
        self.flow = flow
        label = f"{flow}: " if flow else ""
        super().__init__(f"{label}missing credential fields: {', '.join(self.missing)}")


class MissingIdentityError(AnalyticsClientError):
    """Consulta sin access token y/o account id."""

    def __init__(self, missing: tuple[str, ...]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"You must provide {' and '.join(self.missing)} before querying")


class JWTAssertionError(AnalyticsClientError):
    """Fallo construyendo la aserción JWT (solo flujo de servicio)."""


class KeyMaterialError(JWTAssertionError):
    """La clave privada no existe o no se puede leer."""


class KeyFormatError(JWTAssertionError):
    """El contenedor de clave no se puede parsear o no contiene clave privada."""


class SigningError(JWTAssertionError):
    """La operación de firma RSA falló."""


class TransportError(AnalyticsClientError):
    """Fallo de red alcanzando un endpoint."""

    def __init__(self, message: str, *, url: str = "", method: str = "") -> None:
        self.url = url
        self.method = method
        super().__init__(message)


class ResponseDecodeError(AnalyticsClientError):
    """El cuerpo de una respuesta 2xx no es JSON válido."""

    def __init__(self, message: str, *, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)
