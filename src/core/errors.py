"""Errores del cliente.

Por qué una jerarquía propia:
- Un status HTTP de error NO es una excepción: se devuelve como `ApiResponse`
  con `errors` poblado.
- Los fallos de transporte (red, DNS, timeout) o un cuerpo ilegible en una
  respuesta 2xx sí lo son, y el llamador debe poder distinguirlos.
"""

from __future__ import annotations


class MediaServerError(Exception):
    """Base de los errores que no llegan a producir un envelope."""


class TransportFailure(MediaServerError):
    """La petición no obtuvo una respuesta HTTP utilizable (conexión, DNS, timeout,
    protocolo, redirecciones, Content-Encoding ilegible)."""

    def __init__(self, *, method: str, url: str, reason: str) -> None:
        super().__init__(f"{method} {url} failed: {reason}")
        self.method = method
        self.url = url
        self.reason = reason


class ResponseDecodeError(MediaServerError):
    """Respuesta 2xx cuyo cuerpo no es JSON válido."""

    def __init__(self, *, url: str, status_code: int, body: str) -> None:
        super().__init__(f"Response from {url} (status {status_code}) is not valid JSON")
        self.url = url
        self.status_code = status_code
        self.body = body
