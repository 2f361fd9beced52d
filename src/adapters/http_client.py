"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers JSON y autenticación digest.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.

El handshake digest (401 + WWW-Authenticate -> reintento firmado) lo resuelve
`httpx.DigestAuth`; aquí solo se configura.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def build_digest_auth(settings: AppSettings) -> httpx.DigestAuth | None:
    """Credenciales digest, o `None` si no hay usuario configurado."""

    if not settings.username:
        return None
    return httpx.DigestAuth(settings.username, settings.password.get_secret_value())


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` autenticado para la REST API.

    Por qué un builder:
    - Una sola instancia por cliente Wowza (pool de conexiones compartido).
    - `transport` permite sustituir la red en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "Accept": JSON_CONTENT_TYPE,
        "Content-Type": JSON_CONTENT_TYPE,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        auth=build_digest_auth(settings),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )
