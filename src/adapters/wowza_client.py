"""Cliente de la REST API de Wowza Streaming Engine.

Responsabilidad:
- Construir URLs bajo `/v2/servers/_defaultServer_/vhosts/_defaultVHost_`.
- Emitir una petición por operación (digest auth vía `build_async_client`).
- Normalizar la respuesta como `ApiResponse`.

Política de errores:
- Status 2xx -> `ApiResponse(data=...)`.
- Otro status -> `ApiResponse(errors=[...], raw=...)`; nunca lanza.
- Sin respuesta HTTP utilizable (red, redirecciones, Content-Encoding roto)
  o 2xx con cuerpo no-JSON -> `MediaServerError`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from adapters.http_client import build_async_client
from core.config import (
    DEFAULT_APP_INSTANCE,
    DEFAULT_APPLICATION,
    DEFAULT_STREAM_FILE,
    AppSettings,
)
from core.domain.models import (
    ApiResponse,
    RecorderOptions,
    RecorderParameters,
    merge_recorder_parameters,
)
from core.errors import ResponseDecodeError, TransportFailure

logger = logging.getLogger(__name__)

REST_PREFIX = "/v2/servers/_defaultServer_/vhosts/_defaultVHost_"


def _segment(value: str) -> str:
    return quote(value, safe="")


def _pick(value: str | None, default: str, fallback: str) -> str:
    # Cadena vacía cuenta como "no indicado".
    return value or default or fallback


def _best_effort_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class WowzaClient:
    """Implementación httpx de `MediaServerAPI`.

    No guarda estado mutable: llamadas concurrentes sobre la misma instancia
    son independientes.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """`http_client` inyectado no se cierra en `aclose()`; `transport` sí (cliente propio)."""

        self._settings = settings or AppSettings()
        self._owns_client = http_client is None
        self._client = http_client or build_async_client(self._settings, transport=transport)
        self._base_url = (
            f"{self._settings.scheme}://{self._settings.host}:{self._settings.port}{REST_PREFIX}"
        )

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WowzaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # -- resolución de destino -------------------------------------------------

    def _application(self, application: str | None) -> str:
        return _pick(application, self._settings.application, DEFAULT_APPLICATION)

    def _stream_file(self, stream_file: str | None) -> str:
        return _pick(stream_file, self._settings.stream_file, DEFAULT_STREAM_FILE)

    def _app_instance(self, app_instance: str | None) -> str:
        return _pick(app_instance, self._settings.app_instance, DEFAULT_APP_INSTANCE)

    # -- URLs --------------------------------------------------------------------

    def stream_files_url(self, application: str | None = None) -> str:
        return f"{self._base_url}/applications/{_segment(self._application(application))}/streamfiles"

    def stream_file_url(self, application: str | None = None, stream_file: str | None = None) -> str:
        return f"{self.stream_files_url(application)}/{_segment(self._stream_file(stream_file))}"

    def recorder_url(
        self,
        application: str | None = None,
        app_instance: str | None = None,
        stream_file: str | None = None,
    ) -> str:
        app = _segment(self._application(application))
        instance = _segment(self._app_instance(app_instance))
        stream = _segment(self._stream_file(stream_file))
        return f"{self._base_url}/applications/{app}/instances/{instance}/streamrecorders/{stream}.stream"

    def stop_recording_url(
        self,
        application: str | None = None,
        app_instance: str | None = None,
        stream_file: str | None = None,
    ) -> str:
        return f"{self.recorder_url(application, app_instance, stream_file)}/actions/stopRecording"

    # -- transporte ----------------------------------------------------------------

    async def _request(self, method: str, url: str, *, body: dict[str, Any] | None = None) -> ApiResponse:
        logger.debug("%s %s", method, url)
        try:
            if body is None:
                response = await self._client.request(method, url)
            else:
                response = await self._client.request(method, url, json=body)
        except httpx.RequestError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportFailure(method=method, url=url, reason=str(exc) or type(exc).__name__) from exc

        return self._normalize(method, url, response)

    def _normalize(self, method: str, url: str, response: httpx.Response) -> ApiResponse:
        status = response.status_code
        if response.is_success:
            if not response.content:
                return ApiResponse.success(None, status_code=status)
            try:
                data = response.json()
            except ValueError as exc:
                logger.error("Non-JSON body from %s %s (status %s): %s", method, url, status, response.text)
                raise ResponseDecodeError(url=url, status_code=status, body=response.text) from exc
            return ApiResponse.success(data, status_code=status)

        raw = _best_effort_body(response)
        logger.warning("%s %s returned status %s: %s", method, url, status, raw)
        return ApiResponse.failure(status_code=status, raw=raw)

    # -- operaciones -----------------------------------------------------------------

    async def get_stream_files_list(self, application: str | None = None) -> ApiResponse:
        """Lista los stream files de una aplicación.

        Respuesta típica:
        `{"serverName": "_defaultServer_", "streamFiles": [{"id": "ipCamera", "href": "..."}]}`
        """

        return await self._request("GET", self.stream_files_url(application))

    async def get_stream_configuration(
        self,
        application: str | None = None,
        stream_file: str | None = None,
    ) -> ApiResponse:
        """Configuración de un stream file (`version`, `serverName`, `name`, `uri`)."""

        return await self._request("GET", self.stream_file_url(application, stream_file))

    async def create_recorder(
        self,
        recorder_parameters: RecorderParameters | Mapping[str, Any] | None = None,
        options: RecorderOptions | None = None,
    ) -> ApiResponse:
        """Crea (o reconfigura) el recorder de un stream.

        El cuerpo siempre lleva el registro completo: defaults para el stream
        efectivo con los campos del llamador encima.
        """

        options = options or RecorderOptions()
        application = self._application(options.application)
        stream_file = self._stream_file(options.stream_file)
        app_instance = self._app_instance(options.app_instance)

        body = merge_recorder_parameters(stream_file, recorder_parameters)
        url = self.recorder_url(application, app_instance, stream_file)
        return await self._request("POST", url, body=body)

    async def stop_recording(
        self,
        application: str | None = None,
        app_instance: str | None = None,
        stream_file: str | None = None,
    ) -> ApiResponse:
        return await self._request("PUT", self.stop_recording_url(application, app_instance, stream_file))

    async def get_recorder_status(
        self,
        application: str | None = None,
        app_instance: str | None = None,
        stream_file: str | None = None,
    ) -> ApiResponse:
        """Estado completo del recorder (estado, archivo actual, tamaño, duración...)."""

        return await self._request("GET", self.recorder_url(application, app_instance, stream_file))
