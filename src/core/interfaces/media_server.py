"""Contrato de la REST API de control del servidor de medios.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que los servicios se prueben con un doble en memoria sin HTTP.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from core.domain.models import ApiResponse, RecorderOptions, RecorderParameters


@runtime_checkable
class MediaServerAPI(Protocol):
    """Las cinco operaciones expuestas.

    Reglas de diseño:
    - Cada operación es asíncrona y hace exactamente un round trip HTTP.
    - Un status de error se devuelve como envelope, nunca como excepción.
    """

    async def get_stream_files_list(self, application: str | None = None) -> ApiResponse:
        ...

    async def get_stream_configuration(
        self,
        application: str | None = None,
        stream_file: str | None = None,
    ) -> ApiResponse:
        ...

    async def create_recorder(
        self,
        recorder_parameters: RecorderParameters | Mapping[str, Any] | None = None,
        options: RecorderOptions | None = None,
    ) -> ApiResponse:
        ...

    async def stop_recording(
        self,
        application: str | None = None,
        app_instance: str | None = None,
        stream_file: str | None = None,
    ) -> ApiResponse:
        ...

    async def get_recorder_status(
        self,
        application: str | None = None,
        app_instance: str | None = None,
        stream_file: str | None = None,
    ) -> ApiResponse:
        ...
