"""Servicios de grabación sobre `MediaServerAPI`.

Por qué en core:
- Combinan varias operaciones sin conocer httpx; solo el contrato.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping

from core.domain.models import ApiResponse, RecorderOptions, RecorderParameters
from core.interfaces.media_server import MediaServerAPI

logger = logging.getLogger(__name__)


async def collect_recorder_statuses(
    api: MediaServerAPI,
    stream_files: Iterable[str],
    *,
    application: str | None = None,
    app_instance: str | None = None,
) -> dict[str, ApiResponse]:
    """Consulta en paralelo el estado de varios recorders.

    Los duplicados se consultan una sola vez; el orden de entrada se conserva.
    """

    names = list(dict.fromkeys(s.strip() for s in stream_files if s and s.strip()))
    tasks = [
        api.get_recorder_status(application=application, app_instance=app_instance, stream_file=name)
        for name in names
    ]
    results = await asyncio.gather(*tasks)
    return dict(zip(names, results))


async def start_recording(
    api: MediaServerAPI,
    stream_file: str,
    parameters: RecorderParameters | Mapping[str, Any] | None = None,
    *,
    application: str | None = None,
    app_instance: str | None = None,
) -> ApiResponse:
    """Crea el recorder solo si el stream file existe en el servidor.

    Si la consulta previa falla se devuelve ese envelope y no se hace el POST.
    """

    config = await api.get_stream_configuration(application=application, stream_file=stream_file)
    if not config.ok:
        logger.info("Stream file %r not available, recorder not created", stream_file)
        return config

    options = RecorderOptions(application=application, stream_file=stream_file, app_instance=app_instance)
    return await api.create_recorder(parameters, options)
