"""Exportación JSON de respuestas.

Por qué JSON:
- Interoperabilidad con scripts y pipelines (jq, monitorización).
- Permite guardar el estado de un recorder tal como lo devolvió el servidor.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.domain.models import ApiResponse


def envelope_payload(result: ApiResponse | dict[str, ApiResponse]) -> dict[str, Any]:
    if isinstance(result, ApiResponse):
        return result.to_envelope()
    return {name: response.to_envelope() for name, response in result.items()}


def export_response_json(*, result: ApiResponse | dict[str, ApiResponse], output_path: Path) -> Path:
    """Exporta un envelope (o un mapa stream -> envelope) a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(envelope_payload(result), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
