"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ApiResponse, RecorderStatus, StreamConfig, StreamFilesList


def print_banner(console: Console) -> None:
    title = Text("WOWZA-D2", style="bold cyan")
    subtitle = Text("Stream files • Recorders • REST API", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_stream_files_table(listing: StreamFilesList) -> Table:
    table = Table(title=f"Stream files ({listing.server_name or '?'})")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Href", style="magenta")
    for ref in listing.stream_files:
        table.add_row(ref.id, ref.href)
    return table


def build_stream_config_table(config: StreamConfig) -> Table:
    table = Table(title="Stream configuration", show_header=False)
    table.add_column("Field", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("name", config.name or "")
    table.add_row("uri", config.uri or "")
    table.add_row("serverName", config.server_name or "")
    table.add_row("version", config.version or "")
    return table


def build_recorder_status_table(statuses: dict[str, RecorderStatus]) -> Table:
    """Una fila por stream; pensado para `recorder status` con varios streams."""

    table = Table(title="Recorders")
    table.add_column("Recorder", style="cyan", no_wrap=True)
    table.add_column("State", style="green")
    table.add_column("Current file", style="white")
    table.add_column("Size (bytes)", justify="right")
    table.add_column("Duration (ms)", justify="right")
    table.add_column("Started", style="dim")
    for name, status in statuses.items():
        table.add_row(
            status.recorder_name or name,
            status.recorder_state or "",
            status.current_file or "",
            str(status.current_size or 0),
            str(status.current_duration or 0),
            status.recording_start_time or "",
        )
    return table


def build_error_panel(response: ApiResponse, *, title: str = "Request failed") -> Panel:
    """Panel con los errores del envelope y el cuerpo devuelto por Wowza."""

    body = Text()
    for error in response.errors:
        body.append(f"- {error.message}\n", style="bold red")
    if response.raw not in (None, ""):
        body.append("\n")
        body.append(_format_raw(response.raw), style="dim")
    return Panel(body, title=Text(title, style="bold red"), border_style="red")


def _format_raw(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, ensure_ascii=False, indent=2)
