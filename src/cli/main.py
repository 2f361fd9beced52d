"""CLI principal (Typer + Rich).

Cada comando abre un `WowzaClient`, ejecuta una operación y renderiza el
envelope. Códigos de salida:
- 0: éxito
- 1: el servidor respondió con status de error
- 2: fallo de transporte o respuesta ilegible
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.json_exporter import envelope_payload, export_response_json
from adapters.wowza_client import WowzaClient
from cli import doctor
from cli.log_setup import setup_logging
from cli.ui_components import (
    build_error_panel,
    build_recorder_status_table,
    build_stream_config_table,
    build_stream_files_table,
)
from core.config import AppSettings
from core.domain.models import (
    ApiResponse,
    RecorderOptions,
    RecorderStatus,
    StreamConfig,
    StreamFilesList,
    wire_name,
)
from core.errors import MediaServerError
from core.services.recording import collect_recorder_statuses, start_recording

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Wowza Streaming Engine REST API client.")
recorder_app = typer.Typer(no_args_is_help=True, help="Live stream recorder lifecycle.")
app.add_typer(recorder_app, name="recorder")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

_APPLICATION = typer.Option(None, "--application", "-a", help="Application name (default from settings).")
_APP_INSTANCE = typer.Option(None, "--app-instance", "-i", help="Application instance (default from settings).")
_STREAM_FILE = typer.Option(None, "--stream-file", "-s", help="Stream file name without '.stream'.")
_AS_JSON = typer.Option(False, "--json", help="Print the raw response envelope as JSON.")
_OUTPUT = typer.Option(None, "--output", "-o", help="Also write the response envelope to a JSON file.")


def build_client(settings: AppSettings) -> WowzaClient:
    return WowzaClient(settings)


def _settings(ctx: typer.Context) -> AppSettings:
    if isinstance(ctx.obj, AppSettings):
        return ctx.obj
    return AppSettings()


def _execute(settings: AppSettings, operation: Callable[[WowzaClient], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with build_client(settings) as client:
            return await operation(client)

    try:
        return asyncio.run(runner())
    except MediaServerError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=2) from exc


def _emit(
    result: ApiResponse | dict[str, ApiResponse],
    *,
    as_json: bool,
    output: Path | None,
    render: Callable[[], None],
) -> None:
    responses = [result] if isinstance(result, ApiResponse) else list(result.values())
    failed = [r for r in responses if not r.ok]

    if output is not None:
        path = export_response_json(result=result, output_path=output)
        _err_console.print(f"[green]Saved:[/green] {path}")

    if as_json:
        typer.echo(json.dumps(envelope_payload(result), ensure_ascii=False, indent=2))
    elif failed:
        for response in failed:
            _console.print(build_error_panel(response))
    else:
        try:
            render()
        except ValidationError:
            # Forma inesperada: mostramos el JSON tal cual.
            _console.print_json(json.dumps(envelope_payload(result), ensure_ascii=False))

    if failed:
        raise typer.Exit(code=1)


# Campos de texto del recorder: "2024" debe llegar como cadena.
_STRING_FIELDS = frozenset(
    field.alias for field in RecorderStatus.model_fields.values() if field.annotation == (str | None)
)


def _coerce(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        return value


def parse_param_items(items: list[str] | None) -> dict[str, Any]:
    """Convierte `KEY=VALUE` en un dict.

    Los campos de texto conocidos quedan como cadena; el resto pasa a bool/int
    si aplica.
    """

    out: dict[str, Any] = {}
    for item in items or []:
        if "=" not in item:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--param")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in {item!r}", param_hint="--param")
        out[key] = value if wire_name(key) in _STRING_FIELDS else _coerce(value)
    return out


def _load_params_file(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--params-file") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter("JSON file must contain an object", param_hint="--params-file")
    return data


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = AppSettings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@app.command("streamfiles")
def streamfiles(
    ctx: typer.Context,
    application: str | None = _APPLICATION,
    as_json: bool = _AS_JSON,
    output: Path | None = _OUTPUT,
) -> None:
    """List the stream files of an application."""

    response = _execute(_settings(ctx), lambda c: c.get_stream_files_list(application))
    _emit(
        response,
        as_json=as_json,
        output=output,
        render=lambda: _console.print(build_stream_files_table(response.parse_as(StreamFilesList))),
    )


@app.command("stream-config")
def stream_config(
    ctx: typer.Context,
    application: str | None = _APPLICATION,
    stream_file: str | None = _STREAM_FILE,
    as_json: bool = _AS_JSON,
    output: Path | None = _OUTPUT,
) -> None:
    """Show the configuration of one stream file."""

    response = _execute(_settings(ctx), lambda c: c.get_stream_configuration(application, stream_file))
    _emit(
        response,
        as_json=as_json,
        output=output,
        render=lambda: _console.print(build_stream_config_table(response.parse_as(StreamConfig))),
    )


@recorder_app.command("start")
def recorder_start(
    ctx: typer.Context,
    application: str | None = _APPLICATION,
    app_instance: str | None = _APP_INSTANCE,
    stream_file: str | None = _STREAM_FILE,
    param: list[str] | None = typer.Option(
        None,
        "--param",
        "-p",
        help="Recorder field as KEY=VALUE (camelCase or snake_case). Repeatable.",
    ),
    params_file: Path | None = typer.Option(None, "--params-file", help="JSON object with recorder fields."),
    check_stream: bool = typer.Option(
        False,
        "--check-stream",
        help="Verify the stream file exists before creating the recorder.",
    ),
    as_json: bool = _AS_JSON,
    output: Path | None = _OUTPUT,
) -> None:
    """Create (or reconfigure) a recorder and start recording."""

    settings = _settings(ctx)
    parameters = {**_load_params_file(params_file), **parse_param_items(param)}

    if check_stream:
        target = stream_file or settings.stream_file
        response = _execute(
            settings,
            lambda c: start_recording(c, target, parameters, application=application, app_instance=app_instance),
        )
    else:
        options = RecorderOptions(application=application, stream_file=stream_file, app_instance=app_instance)
        response = _execute(settings, lambda c: c.create_recorder(parameters, options))

    _emit(response, as_json=as_json, output=output, render=lambda: _console.print_json(json.dumps(response.data)))


@recorder_app.command("stop")
def recorder_stop(
    ctx: typer.Context,
    application: str | None = _APPLICATION,
    app_instance: str | None = _APP_INSTANCE,
    stream_file: str | None = _STREAM_FILE,
    as_json: bool = _AS_JSON,
    output: Path | None = _OUTPUT,
) -> None:
    """Stop the recorder of a stream."""

    response = _execute(_settings(ctx), lambda c: c.stop_recording(application, app_instance, stream_file))
    _emit(response, as_json=as_json, output=output, render=lambda: _console.print_json(json.dumps(response.data)))


@recorder_app.command("status")
def recorder_status(
    ctx: typer.Context,
    application: str | None = _APPLICATION,
    app_instance: str | None = _APP_INSTANCE,
    stream_file: list[str] | None = typer.Option(
        None,
        "--stream-file",
        "-s",
        help="Stream file name without '.stream'. Repeat to query several recorders concurrently.",
    ),
    as_json: bool = _AS_JSON,
    output: Path | None = _OUTPUT,
) -> None:
    """Show recorder status for one or more streams."""

    settings = _settings(ctx)
    names = stream_file or [settings.stream_file]

    result: ApiResponse | dict[str, ApiResponse]
    if len(names) == 1:
        result = _execute(settings, lambda c: c.get_recorder_status(application, app_instance, names[0]))
        statuses = {names[0]: result}
    else:
        result = _execute(
            settings,
            lambda c: collect_recorder_statuses(c, names, application=application, app_instance=app_instance),
        )
        statuses = result

    _emit(
        result,
        as_json=as_json,
        output=output,
        render=lambda: _console.print(
            build_recorder_status_table({k: v.parse_as(RecorderStatus) for k, v in statuses.items()})
        ),
    )


def run() -> None:
    app()
