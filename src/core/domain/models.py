"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación y documentación autocontenida (Field) sin acoplar el Core
  a httpx.
- Los nombres Python son snake_case; en el cable Wowza usa camelCase, así que
  los modelos de wire declaran alias.

Nota:
- `ApiResponse.data` guarda el JSON tal cual llegó. Los modelos de lectura
  (`StreamFilesList`, `StreamConfig`, `RecorderStatus`) son opcionales vía
  `ApiResponse.parse_as`.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

FILE_VERSION_DELEGATE = "com.wowza.wms.livestreamrecord.manager.StreamRecorderFileVersionDelegate"

M = TypeVar("M", bound=BaseModel)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class RecorderParameters(_WireModel):
    """Parámetros de un stream recorder.

    Todos los campos son opcionales y no se validan rangos: el servidor es
    quien rechaza combinaciones inválidas. Claves desconocidas se envían tal
    cual (merge superficial).
    """

    recorder_name: str | None = None
    instance_name: str | None = None
    recorder_state: str | None = None
    default_recorder: bool | None = None
    segmentation_type: str | None = Field(
        default=None,
        description="None | SegmentByDuration | SegmentBySize | SegmentBySchedule.",
    )
    output_path: str | None = None
    base_file: str | None = None
    file_version_delegate_name: str | None = None
    file_template: str | None = Field(
        default=None,
        description="Plantilla de nombre, p.ej. '${BaseFileName}_${RecordingStartTime}_${SegmentNumber}'.",
    )
    segment_duration: int | None = None
    segment_size: int | None = None
    record_data: bool | None = None
    start_on_key_frame: bool | None = None
    split_on_tc_discontinuity: bool | None = None
    back_buffer_time: int | None = None
    option: str | None = Field(
        default=None,
        description="Política ante archivo existente (version/append/overwrite).",
    )
    move_first_video_frame_to_zero: bool | None = None
    current_size: int | None = None
    current_duration: int | None = None
    recording_start_time: str | None = None
    server_name: str | None = None
    segment_schedule: str | None = None
    current_file: str | None = None
    save_field_list: list[str] | None = None
    application_name: str | None = None
    recorder_error_string: str | None = None
    version: str | None = None
    file_format: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Solo los campos fijados por el llamador, con nombres camelCase."""

        return self.model_dump(by_alias=True, exclude_unset=True)


def default_recorder_parameters(stream_file: str) -> dict[str, Any]:
    """Registro completo que recibe el servidor cuando el llamador no fija nada.

    Cada campo vale "", 0 o False salvo los que Wowza necesita rellenos.
    """

    return {
        "instanceName": "",
        "fileVersionDelegateName": FILE_VERSION_DELEGATE,
        "serverName": "",
        "recorderName": f"{stream_file}.stream",
        "currentSize": 0,
        "segmentSchedule": "",
        "startOnKeyFrame": True,
        "outputPath": "",
        "currentFile": "",
        "saveFieldList": [""],
        "recordData": False,
        "applicationName": "",
        "moveFirstVideoFrameToZero": False,
        "recorderErrorString": "",
        "segmentSize": 0,
        "defaultRecorder": False,
        "splitOnTcDiscontinuity": False,
        "version": "",
        "baseFile": "",
        "segmentDuration": 0,
        "recordingStartTime": "",
        "fileTemplate": "",
        "backBufferTime": 0,
        "segmentationType": "",
        "currentDuration": 0,
        "fileFormat": "",
        "recorderState": "",
        "option": "",
    }


def merge_recorder_parameters(
    stream_file: str,
    overrides: RecorderParameters | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge superficial: defaults + campos del llamador (gana el llamador).

    Un mapping no se valida: solo se traducen claves snake_case a su alias
    camelCase y los valores llegan al cuerpo sin tocar.
    """

    body = default_recorder_parameters(stream_file)
    if overrides is None:
        return body
    if isinstance(overrides, RecorderParameters):
        body.update(overrides.to_wire())
    else:
        body.update({wire_name(key): value for key, value in overrides.items()})
    return body


def wire_name(key: str) -> str:
    """Alias camelCase de un campo de recorder; claves desconocidas sin cambios."""

    field = RecorderStatus.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key


class RecorderOptions(BaseModel):
    """Overrides por llamada del destino del recorder."""

    application: str | None = None
    stream_file: str | None = None
    app_instance: str | None = None


class StreamFileRef(_WireModel):
    id: str
    href: str


class StreamFilesList(_WireModel):
    server_name: str | None = None
    stream_files: list[StreamFileRef] = Field(default_factory=list)


class StreamConfig(_WireModel):
    version: str | None = None
    server_name: str | None = None
    name: str | None = None
    uri: str | None = None


class RecorderStatus(RecorderParameters):
    """Estado de un recorder tal como lo reporta Wowza."""

    time_scale: int | None = None
    default_audio_search_position: bool | None = None
    skip_key_frame_until_audio_timeout: int | None = None


class ApiError(BaseModel):
    message: str = Field(..., min_length=1)


class ApiResponse(BaseModel):
    """Envelope uniforme de cada operación.

    - Éxito: `data` con el JSON parseado.
    - Error de aplicación (status no 2xx): `errors` no vacío + `raw` con el
      cuerpo (JSON si se pudo parsear, texto si no).
    """

    data: Any = None
    errors: list[ApiError] = Field(default_factory=list)
    raw: Any = None
    status_code: int | None = Field(
        default=None,
        description="Status HTTP recibido (informativo).",
    )

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls, data: Any, *, status_code: int | None = None) -> "ApiResponse":
        return cls(data=data, status_code=status_code)

    @classmethod
    def failure(cls, *, status_code: int, raw: Any) -> "ApiResponse":
        return cls(
            errors=[ApiError(message=f"request failed with status {status_code}")],
            raw=raw,
            status_code=status_code,
        )

    def parse_as(self, model: type[M]) -> M:
        """Valida `data` contra un modelo de lectura."""

        if not self.ok:
            raise ValueError("Cannot parse a failed response: " + "; ".join(e.message for e in self.errors))
        return model.model_validate(self.data)

    def to_envelope(self) -> dict[str, Any]:
        """Forma discriminada: `{data}` o `{errors, raw}`."""

        if self.ok:
            return {"data": self.data}
        return {
            "errors": [e.model_dump() for e in self.errors],
            "raw": self.raw,
        }
