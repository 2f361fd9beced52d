"""Tests for the recording services built on the MediaServerAPI contract."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from core.domain.models import ApiResponse, RecorderOptions
from core.interfaces.media_server import MediaServerAPI
from core.services.recording import collect_recorder_statuses, start_recording


class FakeMediaServer:
    """In-memory stand-in recording every call."""

    def __init__(self, known_streams: set[str] | None = None) -> None:
        self.known_streams = known_streams or set()
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_stream_files_list(self, application=None):
        self.calls.append(("list", {"application": application}))
        return ApiResponse.success({"streamFiles": []})

    async def get_stream_configuration(self, application=None, stream_file=None):
        self.calls.append(("config", {"application": application, "stream_file": stream_file}))
        if stream_file in self.known_streams:
            return ApiResponse.success({"name": stream_file, "uri": "rtsp://cam"})
        return ApiResponse.failure(status_code=404, raw={"message": "not found"})

    async def create_recorder(self, recorder_parameters=None, options=None):
        self.calls.append(("create", {"parameters": recorder_parameters, "options": options}))
        return ApiResponse.success({"success": True, "message": "Recorder Created"})

    async def stop_recording(self, application=None, app_instance=None, stream_file=None):
        self.calls.append(("stop", {"stream_file": stream_file}))
        return ApiResponse.success({"success": True})

    async def get_recorder_status(self, application=None, app_instance=None, stream_file=None):
        self.calls.append(("status", {"application": application, "stream_file": stream_file}))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        if stream_file == "broken":
            return ApiResponse.failure(status_code=500, raw="boom")
        return ApiResponse.success({"recorderName": f"{stream_file}.stream", "recorderState": "Recording in Progress"})


def test_fake_satisfies_protocol():
    assert isinstance(FakeMediaServer(), MediaServerAPI)


@pytest.mark.asyncio
async def test_collect_statuses_runs_concurrently_and_keeps_order():
    api = FakeMediaServer()

    result = await collect_recorder_statuses(api, ["camB", "camA", "camB", " ", "broken"], application="webrtc")

    assert list(result) == ["camB", "camA", "broken"]
    assert result["camA"].data["recorderName"] == "camA.stream"
    assert not result["broken"].ok
    assert api.max_in_flight == 3
    assert all(kwargs["application"] == "webrtc" for _, kwargs in api.calls)


@pytest.mark.asyncio
async def test_start_recording_creates_recorder_for_known_stream():
    api = FakeMediaServer(known_streams={"ipCamera"})

    response = await start_recording(api, "ipCamera", {"fileFormat": "MP4"}, application="webrtc")

    assert response.ok
    assert [name for name, _ in api.calls] == ["config", "create"]
    _, create_args = api.calls[-1]
    assert create_args["parameters"] == {"fileFormat": "MP4"}
    assert create_args["options"] == RecorderOptions(application="webrtc", stream_file="ipCamera")


@pytest.mark.asyncio
async def test_start_recording_skips_post_when_stream_is_missing():
    api = FakeMediaServer()

    response = await start_recording(api, "ghost")

    assert not response.ok
    assert response.status_code == 404
    assert [name for name, _ in api.calls] == ["config"]
