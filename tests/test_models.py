"""Tests for recorder parameter merging and the response envelope."""

import pytest
from pydantic import ValidationError

from core.domain.models import (
    FILE_VERSION_DELEGATE,
    ApiResponse,
    RecorderParameters,
    RecorderStatus,
    StreamFilesList,
    default_recorder_parameters,
    merge_recorder_parameters,
    wire_name,
)


def test_default_record_values():
    record = default_recorder_parameters("ipCamera")

    assert record["recorderName"] == "ipCamera.stream"
    assert record["fileVersionDelegateName"] == FILE_VERSION_DELEGATE
    assert record["startOnKeyFrame"] is True
    assert record["saveFieldList"] == [""]
    special = {"recorderName", "fileVersionDelegateName", "startOnKeyFrame", "saveFieldList"}
    for key, value in record.items():
        if key not in special:
            assert value in ("", 0, False), key


def test_default_record_covers_every_parameter_field():
    aliases = {field.alias for field in RecorderParameters.model_fields.values()}

    assert aliases == set(default_recorder_parameters("x"))


def test_merge_without_overrides_is_the_default_record():
    assert merge_recorder_parameters("cam") == default_recorder_parameters("cam")


def test_merge_partial_override_only_touches_given_keys():
    merged = merge_recorder_parameters("cam", RecorderParameters(file_format="MP4", back_buffer_time=3000))

    expected = default_recorder_parameters("cam")
    expected["fileFormat"] = "MP4"
    expected["backBufferTime"] = 3000
    assert merged == expected


def test_merge_passes_unknown_keys_through():
    merged = merge_recorder_parameters("cam", {"customField": "x"})

    assert merged["customField"] == "x"
    assert len(merged) == len(default_recorder_parameters("cam")) + 1


def test_merge_does_not_mutate_defaults_between_calls():
    merge_recorder_parameters("cam", {"saveFieldList": ["a"]})

    assert default_recorder_parameters("cam")["saveFieldList"] == [""]


def test_to_wire_uses_camel_case_and_only_set_fields():
    params = RecorderParameters(move_first_video_frame_to_zero=True, segmentSize=1024)

    assert params.to_wire() == {"moveFirstVideoFrameToZero": True, "segmentSize": 1024}


def test_envelope_success_and_failure_shapes():
    ok = ApiResponse.success({"a": 1}, status_code=201)
    failed = ApiResponse.failure(status_code=409, raw={"message": "exists"})

    assert ok.ok and ok.to_envelope() == {"data": {"a": 1}}
    assert not failed.ok
    assert failed.errors[0].message == "request failed with status 409"
    assert failed.to_envelope()["raw"] == {"message": "exists"}


def test_parse_as_read_model():
    response = ApiResponse.success(
        {
            "serverName": "_defaultServer_",
            "streamFiles": [{"id": "ipCamera2", "href": "/v2/servers/_defaultServer_/vhosts/_defaultVHost_/x"}],
        }
    )

    listing = response.parse_as(StreamFilesList)

    assert listing.server_name == "_defaultServer_"
    assert listing.stream_files[0].id == "ipCamera2"


def test_parse_recorder_status_keeps_extra_fields():
    status = ApiResponse.success(
        {
            "recorderName": "mystream.stream",
            "recorderState": "Recording in Progress",
            "currentSize": 626866569,
            "timeScale": 90000,
            "somethingNew": 1,
        }
    ).parse_as(RecorderStatus)

    assert status.recorder_state == "Recording in Progress"
    assert status.current_size == 626866569
    assert status.time_scale == 90000
    assert status.model_extra == {"somethingNew": 1}


def test_parse_as_refuses_failed_response():
    with pytest.raises(ValueError, match="status 500"):
        ApiResponse.failure(status_code=500, raw="").parse_as(StreamFilesList)


def test_parse_as_rejects_wrong_shape():
    with pytest.raises(ValidationError):
        ApiResponse.success({"streamFiles": "nope"}).parse_as(StreamFilesList)


def test_merge_mapping_values_reach_body_unchanged():
    merged = merge_recorder_parameters(
        "cam",
        {"segmentDuration": 1.5, "version": 2, "segment_size": "900000", "record_data": "yes"},
    )

    assert merged["segmentDuration"] == 1.5
    assert merged["version"] == 2
    assert merged["segmentSize"] == "900000"
    assert merged["recordData"] == "yes"
    assert "segment_size" not in merged
    assert "record_data" not in merged


def test_wire_name_translates_known_fields_only():
    assert wire_name("move_first_video_frame_to_zero") == "moveFirstVideoFrameToZero"
    assert wire_name("time_scale") == "timeScale"
    assert wire_name("baseFile") == "baseFile"
    assert wire_name("custom_thing") == "custom_thing"
