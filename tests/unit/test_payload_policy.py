from __future__ import annotations

import uuid

import pytest

from messenger_service.application.exceptions import InvalidPayloadError
from messenger_service.application.policies.payload import build_new_message

CONV = uuid.uuid4()
SENDER = uuid.uuid4()


def _location(**metadata):
    return build_new_message(CONV, SENDER, None, "location", metadata)


def test_text_requires_content():
    with pytest.raises(InvalidPayloadError):
        build_new_message(CONV, SENDER, "   ", "text", None)


def test_text_keeps_content_verbatim():
    msg = build_new_message(CONV, SENDER, " hi there ", "text", None)
    assert msg.content == " hi there "
    assert msg.type == "text"
    assert msg.metadata is None


def test_unknown_type_rejected():
    with pytest.raises(InvalidPayloadError):
        build_new_message(CONV, SENDER, "hi", "sticker", None)


def test_location_requires_metadata():
    with pytest.raises(InvalidPayloadError):
        build_new_message(CONV, SENDER, None, "location", None)


@pytest.mark.parametrize(
    "metadata",
    [
        {"longitude": 2.35, "address": "Paris"},
        {"latitude": "48.8", "longitude": 2.35, "address": "Paris"},
        {"latitude": True, "longitude": 2.35, "address": "Paris"},
        {"latitude": 91, "longitude": 2.35, "address": "Paris"},
        {"latitude": 48.8, "longitude": -180.5, "address": "Paris"},
        {"latitude": 48.8, "longitude": 2.35, "address": "  "},
        {"latitude": 48.8, "longitude": 2.35},
    ],
)
def test_location_metadata_shape(metadata):
    with pytest.raises(InvalidPayloadError):
        _location(**metadata)


def test_location_accepts_bounds_and_builds_content():
    msg = _location(latitude=-90, longitude=180, address=" South Pole ")
    assert msg.content == "📍 Shared location: South Pole"
    assert msg.metadata == {"latitude": -90.0, "longitude": 180.0, "address": "South Pole"}


def test_location_keeps_explicit_content():
    msg = build_new_message(
        CONV, SENDER, "Meet here", "location",
        {"latitude": 1.5, "longitude": 2.5, "address": "Dock 4"},
    )
    assert msg.content == "Meet here"
