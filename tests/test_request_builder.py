import json

import pytest

from line_bot_v1.config import (
    DEFAULT_SENDING_MESSAGE_CHANNEL_ID,
    DEFAULT_SENDING_MESSAGE_EVENT_ID,
    DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID,
)
from line_bot_v1.domain import models
from line_bot_v1.domain.services.request_builder import RequestBuilder
from line_bot_v1.infra.codec import request_to_dict
from line_bot_v1.presentation.rich_message_builder import RichMessageBuilder


@pytest.fixture
def builder():
    return RequestBuilder(
        DEFAULT_SENDING_MESSAGE_CHANNEL_ID,
        DEFAULT_SENDING_MESSAGE_EVENT_ID,
        DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID,
    )


def test_single_recipient_is_wrapped(builder):
    request = builder.build_text("U1", "hi")

    assert request.to == ["U1"]
    assert request.to_channel == DEFAULT_SENDING_MESSAGE_CHANNEL_ID
    assert request.event_type == DEFAULT_SENDING_MESSAGE_EVENT_ID


def test_recipient_order_is_preserved(builder):
    request = builder.build_text(("U3", "U1", "U2"), "hi")

    assert request.to == ["U3", "U1", "U2"]


def test_builder_does_not_limit_recipients(builder):
    request = builder.build_text([f"U{i}" for i in range(151)], "hi")

    assert len(request.to) == 151


@pytest.mark.parametrize(
    "call",
    [
        lambda b: b.build_text("U1", None),
        lambda b: b.build_image("U1", "https://example.com/a.jpg", None),
        lambda b: b.build_audio("U1", None, "1000"),
        lambda b: b.build_sticker("U1", None, "1"),
        lambda b: b.build_rich_message("U1", "https://example.com/rm", "alt", None),
        lambda b: b.build_text(None, "hi"),
        lambda b: b.build_text([], "hi"),
        lambda b: b.build_text(["U1", None], "hi"),
    ],
)
def test_missing_required_values_raise(builder, call):
    with pytest.raises(ValueError):
        call(builder)


def test_image_payload(builder):
    request = builder.build_image("U1", "https://example.com/a.jpg", "https://example.com/a_s.jpg")

    content = request_to_dict(request)["content"]
    assert content == {
        "contentType": 2,
        "toType": "USER",
        "originalContentUrl": "https://example.com/a.jpg",
        "previewImageUrl": "https://example.com/a_s.jpg",
    }


def test_audio_payload(builder):
    content = request_to_dict(builder.build_audio("U1", "https://example.com/a.m4a", 240000))["content"]

    assert content["contentType"] == 4
    assert content["contentMetadata"] == {"AUDLEN": "240000"}


def test_sticker_payload(builder):
    content = request_to_dict(builder.build_sticker("U1", 1, 2, "100"))["content"]

    assert content["contentType"] == 8
    assert content["contentMetadata"] == {"STKPKGID": "1", "STKID": "2", "STKVER": "100", "STKTXT": "[]"}


def test_location_payload_drops_missing_fields(builder):
    content = request_to_dict(builder.build_location("U1", "here", "Title", None, 35.6, 139.7))["content"]

    assert content["text"] == "here"
    assert content["location"] == {"title": "Title", "latitude": 35.6, "longitude": 139.7}


def test_rich_message_markup_is_json_string(builder):
    rich_message = (
        RichMessageBuilder(1040)
        .add_web_action("openHomepage", "Open", "https://example.com", 0, 0, 1040, 520)
        .build()
    )

    request = builder.build_rich_message("U1", "https://example.com/rm", "Rich!", rich_message)

    payload = json.loads(json.dumps(request_to_dict(request)))
    metadata = payload["content"]["contentMetadata"]
    assert payload["content"]["contentType"] == 12
    assert metadata["DOWNLOAD_URL"] == "https://example.com/rm"
    assert metadata["ALT_TEXT"] == "Rich!"
    assert metadata["SPEC_REV"] == "1"
    assert isinstance(metadata["MARKUP_JSON"], str)
    markup = json.loads(metadata["MARKUP_JSON"])
    assert markup["canvas"] == {"width": 1040, "height": 1040, "initialScene": "scene1"}
    assert markup["actions"]["openHomepage"] == {
        "type": "web",
        "text": "Open",
        "params": {"linkUri": "https://example.com"},
    }
    assert markup["scenes"]["scene1"]["listeners"] == [
        {"type": "touch", "params": [0, 0, 1040, 520], "action": "openHomepage"}
    ]


def test_build_multiple(builder):
    contents = [models.TextContent(text="a"), models.TextContent(text="b")]

    request = builder.build_multiple(["U1"], contents, message_notified=1)

    assert request.event_type == DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID
    assert request.content.message_notified == 1
    assert request.content.messages == contents


@pytest.mark.parametrize("contents, notified", [([], 0), ([models.TextContent(text="a")], 1)])
def test_build_multiple_rejects_invalid_input(builder, contents, notified):
    with pytest.raises(ValueError):
        builder.build_multiple(["U1"], contents, message_notified=notified)
