import pytest
import requests

from helpers.fake_http import FakeResponse, FakeSession, SessionFactory, make_config
from line_bot_v1.domain.errors import JsonProcessingError, ServerStatusError, TransportIOError
from line_bot_v1.infra.line_api import DefaultLineBotClient
from line_bot_v1.presentation.multiple_message_builder import MultipleMessageBuilder


def _client(*sessions):
    factory = SessionFactory(*sessions)
    return DefaultLineBotClient(make_config(), session_factory=factory), factory


def test_get_user_profile_joins_mids_and_parses_contacts():
    body = {
        "contacts": [
            {
                "displayName": "Alice",
                "mid": "u1",
                "pictureUrl": "https://example.com/a.png",
                "statusMessage": "hello",
                "unknown": "ignored",
            }
        ],
        "count": 1,
        "display": 1,
        "start": 1,
        "total": 1,
    }
    session = FakeSession(FakeResponse(body=body))
    client, _ = _client(session)

    profile = client.get_user_profile(["u1", "u2"])

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.example.com/v1/profiles?mids=u1,u2"
    assert call["headers"]["X-Line-ChannelID"] == "1000000000"
    assert profile.count == 1
    assert profile.contacts[0].display_name == "Alice"
    assert profile.contacts[0].picture_url == "https://example.com/a.png"
    assert session.closed


def test_get_user_profile_error_status():
    session = FakeSession(FakeResponse(status_code=500, reason="Internal Server Error", body="boom"))
    client, _ = _client(session)

    with pytest.raises(ServerStatusError) as excinfo:
        client.get_user_profile(["u1"])

    assert excinfo.value.body == "boom"
    assert session.closed


def test_get_message_content_returns_open_stream():
    response = FakeResponse(
        body=b"",
        headers={"Content-Type": "image/jpeg", "Content-Length": "6"},
        chunks=[b"abc", b"def"],
    )
    session = FakeSession(response)
    client, _ = _client(session)

    content = client.get_message_content("m1")

    call = session.calls[0]
    assert call["url"] == "https://api.example.com/v1/bot/message/m1/content"
    assert call["stream"] is True
    assert not session.closed
    assert content.content_type == "image/jpeg"
    assert content.content_length == 6

    with content:
        assert content.read() == b"abcdef"

    assert content.closed
    assert session.closed
    assert response.closed


def test_get_preview_message_content_uses_preview_path():
    session = FakeSession(FakeResponse(body=b"png"))
    client, _ = _client(session)

    with client.get_preview_message_content("m2") as content:
        assert content.read() == b"png"

    assert session.calls[0]["url"] == "https://api.example.com/v1/bot/message/m2/content/preview"


def test_get_message_content_error_status_releases_resources():
    response = FakeResponse(status_code=404, reason="Not Found", body="missing")
    session = FakeSession(response)
    client, _ = _client(session)

    with pytest.raises(ServerStatusError) as excinfo:
        client.get_message_content("m1")

    assert excinfo.value.status_code == 404
    assert session.closed
    assert response.closed


def test_get_message_content_io_error_releases_session():
    session = FakeSession(error=requests.ConnectionError("reset"))
    client, _ = _client(session)

    with pytest.raises(TransportIOError):
        client.get_message_content("m1")

    assert session.closed


def test_message_content_read_after_close_fails():
    session = FakeSession(FakeResponse(body=b"x"))
    client, _ = _client(session)

    content = client.get_message_content("m1")
    content.close()
    content.close()

    with pytest.raises(ValueError):
        content.read()


def test_create_multiple_message_builder_is_bound_to_client():
    client, _ = _client()

    builder = client.create_multiple_message_builder()

    assert isinstance(builder, MultipleMessageBuilder)


def test_get_user_profile_accepts_single_mid():
    session = FakeSession(FakeResponse(body={"contacts": [], "count": 0}))
    client, _ = _client(session)

    client.get_user_profile("u1234")

    assert session.calls[0]["url"] == "https://api.example.com/v1/profiles?mids=u1234"


@pytest.mark.parametrize("body", [{"contacts": ["u1"]}, {"contacts": 5}])
def test_get_user_profile_malformed_contacts(body):
    session = FakeSession(FakeResponse(body=body))
    client, _ = _client(session)

    with pytest.raises(JsonProcessingError):
        client.get_user_profile(["u1"])
    assert session.closed
