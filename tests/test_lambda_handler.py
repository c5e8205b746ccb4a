import base64
import json
from unittest.mock import MagicMock

import pytest

from line_bot_v1 import lambda_handler as handler_module
from line_bot_v1.config import get_settings
from line_bot_v1.domain import models
from line_bot_v1.infra.signature import create_signature, encode_signature

SECRET = "webhooksecret"


@pytest.fixture
def dispatcher(monkeypatch):
    monkeypatch.setenv("LINE_CHANNEL_ID", "1000000000")
    monkeypatch.setenv("LINE_CHANNEL_SECRET", SECRET)
    monkeypatch.setenv("LINE_CHANNEL_MID", "u0123456789abcdef")
    get_settings.cache_clear()
    fake = MagicMock()
    monkeypatch.setattr(handler_module, "get_dispatcher", lambda: fake)
    yield fake
    get_settings.cache_clear()


def _body(result):
    return json.dumps({"result": result})


def _text_event(text):
    return {
        "from": "u206d25c2ea6bd87c17655609a1c37cb8",
        "fromChannel": 1341301815,
        "to": ["u0cc15697597f61dd8b01cea8b027050e"],
        "toChannel": 1441301333,
        "eventType": models.MESSAGE_EVENT_TYPE,
        "id": "ABCDEF-12345678901",
        "content": {"contentType": 1, "from": "uff2a", "toType": 1, "text": text},
    }


def _signed_event(body, header="X-LINE-ChannelSignature"):
    signature = encode_signature(create_signature(SECRET, body.encode("utf-8")))
    return {"headers": {header: signature}, "body": body}


def test_valid_signature_dispatches_events(dispatcher):
    body = _body([_text_event("hello"), _text_event("again")])

    response = handler_module.lambda_handler(_signed_event(body), None)

    assert response["statusCode"] == 200
    assert dispatcher.dispatch.call_count == 2
    first = dispatcher.dispatch.call_args_list[0].args[0]
    assert first.content.text == "hello"


def test_header_lookup_is_case_insensitive(dispatcher):
    body = _body([_text_event("hello")])

    response = handler_module.lambda_handler(_signed_event(body, "x-line-channelsignature"), None)

    assert response["statusCode"] == 200


def test_base64_encoded_body(dispatcher):
    body = _body([_text_event("hello")])
    event = _signed_event(body)
    event["body"] = base64.b64encode(body.encode("utf-8")).decode()
    event["isBase64Encoded"] = True

    response = handler_module.lambda_handler(event, None)

    assert response["statusCode"] == 200
    dispatcher.dispatch.assert_called_once()


def test_missing_signature_is_forbidden(dispatcher):
    response = handler_module.lambda_handler({"headers": {}, "body": _body([_text_event("x")])}, None)

    assert response["statusCode"] == 403
    dispatcher.dispatch.assert_not_called()


def test_tampered_body_is_forbidden(dispatcher):
    event = _signed_event(_body([_text_event("hello")]))
    event["body"] = _body([_text_event("HELLO")])

    response = handler_module.lambda_handler(event, None)

    assert response["statusCode"] == 403
    dispatcher.dispatch.assert_not_called()


def test_malformed_signature_is_forbidden(dispatcher):
    event = {"headers": {"X-LINE-ChannelSignature": "%%%"}, "body": _body([])}

    response = handler_module.lambda_handler(event, None)

    assert response["statusCode"] == 403


def test_null_result_is_bad_request(dispatcher):
    response = handler_module.lambda_handler(_signed_event('{"result": null}'), None)

    assert response["statusCode"] == 400
    dispatcher.dispatch.assert_not_called()


def test_handler_failure_does_not_stop_other_events(dispatcher):
    dispatcher.dispatch.side_effect = [RuntimeError("boom"), None]
    body = _body([_text_event("a"), _text_event("b")])

    response = handler_module.lambda_handler(_signed_event(body), None)

    assert response["statusCode"] == 200
    assert dispatcher.dispatch.call_count == 2


def test_malformed_nested_content_is_bad_request(dispatcher):
    event = _text_event("x")
    event["content"] = {"contentType": 7, "location": {"latitude": "north"}}

    response = handler_module.lambda_handler(_signed_event(_body([event])), None)

    assert response["statusCode"] == 400
    dispatcher.dispatch.assert_not_called()
