from __future__ import annotations

import base64
import json
import logging
from functools import lru_cache

from dotenv import load_dotenv

from .app.bootstrap import build_dispatcher
from .app.dispatcher import Dispatcher
from .config import get_settings
from .domain.errors import JsonProcessingError
from .presentation.line_webhook_parser import (
    SignatureVerificationError,
    find_signature,
    parse_events,
    verify_signature,
)

load_dotenv()

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    return build_dispatcher()


def lambda_handler(event, _context):
    settings = get_settings()
    headers = event.get("headers") or {}
    signature = find_signature(headers)

    try:
        body = _extract_body(event)
    except ValueError as exc:
        logger.warning("Undecodable request body: %s", exc)
        return {"statusCode": 400, "body": json.dumps({"message": "Bad Request"})}

    try:
        # イベント内容を信頼する前に必ず署名を検証する
        verify_signature(settings.line_channel_secret, body, signature)
    except SignatureVerificationError as exc:
        logger.warning("Signature verification failed: %s", exc)
        return {"statusCode": 403, "body": json.dumps({"message": "Forbidden"})}

    try:
        events = parse_events(body)
    except JsonProcessingError as exc:
        logger.warning("Invalid callback payload: %s", exc)
        return {"statusCode": 400, "body": json.dumps({"message": "Bad Request"})}

    logger.info(
        "Parsed LINE callback events | count=%s types=%s",
        len(events),
        [evt.event_type for evt in events],
    )

    dispatcher = get_dispatcher()
    for evt in events:
        try:
            dispatcher.dispatch(evt)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Failed to process event: %s", exc)

    return {"statusCode": 200, "body": json.dumps({"status": "ok"})}


def _extract_body(event) -> bytes:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body.encode("utf-8")
