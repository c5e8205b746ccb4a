from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

from ..domain import models
from ..domain.errors import JsonProcessingError

logger = logging.getLogger(__name__)


# === Encoding ===
def encode_request(request: models.EventRequest) -> bytes:
    try:
        payload = request_to_dict(request)
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise JsonProcessingError("Failed to encode event request", exc) from exc


def request_to_dict(request: models.EventRequest) -> Dict[str, Any]:
    if isinstance(request, models.SendingMessagesRequest):
        content = content_to_dict(request.content)
    elif isinstance(request, models.SendingMultipleMessagesRequest):
        content = {
            "messageNotified": request.content.message_notified,
            "messages": [content_to_dict(message) for message in request.content.messages],
        }
    else:
        raise TypeError(f"Unsupported event request: {type(request).__name__}")
    return {
        "to": list(request.to),
        "toChannel": request.to_channel,
        "eventType": request.event_type,
        "content": content,
    }


def content_to_dict(content: models.Content) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "contentType": int(content.content_type),
        "toType": content.to_type.name,
    }
    if isinstance(content, models.TextContent):
        payload["text"] = content.text
    elif isinstance(content, (models.ImageContent, models.VideoContent)):
        payload["originalContentUrl"] = content.original_content_url
        payload["previewImageUrl"] = content.preview_image_url
    elif isinstance(content, models.AudioContent):
        payload["originalContentUrl"] = content.original_content_url
        payload["contentMetadata"] = {"AUDLEN": content.audlen}
    elif isinstance(content, models.LocationContent):
        payload["text"] = content.text
        payload["location"] = {
            "title": content.title,
            "address": content.address,
            "latitude": content.latitude,
            "longitude": content.longitude,
        }
    elif isinstance(content, models.StickerContent):
        payload["contentMetadata"] = {
            "STKPKGID": content.stkpkgid,
            "STKID": content.stkid,
            "STKVER": content.stkver,
            "STKTXT": content.stktxt,
        }
    elif isinstance(content, models.RichMessageContent):
        payload["contentMetadata"] = {
            "DOWNLOAD_URL": content.download_url,
            "SPEC_REV": content.spec_rev,
            "ALT_TEXT": content.alt_text,
            "MARKUP_JSON": content.markup_json,
        }
    elif isinstance(content, models.ContactContent):
        payload["contentMetadata"] = {"mid": content.mid, "displayName": content.display_name}
    else:
        raise TypeError(f"Unsupported content: {type(content).__name__}")
    return _drop_none(payload)


def rich_message_to_json(rich_message: models.RichMessage) -> str:
    """リッチメッセージを MARKUP_JSON 用の JSON 文字列に変換する。"""
    payload = {
        "canvas": {
            "width": rich_message.canvas.width,
            "height": rich_message.canvas.height,
            "initialScene": rich_message.canvas.initial_scene,
        },
        "images": {
            name: {"x": image.x, "y": image.y, "w": image.w, "h": image.h}
            for name, image in rich_message.images.items()
        },
        "actions": {
            name: {"type": action.type, "text": action.text, "params": dict(action.params)}
            for name, action in rich_message.actions.items()
        },
        "scenes": {
            name: {
                "draws": [
                    {"image": draw.image, "x": draw.x, "y": draw.y, "w": draw.w, "h": draw.h}
                    for draw in scene.draws
                ],
                "listeners": [
                    {
                        "type": listener.type,
                        "params": [listener.x, listener.y, listener.w, listener.h],
                        "action": listener.action,
                    }
                    for listener in scene.listeners
                ],
            }
            for name, scene in rich_message.scenes.items()
        },
    }
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise JsonProcessingError("Failed to encode rich message", exc) from exc


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, dict):
            value = _drop_none(value)
        cleaned[key] = value
    return cleaned


# === Decoding ===
def load_json(body: Union[bytes, str]) -> Any:
    try:
        return json.loads(body)
    except (TypeError, ValueError) as exc:
        raise JsonProcessingError("Invalid JSON body", exc) from exc


def decode_event_response(data: Any) -> models.EventResponse:
    if not isinstance(data, dict):
        raise JsonProcessingError("Event response is not a JSON object")
    try:
        return models.EventResponse(
            failed=list(data.get("failed") or []),
            message_id=data.get("messageId"),
            timestamp=data.get("timestamp"),
            version=data.get("version"),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise JsonProcessingError("Malformed event response", exc) from exc


def decode_user_profile(data: Any) -> models.UserProfileResponse:
    if not isinstance(data, dict):
        raise JsonProcessingError("Profile response is not a JSON object")
    try:
        contacts = [
            models.UserProfileContact(
                mid=contact.get("mid", ""),
                display_name=contact.get("displayName"),
                picture_url=contact.get("pictureUrl"),
                status_message=contact.get("statusMessage"),
            )
            for contact in data.get("contacts") or []
        ]
        return models.UserProfileResponse(
            contacts=contacts,
            count=data.get("count", 0),
            total=data.get("total", 0),
            start=data.get("start", 0),
            display=data.get("display", 0),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise JsonProcessingError("Malformed profile response", exc) from exc


def decode_callback_request(data: Any) -> models.CallbackRequest:
    if not isinstance(data, dict) or data.get("result") is None:
        raise JsonProcessingError("Invalid callback request was given")
    result = data["result"]
    if not isinstance(result, list):
        raise JsonProcessingError("Callback result is not a list")
    try:
        events = [decode_event(event) for event in result]
    except (AttributeError, TypeError, ValueError) as exc:
        # 入れ子の値の型が想定と異なるペイロード
        raise JsonProcessingError("Malformed callback event", exc) from exc
    return models.CallbackRequest(result=events)


def decode_event(data: Any) -> models.BaseEvent:
    if not isinstance(data, dict):
        raise JsonProcessingError("Callback event is not a JSON object")
    common = {
        "event_type": data.get("eventType", ""),
        "id": data.get("id"),
        "from_": data.get("from"),
        "from_channel": data.get("fromChannel"),
        "to": list(data.get("to") or []),
        "to_channel": data.get("toChannel"),
    }
    raw_content = data.get("content")
    event_type = common["event_type"]
    if event_type == models.MESSAGE_EVENT_TYPE:
        content = decode_content(raw_content) if isinstance(raw_content, dict) else None
        return models.MessageEvent(content=content, **common)
    if event_type == models.OPERATION_EVENT_TYPE:
        operation = None
        if isinstance(raw_content, dict):
            operation = models.OperationContent(
                revision=raw_content.get("revision", 0),
                op_type=raw_content.get("opType", 0),
                params=list(raw_content.get("params") or []),
            )
        return models.OperationEvent(content=operation, **common)
    logger.debug("Unknown callback event type %s", event_type)
    return models.BaseEvent(**common)


def decode_content(data: Dict[str, Any]) -> Optional[models.Content]:
    try:
        content_type = models.ContentType(data.get("contentType"))
    except ValueError:
        logger.warning("Unsupported content type", extra={"content_type": data.get("contentType")})
        return None

    common = {
        "to_type": _decode_recipient_type(data.get("toType")),
        "id": data.get("id"),
        "from_": data.get("from"),
        "created_time": data.get("createdTime"),
    }
    metadata = data.get("contentMetadata") or {}

    if content_type is models.ContentType.TEXT:
        return models.TextContent(text=data.get("text") or "", **common)
    if content_type is models.ContentType.IMAGE:
        return models.ImageContent(
            original_content_url=data.get("originalContentUrl"),
            preview_image_url=data.get("previewImageUrl"),
            **common,
        )
    if content_type is models.ContentType.VIDEO:
        return models.VideoContent(
            original_content_url=data.get("originalContentUrl"),
            preview_image_url=data.get("previewImageUrl"),
            **common,
        )
    if content_type is models.ContentType.AUDIO:
        return models.AudioContent(
            original_content_url=data.get("originalContentUrl"),
            audlen=metadata.get("AUDLEN"),
            **common,
        )
    if content_type is models.ContentType.LOCATION:
        location = data.get("location") or {}
        return models.LocationContent(
            text=data.get("text") or "",
            title=location.get("title"),
            address=location.get("address"),
            latitude=float(location.get("latitude") or 0.0),
            longitude=float(location.get("longitude") or 0.0),
            **common,
        )
    if content_type is models.ContentType.STICKER:
        return models.StickerContent(
            stkpkgid=str(metadata.get("STKPKGID", "")),
            stkid=str(metadata.get("STKID", "")),
            stkver=metadata.get("STKVER"),
            stktxt=metadata.get("STKTXT"),
            **common,
        )
    if content_type is models.ContentType.CONTACT:
        return models.ContactContent(
            mid=metadata.get("mid", ""),
            display_name=metadata.get("displayName", ""),
            **common,
        )
    if content_type is models.ContentType.RICH_MESSAGE:
        return models.RichMessageContent(
            download_url=metadata.get("DOWNLOAD_URL", ""),
            alt_text=metadata.get("ALT_TEXT", ""),
            markup_json=metadata.get("MARKUP_JSON", ""),
            spec_rev=metadata.get("SPEC_REV", "1"),
            **common,
        )
    raise AssertionError(f"Unhandled content type {content_type!r}")


def _decode_recipient_type(value: Any) -> models.RecipientType:
    if isinstance(value, str) and value in models.RecipientType.__members__:
        return models.RecipientType[value]
    try:
        return models.RecipientType(value)
    except ValueError:
        return models.RecipientType.USER
