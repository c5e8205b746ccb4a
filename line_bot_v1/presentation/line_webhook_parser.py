from __future__ import annotations

from typing import List, Optional, Union

from ..domain import models
from ..domain.errors import SignatureError
from ..infra import codec
from ..infra.signature import validate_signature

SIGNATURE_HEADER = "X-LINE-ChannelSignature"


class SignatureVerificationError(RuntimeError):
    pass


def verify_signature(channel_secret: str, body: Union[bytes, str], signature: Optional[str]) -> None:
    if not signature:
        raise SignatureVerificationError(f"Missing {SIGNATURE_HEADER} header")

    try:
        valid = validate_signature(channel_secret, body, signature)
    except SignatureError as exc:
        raise SignatureVerificationError(str(exc)) from exc
    if not valid:
        raise SignatureVerificationError("Invalid signature")


def parse_events(body: Union[bytes, str]) -> List[models.BaseEvent]:
    """署名検証済みのコールバック本文からイベント一覧を取り出す。"""
    callback = codec.decode_callback_request(codec.load_json(body))
    return callback.result


def find_signature(headers: dict) -> Optional[str]:
    # API Gateway はヘッダ名の大文字小文字を保持しないことがある
    expected = SIGNATURE_HEADER.lower()
    for key, value in (headers or {}).items():
        if key.lower() == expected:
            return value
    return None
