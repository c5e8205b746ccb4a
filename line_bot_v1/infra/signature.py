from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from typing import Union

from ..domain.errors import SignatureError


def create_signature(channel_secret: str, body: bytes) -> bytes:
    """チャネルシークレットをキーに HMAC-SHA256 署名を計算する。"""
    try:
        mac = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256)
    except (AttributeError, TypeError, ValueError) as exc:
        raise SignatureError("Failed to initialise HMAC-SHA256", exc) from exc
    return mac.digest()


def validate_signature(channel_secret: str, body: Union[bytes, str], header_signature: str) -> bool:
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        expected = base64.b64decode(header_signature, validate=True)
    except (binascii.Error, TypeError, ValueError) as exc:
        raise SignatureError("Signature header is not valid base64", exc) from exc

    return hmac.compare_digest(expected, create_signature(channel_secret, body))


def encode_signature(signature: bytes) -> str:
    return base64.b64encode(signature).decode("ascii")
