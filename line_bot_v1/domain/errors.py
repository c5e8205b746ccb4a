from __future__ import annotations

from typing import Any, Optional


class LineBotApiError(RuntimeError):
    """LINE BOT API クライアントが送出する例外の基底クラス。"""


class TooManyRecipientsError(LineBotApiError):
    def __init__(self, request: Any, limit: int = 150) -> None:
        super().__init__(f"Too many recipients: {len(request.to)} > {limit}")
        self.request = request
        self.limit = limit


class JsonProcessingError(LineBotApiError):
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class TransportIOError(LineBotApiError):
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ServerStatusError(LineBotApiError):
    def __init__(self, status_code: int, reason: str, body: str) -> None:
        super().__init__(f"LINE BOT API returned status {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


class SignatureError(LineBotApiError):
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
