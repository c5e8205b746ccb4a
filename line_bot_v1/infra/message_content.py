from __future__ import annotations

from typing import Iterator, Optional

import requests

from ..domain.errors import TransportIOError


class MessageContent:
    """メッセージコンテンツ（バイナリ）のストリームを保持するハンドル。

    セッションとレスポンスの両方を所有するため、呼び出し側は必ず ``close()``
    するか ``with`` 文で使うこと。
    """

    def __init__(self, session: requests.Session, response: requests.Response) -> None:
        self._session = session
        self._response = response
        self._closed = False

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("Content-Type")

    @property
    def content_length(self) -> Optional[int]:
        value = self._response.headers.get("Content-Length")
        return int(value) if value is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    def iter_content(self, chunk_size: int = 8192) -> Iterator[bytes]:
        if self._closed:
            raise ValueError("I/O operation on closed message content")
        try:
            yield from self._response.iter_content(chunk_size=chunk_size)
        except requests.RequestException as exc:
            raise TransportIOError("Failed to read message content", exc) from exc

    def read(self) -> bytes:
        return b"".join(self.iter_content())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._response.close()
        finally:
            self._session.close()

    def __enter__(self) -> "MessageContent":
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()
