from __future__ import annotations

from typing import Iterable, Sequence, Union

from .models import (
    CallbackRequest,
    Content,
    EventRequest,
    EventResponse,
    RichMessage,
    UserProfileResponse,
)


class LineBotPort:
    def send_event(self, request: EventRequest) -> EventResponse: ...

    def send_text(self, to: Union[str, Iterable[str]], text: str) -> EventResponse: ...

    def send_multiple_messages(
        self, to: Union[str, Iterable[str]], contents: Sequence[Content], message_notified: int = 0
    ) -> EventResponse: ...

    def send_rich_message(
        self, to: Union[str, Iterable[str]], download_url: str, alt_text: str, rich_message: RichMessage
    ) -> EventResponse: ...

    def get_user_profile(self, mids: Union[str, Iterable[str]]) -> UserProfileResponse: ...

    def read_callback_request(self, body: Union[bytes, str]) -> CallbackRequest: ...

    def validate_signature(self, body: Union[bytes, str], header_signature: str) -> bool: ...
