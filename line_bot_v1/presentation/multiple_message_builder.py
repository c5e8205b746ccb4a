from __future__ import annotations

from typing import List, Optional

from ..domain import models
from ..domain.ports import LineBotPort
from ..domain.services.request_builder import Recipients


class MultipleMessageBuilder:
    """複数メッセージを 1 回のイベントでまとめて送るためのビルダー。"""

    def __init__(self, client: LineBotPort) -> None:
        self._client = client
        self._contents: List[models.Content] = []
        self._message_notified = 0

    def add_text(self, text: str) -> "MultipleMessageBuilder":
        return self._add(models.TextContent(text=text))

    def add_image(self, original_content_url: str, preview_image_url: str) -> "MultipleMessageBuilder":
        return self._add(
            models.ImageContent(original_content_url=original_content_url, preview_image_url=preview_image_url)
        )

    def add_video(self, original_content_url: str, preview_image_url: str) -> "MultipleMessageBuilder":
        return self._add(
            models.VideoContent(original_content_url=original_content_url, preview_image_url=preview_image_url)
        )

    def add_audio(self, original_content_url: str, audlen: str) -> "MultipleMessageBuilder":
        return self._add(models.AudioContent(original_content_url=original_content_url, audlen=str(audlen)))

    def add_location(
        self,
        text: str,
        title: Optional[str],
        address: Optional[str],
        latitude: float,
        longitude: float,
    ) -> "MultipleMessageBuilder":
        return self._add(
            models.LocationContent(
                text=text,
                title=title,
                address=address,
                latitude=float(latitude),
                longitude=float(longitude),
            )
        )

    def add_sticker(self, stkpkgid: str, stkid: str, stkver: Optional[str] = None) -> "MultipleMessageBuilder":
        return self._add(
            models.StickerContent(stkpkgid=str(stkpkgid), stkid=str(stkid), stkver=stkver, stktxt="[]")
        )

    def set_message_notified(self, index: int) -> "MultipleMessageBuilder":
        self._message_notified = index
        return self

    def build(self) -> List[models.Content]:
        return list(self._contents)

    def send(self, to: Recipients) -> models.EventResponse:
        return self._client.send_multiple_messages(to, self.build(), self._message_notified)

    def _add(self, content: models.Content) -> "MultipleMessageBuilder":
        self._contents.append(content)
        return self
