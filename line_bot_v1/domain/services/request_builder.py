from __future__ import annotations

from typing import Iterable, List, Sequence, Union

from .. import models
from ...infra.codec import rich_message_to_json

Recipients = Union[str, Iterable[str]]


class RequestBuilder:
    """v1 events API 向けの送信リクエストを組み立てる。

    宛先数の上限チェックは送信直前（``send_event``）で一括して行うため、
    ここでは行わない。
    """

    def __init__(
        self,
        sending_message_channel_id: int,
        sending_message_event_id: str,
        sending_multiple_messages_event_id: str,
    ) -> None:
        self._to_channel = sending_message_channel_id
        self._event_id = sending_message_event_id
        self._multiple_event_id = sending_multiple_messages_event_id

    def build_text(self, to: Recipients, text: str) -> models.SendingMessagesRequest:
        _require(text=text)
        return self._single(to, models.TextContent(text=text))

    def build_image(
        self, to: Recipients, original_content_url: str, preview_image_url: str
    ) -> models.SendingMessagesRequest:
        _require(original_content_url=original_content_url, preview_image_url=preview_image_url)
        return self._single(
            to,
            models.ImageContent(
                original_content_url=original_content_url,
                preview_image_url=preview_image_url,
            ),
        )

    def build_video(
        self, to: Recipients, original_content_url: str, preview_image_url: str
    ) -> models.SendingMessagesRequest:
        _require(original_content_url=original_content_url, preview_image_url=preview_image_url)
        return self._single(
            to,
            models.VideoContent(
                original_content_url=original_content_url,
                preview_image_url=preview_image_url,
            ),
        )

    def build_audio(self, to: Recipients, original_content_url: str, audlen: str) -> models.SendingMessagesRequest:
        _require(original_content_url=original_content_url, audlen=audlen)
        return self._single(
            to,
            models.AudioContent(original_content_url=original_content_url, audlen=str(audlen)),
        )

    def build_sticker(
        self,
        to: Recipients,
        stkpkgid: str,
        stkid: str,
        stkver: str | None = None,
        stktxt: str = "[]",
    ) -> models.SendingMessagesRequest:
        _require(stkpkgid=stkpkgid, stkid=stkid)
        return self._single(
            to,
            models.StickerContent(stkpkgid=str(stkpkgid), stkid=str(stkid), stkver=stkver, stktxt=stktxt),
        )

    def build_location(
        self,
        to: Recipients,
        text: str,
        title: str | None,
        address: str | None,
        latitude: float,
        longitude: float,
    ) -> models.SendingMessagesRequest:
        _require(text=text, latitude=latitude, longitude=longitude)
        return self._single(
            to,
            models.LocationContent(
                text=text,
                title=title,
                address=address,
                latitude=float(latitude),
                longitude=float(longitude),
            ),
        )

    def build_rich_message(
        self,
        to: Recipients,
        download_url: str,
        alt_text: str,
        rich_message: models.RichMessage,
    ) -> models.SendingMessagesRequest:
        _require(download_url=download_url, alt_text=alt_text, rich_message=rich_message)
        # MARKUP_JSON は JSON 文字列として埋め込む（二重エンコード）
        markup_json = rich_message_to_json(rich_message)
        return self._single(
            to,
            models.RichMessageContent(download_url=download_url, alt_text=alt_text, markup_json=markup_json),
        )

    def build_multiple(
        self,
        to: Recipients,
        contents: Sequence[models.Content],
        message_notified: int = 0,
    ) -> models.SendingMultipleMessagesRequest:
        _require(contents=contents)
        if not contents:
            raise ValueError("contents must not be empty")
        if not 0 <= message_notified < len(contents):
            raise ValueError(f"message_notified out of range: {message_notified}")
        return models.SendingMultipleMessagesRequest(
            to=normalize_recipients(to),
            to_channel=self._to_channel,
            event_type=self._multiple_event_id,
            content=models.MultipleMessagesContent(messages=list(contents), message_notified=message_notified),
        )

    def _single(self, to: Recipients, content: models.Content) -> models.SendingMessagesRequest:
        return models.SendingMessagesRequest(
            to=normalize_recipients(to),
            to_channel=self._to_channel,
            event_type=self._event_id,
            content=content,
        )


def normalize_recipients(to: Recipients) -> List[str]:
    if to is None:
        raise ValueError("to is required")
    if isinstance(to, str):
        recipients = [to]
    else:
        recipients = list(to)
    if not recipients:
        raise ValueError("at least one recipient is required")
    if any(mid is None for mid in recipients):
        raise ValueError("recipient ids must not be None")
    return recipients


def _require(**values) -> None:
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise ValueError(f"Missing required arguments: {', '.join(missing)}")
