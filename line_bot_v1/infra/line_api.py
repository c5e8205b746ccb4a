from __future__ import annotations

import logging
from contextlib import closing
from typing import Any, Callable, Dict, Optional, Sequence, Union

import requests
from requests.adapters import HTTPAdapter

from .. import __version__
from ..config import MAX_RECIPIENTS, ClientConfig
from ..domain import models
from ..domain.errors import ServerStatusError, TooManyRecipientsError, TransportIOError
from ..domain.ports import LineBotPort
from ..domain.services.request_builder import Recipients, RequestBuilder, normalize_recipients
from . import codec, signature
from .message_content import MessageContent

logger = logging.getLogger(__name__)

USER_AGENT = f"line-botsdk-python/{__version__}"

X_LINE_CHANNEL_ID = "X-Line-ChannelID"
X_LINE_CHANNEL_SECRET = "X-Line-ChannelSecret"
X_LINE_TRUSTED_USER_WITH_ACL = "X-Line-Trusted-User-With-ACL"

SessionFactory = Callable[[], requests.Session]


def build_default_session() -> requests.Session:
    """自動リトライを無効化したセッションを生成する。"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers["User-Agent"] = USER_AGENT
    return session


class DefaultLineBotClient(LineBotPort):
    """LINE BOT API (v1 events) クライアント。

    リクエストごとにセッションを生成して閉じる。接続の使い回しはしない。
    """

    def __init__(self, config: ClientConfig, session_factory: Optional[SessionFactory] = None) -> None:
        self._config = config
        self._end_point = config.api_end_point.rstrip("/")
        self._timeout = (config.connect_timeout_ms / 1000, config.read_timeout_ms / 1000)
        self._session_factory = session_factory or build_default_session
        self._builder = RequestBuilder(
            config.sending_message_channel_id,
            config.sending_message_event_id,
            config.sending_multiple_messages_event_id,
        )

    @property
    def request_builder(self) -> RequestBuilder:
        return self._builder

    # === Events ===
    def send_event(self, request: models.EventRequest) -> models.EventResponse:
        if not request.to:
            raise ValueError("at least one recipient is required")
        if len(request.to) > MAX_RECIPIENTS:
            raise TooManyRecipientsError(request, MAX_RECIPIENTS)

        url = f"{self._end_point}/v1/events"
        body = codec.encode_request(request)
        logger.debug(
            "Sending event",
            extra={"url": url, "event_type": request.event_type, "recipients": len(request.to)},
        )
        headers = {"Content-Type": "application/json; charset=utf-8"}
        with closing(self._session_factory()) as session:
            response = self._execute(session, "POST", url, data=body, headers=headers)
            with closing(response):
                self._validate_status(response)
                return codec.decode_event_response(self._read_json(response))

    def send_text(self, to: Recipients, text: str) -> models.EventResponse:
        return self.send_event(self._builder.build_text(to, text))

    def send_image(self, to: Recipients, original_content_url: str, preview_image_url: str) -> models.EventResponse:
        return self.send_event(self._builder.build_image(to, original_content_url, preview_image_url))

    def send_video(self, to: Recipients, original_content_url: str, preview_image_url: str) -> models.EventResponse:
        return self.send_event(self._builder.build_video(to, original_content_url, preview_image_url))

    def send_audio(self, to: Recipients, original_content_url: str, audlen: str) -> models.EventResponse:
        return self.send_event(self._builder.build_audio(to, original_content_url, audlen))

    def send_sticker(
        self, to: Recipients, stkpkgid: str, stkid: str, stkver: Optional[str] = None
    ) -> models.EventResponse:
        return self.send_event(self._builder.build_sticker(to, stkpkgid, stkid, stkver))

    def send_location(
        self,
        to: Recipients,
        text: str,
        title: Optional[str],
        address: Optional[str],
        latitude: float,
        longitude: float,
    ) -> models.EventResponse:
        return self.send_event(self._builder.build_location(to, text, title, address, latitude, longitude))

    def send_rich_message(
        self,
        to: Recipients,
        download_url: str,
        alt_text: str,
        rich_message: models.RichMessage,
    ) -> models.EventResponse:
        return self.send_event(self._builder.build_rich_message(to, download_url, alt_text, rich_message))

    def send_multiple_messages(
        self,
        to: Recipients,
        contents: Sequence[models.Content],
        message_notified: int = 0,
    ) -> models.EventResponse:
        return self.send_event(self._builder.build_multiple(to, contents, message_notified))

    def create_multiple_message_builder(self):
        from ..presentation.multiple_message_builder import MultipleMessageBuilder

        return MultipleMessageBuilder(self)

    # === Profiles ===
    def get_user_profile(self, mids: Recipients) -> models.UserProfileResponse:
        joined = ",".join(normalize_recipients(mids))
        url = f"{self._end_point}/v1/profiles?mids={joined}"
        with closing(self._session_factory()) as session:
            response = self._execute(session, "GET", url)
            with closing(response):
                self._validate_status(response)
                return codec.decode_user_profile(self._read_json(response))

    # === Message content ===
    def get_message_content(self, message_id: str) -> MessageContent:
        return self._get_message_content(f"{self._end_point}/v1/bot/message/{message_id}/content")

    def get_preview_message_content(self, message_id: str) -> MessageContent:
        return self._get_message_content(f"{self._end_point}/v1/bot/message/{message_id}/content/preview")

    def _get_message_content(self, url: str) -> MessageContent:
        # 成功時のみハンドルに所有権を渡す。失敗時はここで必ず閉じる
        session = self._session_factory()
        try:
            response = self._execute(session, "GET", url, stream=True)
            try:
                self._validate_status(response)
            except Exception:
                response.close()
                raise
        except Exception:
            session.close()
            raise
        return MessageContent(session, response)

    # === Callback / signature ===
    def read_callback_request(self, body: Union[bytes, str]) -> models.CallbackRequest:
        return codec.decode_callback_request(codec.load_json(body))

    def create_signature(self, body: bytes) -> bytes:
        return signature.create_signature(self._config.channel_secret, body)

    def validate_signature(self, body: Union[bytes, str], header_signature: str) -> bool:
        return signature.validate_signature(self._config.channel_secret, body, header_signature)

    # === HTTP ===
    def _execute(
        self,
        session: requests.Session,
        method: str,
        url: str,
        *,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        stream: bool = False,
    ) -> requests.Response:
        merged = {**self._identity_headers(), **(headers or {})}
        try:
            return session.request(
                method,
                url,
                data=data,
                headers=merged,
                timeout=self._timeout,
                allow_redirects=False,
                stream=stream,
            )
        except requests.RequestException as exc:
            logger.warning("LINE BOT API request failed", extra={"method": method, "url": url, "error": str(exc)})
            raise TransportIOError(f"{method} {url} failed: {exc}", exc) from exc

    def _identity_headers(self) -> Dict[str, str]:
        return {
            X_LINE_CHANNEL_ID: self._config.channel_id,
            X_LINE_CHANNEL_SECRET: self._config.channel_secret,
            X_LINE_TRUSTED_USER_WITH_ACL: self._config.channel_mid,
        }

    def _validate_status(self, response: requests.Response) -> None:
        if response.status_code == 200:
            return
        body = self._read_body(response).decode("utf-8", errors="replace")
        logger.error(
            "LINE BOT API returned error status: status=%s body=%s",
            response.status_code,
            body[:500],
        )
        raise ServerStatusError(response.status_code, response.reason or "", body)

    @staticmethod
    def _read_body(response: requests.Response) -> bytes:
        try:
            return response.content
        except requests.RequestException as exc:
            raise TransportIOError("Failed to read response body", exc) from exc

    def _read_json(self, response: requests.Response) -> Any:
        return codec.load_json(self._read_body(response))
