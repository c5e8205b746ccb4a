from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_API_END_POINT = "https://trialbot-api.line.me"
DEFAULT_SENDING_MESSAGE_CHANNEL_ID = 1383378250
DEFAULT_SENDING_MESSAGE_EVENT_ID = "138311608800106203"
DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID = "140177271400161403"
DEFAULT_TIMEOUT_MS = 3000
MAX_RECIPIENTS = 150


@dataclass(frozen=True)
class ClientConfig:
    """DefaultLineBotClient の生成時に固定される接続設定。"""

    channel_id: str
    channel_secret: str
    channel_mid: str
    api_end_point: str = DEFAULT_API_END_POINT
    connect_timeout_ms: int = DEFAULT_TIMEOUT_MS
    read_timeout_ms: int = DEFAULT_TIMEOUT_MS
    sending_message_channel_id: int = DEFAULT_SENDING_MESSAGE_CHANNEL_ID
    sending_message_event_id: str = DEFAULT_SENDING_MESSAGE_EVENT_ID
    sending_multiple_messages_event_id: str = DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID


@dataclass(frozen=True)
class Settings:
    line_channel_id: str
    line_channel_secret: str
    line_channel_mid: str
    line_api_end_point: str = DEFAULT_API_END_POINT
    line_connect_timeout_ms: int = DEFAULT_TIMEOUT_MS
    line_read_timeout_ms: int = DEFAULT_TIMEOUT_MS
    sending_message_channel_id: int = DEFAULT_SENDING_MESSAGE_CHANNEL_ID
    sending_message_event_id: str = DEFAULT_SENDING_MESSAGE_EVENT_ID
    sending_multiple_messages_event_id: str = DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID
    log_level: str = "INFO"

    def client_config(self) -> ClientConfig:
        return ClientConfig(
            channel_id=self.line_channel_id,
            channel_secret=self.line_channel_secret,
            channel_mid=self.line_channel_mid,
            api_end_point=self.line_api_end_point,
            connect_timeout_ms=self.line_connect_timeout_ms,
            read_timeout_ms=self.line_read_timeout_ms,
            sending_message_channel_id=self.sending_message_channel_id,
            sending_message_event_id=self.sending_message_event_id,
            sending_multiple_messages_event_id=self.sending_multiple_messages_event_id,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """環境変数から設定を読み込む。"""

    env = os.environ
    required = {
        "LINE_CHANNEL_ID": env.get("LINE_CHANNEL_ID"),
        "LINE_CHANNEL_SECRET": env.get("LINE_CHANNEL_SECRET"),
        "LINE_CHANNEL_MID": env.get("LINE_CHANNEL_MID"),
    }

    missing = [key for key, value in required.items() if not value]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        line_channel_id=required["LINE_CHANNEL_ID"],
        line_channel_secret=required["LINE_CHANNEL_SECRET"],
        line_channel_mid=required["LINE_CHANNEL_MID"],
        line_api_end_point=env.get("LINE_API_END_POINT", DEFAULT_API_END_POINT).rstrip("/"),
        line_connect_timeout_ms=int(env.get("LINE_CONNECT_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
        line_read_timeout_ms=int(env.get("LINE_READ_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
        sending_message_channel_id=int(
            env.get("LINE_SENDING_MESSAGE_CHANNEL_ID", str(DEFAULT_SENDING_MESSAGE_CHANNEL_ID))
        ),
        sending_message_event_id=env.get("LINE_SENDING_MESSAGE_EVENT_ID", DEFAULT_SENDING_MESSAGE_EVENT_ID),
        sending_multiple_messages_event_id=env.get(
            "LINE_SENDING_MULTIPLE_MESSAGES_EVENT_ID", DEFAULT_SENDING_MULTIPLE_MESSAGES_EVENT_ID
        ),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )
