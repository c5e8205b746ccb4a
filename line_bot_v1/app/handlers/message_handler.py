from __future__ import annotations

import logging

from ...domain import models
from ...domain.ports import LineBotPort

logger = logging.getLogger(__name__)


class EchoMessageHandler:
    """受信したテキストをそのまま送信者へ送り返す。"""

    def __init__(self, line_client: LineBotPort) -> None:
        self._line = line_client

    def handle(self, event: models.MessageEvent) -> None:
        content = event.content
        if not isinstance(content, models.TextContent):
            logger.debug(
                "Skipping non-text content",
                extra={"event_id": event.id, "content_type": getattr(content, "content_type", None)},
            )
            return

        sender = content.from_ or event.from_
        if not sender:
            logger.warning("Text message without sender", extra={"event_id": event.id})
            return
        self._line.send_text(sender, content.text)
