from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..domain import models

logger = logging.getLogger(__name__)


class MessageEventHandler(Protocol):
    def handle(self, event: models.MessageEvent) -> None: ...


class OperationEventHandler(Protocol):
    def handle(self, event: models.OperationEvent) -> None: ...


class Dispatcher:
    """コールバックイベントを種別（メッセージ受信 / 操作）ごとのハンドラへ振り分ける。"""

    def __init__(
        self,
        message_handler: MessageEventHandler,
        operation_handler: Optional[OperationEventHandler] = None,
    ) -> None:
        self._message_handler = message_handler
        self._operation_handler = operation_handler

    def dispatch(self, event: models.BaseEvent) -> None:
        if isinstance(event, models.MessageEvent):
            self._message_handler.handle(event)
        elif isinstance(event, models.OperationEvent):
            if self._operation_handler is None:
                logger.debug("Operation event ignored", extra={"event_id": event.id})
                return
            self._operation_handler.handle(event)
        else:
            logger.debug(
                "No handler for callback event",
                extra={"event_id": event.id, "event_type": event.event_type},
            )
