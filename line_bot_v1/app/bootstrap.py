from __future__ import annotations

import logging
from typing import Optional

from ..config import Settings, get_settings
from ..infra.line_api import DefaultLineBotClient
from .dispatcher import Dispatcher
from .handlers.message_handler import EchoMessageHandler
from .handlers.operation_handler import OperationHandler


def build_client(settings: Optional[Settings] = None) -> DefaultLineBotClient:
    settings = settings or get_settings()
    return DefaultLineBotClient(settings.client_config())


def build_dispatcher(line_client: Optional[DefaultLineBotClient] = None) -> Dispatcher:
    settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, force=True)

    line_client = line_client or build_client(settings)
    return Dispatcher(EchoMessageHandler(line_client), OperationHandler())
