from __future__ import annotations

import logging

from ...domain import models

logger = logging.getLogger(__name__)

OPERATION_NAMES = {
    models.OP_TYPE_ADDED_AS_FRIEND: "added_as_friend",
    models.OP_TYPE_BLOCKED: "blocked",
}


class OperationHandler:
    def handle(self, event: models.OperationEvent) -> None:
        operation = event.content
        if operation is None:
            return
        name = OPERATION_NAMES.get(operation.op_type, "unknown")
        params = [param for param in operation.params if param]
        logger.info(
            "Received operation: %s",
            name,
            extra={"op_type": operation.op_type, "revision": operation.revision, "mid": params[0] if params else None},
        )
