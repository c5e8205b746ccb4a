from __future__ import annotations

from typing import Dict, List

from ..domain import models

CANVAS_WIDTH = 1040
MAX_CANVAS_HEIGHT = 2080


class RichMessageBuilder:
    """1 枚画像・1 シーン構成のリッチメッセージを組み立てる。"""

    def __init__(self, height: int, image_name: str = "image1", scene_name: str = "scene1") -> None:
        if not 0 < height <= MAX_CANVAS_HEIGHT:
            raise ValueError(f"height must be between 1 and {MAX_CANVAS_HEIGHT}: {height}")
        self._height = height
        self._image_name = image_name
        self._scene_name = scene_name
        self._actions: Dict[str, models.RichMessageAction] = {}
        self._listeners: List[models.RichMessageListener] = []

    def add_web_action(
        self, name: str, text: str, link_uri: str, x: int, y: int, w: int, h: int
    ) -> "RichMessageBuilder":
        action = models.RichMessageAction(type="web", text=text, params={"linkUri": link_uri})
        return self._add_action(name, action, x, y, w, h)

    def add_send_message_action(
        self, name: str, text: str, message: str, x: int, y: int, w: int, h: int
    ) -> "RichMessageBuilder":
        action = models.RichMessageAction(type="sendMessage", text=text, params={"text": message})
        return self._add_action(name, action, x, y, w, h)

    def build(self) -> models.RichMessage:
        area = (0, 0, CANVAS_WIDTH, self._height)
        return models.RichMessage(
            canvas=models.RichMessageCanvas(
                width=CANVAS_WIDTH,
                height=self._height,
                initial_scene=self._scene_name,
            ),
            images={self._image_name: models.RichMessageImage(*area)},
            actions=dict(self._actions),
            scenes={
                self._scene_name: models.RichMessageScene(
                    draws=[models.RichMessageDraw(self._image_name, *area)],
                    listeners=list(self._listeners),
                )
            },
        )

    def _add_action(
        self, name: str, action: models.RichMessageAction, x: int, y: int, w: int, h: int
    ) -> "RichMessageBuilder":
        if name in self._actions:
            raise ValueError(f"Duplicate action name: {name}")
        if x < 0 or y < 0 or w <= 0 or h <= 0 or x + w > CANVAS_WIDTH or y + h > self._height:
            raise ValueError(f"Action area out of canvas: {(x, y, w, h)}")
        self._actions[name] = action
        self._listeners.append(models.RichMessageListener(action=name, x=x, y=y, w=w, h=h))
        return self
