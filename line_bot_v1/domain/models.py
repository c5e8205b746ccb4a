from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union


# === Content ===
class ContentType(int, Enum):
    TEXT = 1
    IMAGE = 2
    VIDEO = 3
    AUDIO = 4
    LOCATION = 7
    STICKER = 8
    CONTACT = 10
    RICH_MESSAGE = 12


class RecipientType(Enum):
    USER = 1


@dataclass(frozen=True)
class BaseContent:
    content_type: ClassVar[ContentType]

    to_type: RecipientType = RecipientType.USER
    id: Optional[str] = None
    from_: Optional[str] = None
    created_time: Optional[int] = None


@dataclass(frozen=True)
class TextContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.TEXT

    text: str = ""


@dataclass(frozen=True)
class ImageContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.IMAGE

    original_content_url: Optional[str] = None
    preview_image_url: Optional[str] = None


@dataclass(frozen=True)
class VideoContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.VIDEO

    original_content_url: Optional[str] = None
    preview_image_url: Optional[str] = None


@dataclass(frozen=True)
class AudioContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.AUDIO

    original_content_url: Optional[str] = None
    audlen: Optional[str] = None  # 再生時間（ミリ秒の文字列）


@dataclass(frozen=True)
class LocationContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.LOCATION

    text: str = ""
    title: Optional[str] = None
    address: Optional[str] = None
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class StickerContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.STICKER

    stkpkgid: str = ""
    stkid: str = ""
    stkver: Optional[str] = None
    stktxt: Optional[str] = None


@dataclass(frozen=True)
class ContactContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.CONTACT

    mid: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class RichMessageContent(BaseContent):
    content_type: ClassVar[ContentType] = ContentType.RICH_MESSAGE

    download_url: str = ""
    alt_text: str = ""
    markup_json: str = ""
    spec_rev: str = "1"


Content = Union[
    TextContent,
    ImageContent,
    VideoContent,
    AudioContent,
    LocationContent,
    StickerContent,
    ContactContent,
    RichMessageContent,
]


@dataclass(frozen=True)
class OperationContent:
    revision: int = 0
    op_type: int = 0
    params: List[Optional[str]] = field(default_factory=list)


# === Rich message markup ===
@dataclass(frozen=True)
class RichMessageCanvas:
    width: int
    height: int
    initial_scene: str = "scene1"


@dataclass(frozen=True)
class RichMessageImage:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class RichMessageAction:
    type: str  # web | sendMessage
    text: str
    params: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RichMessageDraw:
    image: str
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class RichMessageListener:
    action: str
    x: int
    y: int
    w: int
    h: int
    type: str = "touch"


@dataclass(frozen=True)
class RichMessageScene:
    draws: List[RichMessageDraw] = field(default_factory=list)
    listeners: List[RichMessageListener] = field(default_factory=list)


@dataclass(frozen=True)
class RichMessage:
    canvas: RichMessageCanvas
    images: Dict[str, RichMessageImage] = field(default_factory=dict)
    actions: Dict[str, RichMessageAction] = field(default_factory=dict)
    scenes: Dict[str, RichMessageScene] = field(default_factory=dict)


# === Outbound events ===
@dataclass(frozen=True)
class SendingMessagesRequest:
    to: List[str]
    to_channel: int
    event_type: str
    content: Content


@dataclass(frozen=True)
class MultipleMessagesContent:
    messages: List[Content]
    message_notified: int = 0


@dataclass(frozen=True)
class SendingMultipleMessagesRequest:
    to: List[str]
    to_channel: int
    event_type: str
    content: MultipleMessagesContent


EventRequest = Union[SendingMessagesRequest, SendingMultipleMessagesRequest]


@dataclass(frozen=True)
class EventResponse:
    failed: List[str] = field(default_factory=list)
    message_id: Optional[str] = None
    timestamp: Optional[int] = None
    version: Optional[int] = None


# === Profiles ===
@dataclass(frozen=True)
class UserProfileContact:
    mid: str
    display_name: Optional[str] = None
    picture_url: Optional[str] = None
    status_message: Optional[str] = None


@dataclass(frozen=True)
class UserProfileResponse:
    contacts: List[UserProfileContact] = field(default_factory=list)
    count: int = 0
    total: int = 0
    start: int = 0
    display: int = 0


# === Webhook (callback) events ===
MESSAGE_EVENT_TYPE = "138311609000106303"
OPERATION_EVENT_TYPE = "138311609100106403"

OP_TYPE_ADDED_AS_FRIEND = 4
OP_TYPE_BLOCKED = 8


@dataclass(frozen=True)
class BaseEvent:
    event_type: str
    id: Optional[str] = None
    from_: Optional[str] = None
    from_channel: Optional[int] = None
    to: List[str] = field(default_factory=list)
    to_channel: Optional[int] = None


@dataclass(frozen=True)
class MessageEvent(BaseEvent):
    content: Optional[Content] = None


@dataclass(frozen=True)
class OperationEvent(BaseEvent):
    content: Optional[OperationContent] = None


Event = Union[MessageEvent, OperationEvent, BaseEvent]


@dataclass(frozen=True)
class CallbackRequest:
    result: List[BaseEvent]
