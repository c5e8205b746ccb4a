from .multiple_message_builder import MultipleMessageBuilder
from .rich_message_builder import RichMessageBuilder

__all__ = [
    "MultipleMessageBuilder",
    "RichMessageBuilder",
]
