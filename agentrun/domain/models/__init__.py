from .message import Message, MessageType, ExtKey
from .model_message import (
    ModelMessage, RoleType, ChatMessagePart, ChatMessagePartType,
    MediaURL, ToolCall, FunctionCall, to_langchain_messages
)
from .resume_info import ResumeInfo

__all__ = [
    "Message", "MessageType", "ExtKey",
    "ModelMessage", "RoleType", "ChatMessagePart", "ChatMessagePartType",
    "MediaURL", "ToolCall", "FunctionCall", "to_langchain_messages",
    "ResumeInfo",
]
