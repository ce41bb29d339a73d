from typing import Dict, Any, List, Optional, Union
import json

from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage


class RoleType(str, Enum):
    """Role of a model message"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class ChatMessagePartType(str, Enum):
    """Type of a multi-content part"""
    TEXT = "text"
    IMAGE_URL = "image_url"
    AUDIO_URL = "audio_url"
    VIDEO_URL = "video_url"
    FILE_URL = "file_url"


MEDIA_PART_TYPES = frozenset({
    ChatMessagePartType.IMAGE_URL,
    ChatMessagePartType.AUDIO_URL,
    ChatMessagePartType.VIDEO_URL,
    ChatMessagePartType.FILE_URL,
})


class MediaURL(BaseModel):
    """Media reference; url is filled in once the uri is resolved"""
    model_config = ConfigDict(extra="allow")

    url: Optional[str] = None
    uri: Optional[str] = None
    detail: Optional[str] = None
    mime_type: Optional[str] = None


class ChatMessagePart(BaseModel):
    """One typed entry of a multi-content message"""
    type: ChatMessagePartType
    text: Optional[str] = None
    image_url: Optional[MediaURL] = None
    audio_url: Optional[MediaURL] = None
    video_url: Optional[MediaURL] = None
    file_url: Optional[MediaURL] = None

    @property
    def media(self) -> Optional[MediaURL]:
        """Media entry matching the part type, None for text parts"""
        if self.type not in MEDIA_PART_TYPES:
            return None
        return getattr(self, self.type.value)

    def to_content_block(self) -> Optional[Dict[str, Any]]:
        if self.type == ChatMessagePartType.TEXT:
            return {"type": "text", "text": self.text or ""}
        media = self.media
        if media is None or not media.url:
            return None
        block: Dict[str, Any] = {"url": media.url}
        if media.detail:
            block["detail"] = media.detail
        return {"type": self.type.value, self.type.value: block}


class FunctionCall(BaseModel):
    name: str = ""
    arguments: str = ""


class ToolCall(BaseModel):
    """Tool-call descriptor emitted by the model"""
    index: Optional[int] = None
    id: str = ""
    type: str = "function"
    function: FunctionCall = Field(default_factory=FunctionCall)
    extra: Optional[Dict[str, Any]] = None


class ModelMessage(BaseModel):
    """Canonical model message, as stored in model_content"""
    model_config = ConfigDict(extra="allow")

    role: RoleType
    content: str = ""
    multi_content: Optional[List[ChatMessagePart]] = None
    name: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None
    tool_name: Optional[str] = None
    reasoning_content: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None

    @field_validator("content", mode="before")
    @classmethod
    def _null_content(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    @property
    def is_function_call(self) -> bool:
        """Assistant message carrying at least one tool call"""
        return self.role == RoleType.ASSISTANT and self.has_tool_calls

    @property
    def is_bare_assistant(self) -> bool:
        return self.role == RoleType.ASSISTANT and not self.has_tool_calls

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def to_langchain(self) -> BaseMessage:
        """Convert to the matching LangChain message class"""

        content = self._langchain_content()

        if self.role == RoleType.USER:
            return HumanMessage(content=content, name=self.name)
        if self.role == RoleType.SYSTEM:
            return SystemMessage(content=content, name=self.name)
        if self.role == RoleType.TOOL:
            return ToolMessage(
                content=content,
                tool_call_id=self.tool_call_id or "",
                name=self.tool_name or self.name
            )

        tool_calls = []
        invalid_tool_calls = []
        for call in self.tool_calls or []:
            try:
                args = json.loads(call.function.arguments or "{}")
            except ValueError as e:
                args, error = None, str(e)
            else:
                error = None if isinstance(args, dict) else "arguments are not a JSON object"

            if error is None:
                tool_calls.append({"name": call.function.name, "args": args, "id": call.id})
            else:
                invalid_tool_calls.append({
                    "name": call.function.name,
                    "args": call.function.arguments,
                    "id": call.id,
                    "error": error
                })

        return AIMessage(
            content=content,
            name=self.name,
            tool_calls=tool_calls,
            invalid_tool_calls=invalid_tool_calls
        )

    def _langchain_content(self) -> Union[str, List[Union[str, Dict[str, Any]]]]:
        if not self.multi_content:
            return self.content

        blocks: List[Union[str, Dict[str, Any]]] = []
        if self.content:
            blocks.append({"type": "text", "text": self.content})
        for part in self.multi_content:
            # Unresolved media cannot be sent to the model
            block = part.to_content_block()
            if block is not None:
                blocks.append(block)
        return blocks


def to_langchain_messages(messages: List[ModelMessage]) -> List[BaseMessage]:
    return [message.to_langchain() for message in messages]
