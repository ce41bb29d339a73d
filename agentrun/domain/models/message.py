from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class MessageType(str, Enum):
    """Kind of a persisted conversation record"""
    QUESTION = "question"
    ANSWER = "answer"
    FUNCTION_CALL = "function_call"
    TOOL_RESPONSE = "tool_response"
    VERBOSE = "verbose"
    FOLLOW_UP = "follow_up"


class ExtKey(str, Enum):
    """Reserved keys of the ext side channel"""
    RESUME_INFO = "resume_info"
    OUTPUT_EMITTER = "output_emitter"


# Never replayed to the model
NON_MODEL_TYPES = frozenset({MessageType.VERBOSE, MessageType.FOLLOW_UP})

# Counted when checking call/response pairing
PAIRED_TYPES = frozenset({MessageType.FUNCTION_CALL, MessageType.TOOL_RESPONSE})


class Message(BaseModel):
    """A persisted record of the conversation log"""
    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Unique message identifier")
    run_id: int = Field(description="Identifier of the run (call/response round-trip)")
    message_type: MessageType
    content: str = Field(default="", description="Human-displayable text")
    model_content: str = Field(default="", description="JSON encoded model message, empty if not model-visible")
    ext: Dict[str, str] = Field(default_factory=dict)
    conversation_id: int = 0
    role: Optional[str] = Field(None, description="Display role")

    @property
    def is_model_visible(self) -> bool:
        return self.model_content != ""

    @property
    def is_output_emitter(self) -> bool:
        return self.ext.get(ExtKey.OUTPUT_EMITTER.value) == "true"

    def ext_value(self, key: ExtKey) -> str:
        """Return an ext value, empty string when missing"""
        return self.ext.get(key.value, "")
