from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field

from agentrun.domain.models.message import Message


class ReconcileRequest(BaseModel):
    """Conversation log to turn into model context"""
    messages: List[Message]
    drop_unpaired_calls: Optional[bool] = Field(
        None, description="Override the configured unpaired function call filtering"
    )


class ReconcileResponse(BaseModel):
    messages: List[Dict[str, Any]]


class ResumeInfoRequest(BaseModel):
    messages: List[Message]


class ResumeInfoResponse(BaseModel):
    resume_info: Optional[Dict[str, Any]] = None


class RoundsRequest(BaseModel):
    """Plain role/content history limited to a number of user rounds"""
    history: List[Any] = Field(default_factory=list)
    history_rounds: int
    include_current_turn: bool = True


class RoundsResponse(BaseModel):
    messages: List[Dict[str, Any]]
    text: str
