from typing import Any, Dict, List, Mapping, Optional, Sequence
import structlog
from pydantic import BaseModel, Field

from agentrun.domain.models.model_message import ModelMessage, RoleType

logger = structlog.get_logger(__name__)

ROLE_LABELS: Dict[RoleType, str] = {
    RoleType.USER: "User",
    RoleType.ASSISTANT: "Assistant",
    RoleType.SYSTEM: "System",
}


class HistoryConfig(BaseModel):
    """How much plain chat history a node gets to see"""
    enable_history: bool = False
    history_rounds: int = Field(default=0, description="Number of user rounds to keep")
    include_current_turn: bool = Field(default=True, description="Keep the trailing, in-flight turn")


class ConversationHistory:
    """Round-limited history built from role/content entries"""

    def __init__(self, config: Optional[HistoryConfig] = None):
        self.config = config

    def get_history_messages(self, full_history: Any) -> List[ModelMessage]:
        """Return the last configured rounds, in chronological order"""

        config = self.config
        if config is None or not config.enable_history or config.history_rounds <= 0:
            logger.info("Conversation history disabled",
                        enabled=config is not None and config.enable_history,
                        rounds=config.history_rounds if config else 0)
            return []

        if not isinstance(full_history, Sequence) or isinstance(full_history, (str, bytes)):
            logger.info("Conversation history is not a list",
                        history_type=type(full_history).__name__)
            return []

        entries = list(full_history)
        if not config.include_current_turn:
            entries = _drop_current_turn(entries)

        logger.info("Processing conversation history",
                    total_messages=len(entries),
                    rounds=config.history_rounds)

        collected: List[ModelMessage] = []
        rounds = 0
        for entry in reversed(entries):
            if not isinstance(entry, Mapping):
                continue
            role = entry.get("role")
            content = entry.get("content")
            if not isinstance(role, str) or not isinstance(content, str):
                continue

            if role == RoleType.USER.value:
                if rounds >= config.history_rounds:
                    break
                rounds += 1

            try:
                role_type = RoleType(role)
            except ValueError:
                continue
            if role_type not in ROLE_LABELS:
                continue

            collected.append(ModelMessage(role=role_type, content=content))

        collected.reverse()
        logger.info("Prepared conversation history", messages=len(collected), rounds=rounds)
        return collected

    def get_history_text(self, full_history: Any) -> str:
        """Render the history as a plain transcript for custom prompts"""

        return render_history_text(self.get_history_messages(full_history))


def render_history_text(messages: Sequence[ModelMessage]) -> str:
    return "".join(
        f"{ROLE_LABELS.get(message.role, 'Unknown')}: {message.content}\n"
        for message in messages
    )


def _drop_current_turn(entries: List[Any]) -> List[Any]:
    for index in range(len(entries) - 1, -1, -1):
        entry = entries[index]
        if isinstance(entry, Mapping) and entry.get("role") == RoleType.USER.value:
            return entries[:index]
    return entries
