from typing import Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, TypeAdapter


class ResumeInfo(BaseModel):
    """Suspended-execution state stored on a verbose message.

    The schema belongs to the run orchestration layer. Every field is kept
    as-is so the payload round-trips unchanged.
    """
    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_payload(cls, payload: str) -> Optional["ResumeInfo"]:
        """Parse a JSON object; JSON null yields None.

        Raises pydantic.ValidationError for anything else.
        """
        return _optional_resume_info.validate_json(payload)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


_optional_resume_info = TypeAdapter(Optional[ResumeInfo])
