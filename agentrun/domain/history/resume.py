from typing import Optional, Sequence
import structlog
from pydantic import ValidationError

from agentrun.domain.models.message import Message, MessageType, ExtKey
from agentrun.domain.models.resume_info import ResumeInfo

logger = structlog.get_logger(__name__)


def locate_resume_info(log: Sequence[Message]) -> Optional[ResumeInfo]:
    """Recover the suspended-execution marker of the current turn.

    Scans backward and stops at the most recent question. The scan does not
    stop at the first marker found, so when a turn holds several markers the
    chronologically earliest one is returned. A JSON null payload clears the
    candidate and the scan goes on. A payload that fails to parse aborts the
    lookup and yields None.
    """

    resume_info: Optional[ResumeInfo] = None

    for message in reversed(log):
        if message.message_type == MessageType.QUESTION:
            break
        if message.message_type != MessageType.VERBOSE:
            continue

        payload = message.ext_value(ExtKey.RESUME_INFO)
        if not payload:
            continue

        try:
            resume_info = ResumeInfo.from_payload(payload)
        except ValidationError as e:
            logger.warning("Discarding unparseable resume info",
                           message_id=message.id,
                           run_id=message.run_id,
                           errors=e.error_count())
            return None

    return resume_info
