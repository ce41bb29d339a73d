from abc import ABC, abstractmethod
import structlog

from agentrun.domain.models.model_message import ModelMessage

logger = structlog.get_logger(__name__)


class ResolutionError(Exception):
    """A media uri could not be turned into a URL"""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"cannot resolve {uri!r}: {reason}")
        self.uri = uri
        self.reason = reason


class MediaURIResolver(ABC):
    """Turns opaque media references into fetchable URLs"""

    @abstractmethod
    def resolve(self, uri: str) -> str:
        """Return the URL for uri, raising ResolutionError on failure"""
        pass


def resolve_message_uris(message: ModelMessage, resolver: MediaURIResolver) -> ModelMessage:
    """Fill in the url of every media part that carries a uri.

    Failures leave the url unset; the message is always returned.
    """

    if not message.multi_content:
        return message

    for part in message.multi_content:
        media = part.media
        if media is None or not media.uri:
            continue
        try:
            media.url = resolver.resolve(media.uri)
        except ResolutionError as e:
            logger.warning("Media uri resolution failed",
                           uri=e.uri,
                           part_type=part.type.value,
                           reason=e.reason)

    return message
