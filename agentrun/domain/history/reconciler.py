from typing import List, Optional, Sequence, Set
import structlog
from pydantic import ValidationError

from agentrun.domain.models.message import Message, MessageType, NON_MODEL_TYPES
from agentrun.domain.models.model_message import ModelMessage
from .grouping import RunGrouper
from .media import MediaURIResolver, resolve_message_uris

logger = structlog.get_logger(__name__)

MERGE_SEPARATOR = "\n\n"


def parse_model_content(message: Message) -> Optional[ModelMessage]:
    """Parse the canonical model payload of a message, None if corrupt"""
    try:
        return ModelMessage.model_validate_json(message.model_content)
    except ValidationError as e:
        logger.debug("Skipping corrupt model content",
                     message_id=message.id,
                     run_id=message.run_id,
                     errors=e.error_count())
        return None


class HistoryReconciler:
    """Derives the model-ready message sequence from a conversation log.

    A function call is emitted together with the tool response of its run.
    Commentary the assistant produced while the call was outstanding is
    folded into that tool response and never replayed on its own.
    """

    def __init__(self, resolver: MediaURIResolver):
        if resolver is None:
            raise ValueError("HistoryReconciler requires a media uri resolver")
        self.resolver = resolver

    def reconcile(self, log: Sequence[Message]) -> List[ModelMessage]:
        """Single forward pass over the log, in log order"""

        runs = RunGrouper(log)
        processed: Set[int] = set()
        output: List[ModelMessage] = []

        for message in log:
            if message.id in processed or not message.is_model_visible:
                continue
            # Not marked; resume lookup still reads them
            if message.message_type in NON_MODEL_TYPES:
                continue

            parsed = parse_model_content(message)
            if parsed is None:
                continue

            if parsed.is_function_call:
                output.append(self._resolve(parsed))
                processed.add(message.id)

                tool_response = self._merge_tool_response(message, runs, processed)
                if tool_response is not None:
                    output.append(self._resolve(tool_response))
                continue

            if parsed.is_bare_assistant and runs.has_function_call(message.run_id):
                processed.add(message.id)
                continue

            output.append(self._resolve(parsed))
            processed.add(message.id)

        return output

    def _merge_tool_response(
        self,
        head: Message,
        runs: RunGrouper,
        processed: Set[int]
    ) -> Optional[ModelMessage]:
        """Locate the run's tool response and fold intermediate answers into it"""

        candidate: Optional[Message] = None
        intermediates: List[Message] = []

        for run_message in runs.messages_for(head.run_id):
            if not run_message.is_model_visible:
                continue
            if run_message.message_type == MessageType.TOOL_RESPONSE:
                # Last one wins
                candidate = run_message
            elif run_message.message_type == MessageType.ANSWER and run_message.id != head.id:
                parsed = parse_model_content(run_message)
                if parsed is not None and parsed.is_bare_assistant:
                    intermediates.append(run_message)

        if candidate is None:
            logger.debug("No tool response for function call",
                         message_id=head.id,
                         run_id=head.run_id)
            return None

        tool_message = parse_model_content(candidate)
        if tool_message is None:
            return None

        merged: List[str] = []
        if tool_message.content:
            merged.append(tool_message.content)
        for intermediate in intermediates:
            content = intermediate.content.strip()
            if content and content not in merged:
                merged.append(content)
            elif content:
                logger.debug("Skipped duplicate intermediate content",
                             message_id=intermediate.id,
                             output_emitter=intermediate.is_output_emitter)

        if len(merged) > 1:
            tool_message.content = MERGE_SEPARATOR.join(merged)
        elif merged:
            tool_message.content = merged[0]

        processed.add(candidate.id)
        processed.update(intermediate.id for intermediate in intermediates)

        logger.debug("Merged tool response",
                     run_id=head.run_id,
                     tool_response_id=candidate.id,
                     intermediate_count=len(intermediates),
                     merged_parts=len(merged))

        return tool_message

    def _resolve(self, message: ModelMessage) -> ModelMessage:
        return resolve_message_uris(message, self.resolver)
