from typing import List, Sequence
from collections import Counter

from agentrun.domain.models.message import Message, MessageType, PAIRED_TYPES


def filter_paired_history(messages: Sequence[Message]) -> List[Message]:
    """Drop function calls that never received a response.

    A function call is kept only when its run holds an even number of
    function_call and tool_response records. Every other record is kept,
    orphaned tool responses included.
    """

    pair_counts = Counter(
        message.run_id for message in messages
        if message.message_type in PAIRED_TYPES
    )

    return [
        message for message in messages
        if message.message_type != MessageType.FUNCTION_CALL
        or pair_counts[message.run_id] % 2 == 0
    ]
