from typing import Dict, List, Iterable, Sequence, Set
from collections import defaultdict

from agentrun.domain.models.message import Message, MessageType


class RunGrouper:
    """Index of a message log by run id, built once per reconciliation"""

    def __init__(self, messages: Sequence[Message]):
        self._runs: Dict[int, List[Message]] = defaultdict(list)
        self._function_call_runs: Set[int] = set()

        for message in messages:
            self._runs[message.run_id].append(message)
            if message.message_type == MessageType.FUNCTION_CALL:
                self._function_call_runs.add(message.run_id)

    def messages_for(self, run_id: int) -> List[Message]:
        """Messages of a run in log order"""
        return list(self._runs.get(run_id, ()))

    def has_function_call(self, run_id: int) -> bool:
        return run_id in self._function_call_runs

    @property
    def run_ids(self) -> Iterable[int]:
        return self._runs.keys()

    def __len__(self) -> int:
        return len(self._runs)
