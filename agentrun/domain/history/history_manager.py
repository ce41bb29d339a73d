from typing import List, Optional, Sequence
import time
import structlog
from langchain_core.messages import BaseMessage

from agentrun.domain.models.message import Message
from agentrun.domain.models.model_message import ModelMessage, to_langchain_messages
from agentrun.domain.models.resume_info import ResumeInfo
from agentrun.infrastructure.observability.logging import history_logger, metrics
from .media import MediaURIResolver
from .pairing import filter_paired_history
from .reconciler import HistoryReconciler
from .resume import locate_resume_info

logger = structlog.get_logger(__name__)


class HistoryManager:
    """Assembles model context and resume state from a conversation log"""

    def __init__(self, resolver: MediaURIResolver, drop_unpaired_calls: bool = True):
        self.reconciler = HistoryReconciler(resolver)
        self.drop_unpaired_calls = drop_unpaired_calls

    def build_context(
        self,
        log: Sequence[Message],
        drop_unpaired_calls: Optional[bool] = None
    ) -> List[ModelMessage]:
        """Build the model-ready message sequence for the next invocation"""

        started = time.perf_counter()
        if drop_unpaired_calls is None:
            drop_unpaired_calls = self.drop_unpaired_calls

        history = filter_paired_history(log) if drop_unpaired_calls else list(log)
        dropped = len(log) - len(history)
        if dropped:
            metrics.increment_counter("history.unpaired_calls_dropped", dropped)

        messages = self.reconciler.reconcile(history)

        duration_ms = (time.perf_counter() - started) * 1000
        metrics.record_latency("history.reconcile", duration_ms)
        history_logger.log_reconciliation(
            input_messages=len(log),
            output_messages=len(messages),
            dropped_unpaired=dropped,
            duration_ms=duration_ms
        )

        return messages

    def build_langchain_context(
        self,
        log: Sequence[Message],
        drop_unpaired_calls: Optional[bool] = None
    ) -> List[BaseMessage]:
        """Same as build_context, converted for a LangChain runtime"""
        return to_langchain_messages(self.build_context(log, drop_unpaired_calls))

    def resume_info(self, log: Sequence[Message]) -> Optional[ResumeInfo]:
        """Resume state of the current turn, if any"""

        started = time.perf_counter()
        resume_info = locate_resume_info(log)

        duration_ms = (time.perf_counter() - started) * 1000
        metrics.record_latency("history.resume_lookup", duration_ms)
        history_logger.log_resume_lookup(
            scanned_messages=len(log),
            found=resume_info is not None,
            duration_ms=duration_ms
        )

        return resume_info
