from __future__ import annotations

import json

import structlog
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from agentrun.domain.history.history_manager import HistoryManager
from agentrun.domain.models.message import ExtKey, MessageType
from agentrun.infrastructure.observability.logging import add_service_context, metrics
from tests.helpers import StubResolver, assistant, function_call, make_message, tool_result, user

FC = MessageType.FUNCTION_CALL
TR = MessageType.TOOL_RESPONSE


def interrupted_log():
    return [
        make_message(1, 1, MessageType.QUESTION, user("book a flight")),
        make_message(2, 1, FC, function_call("search", call_id="s1", arguments='{"to": "OSL"}')),
        make_message(3, 1, MessageType.ANSWER, assistant("searching flights")),
        make_message(4, 1, TR, tool_result("3 flights found", call_id="s1")),
        make_message(5, 1, FC, function_call("book", call_id="b1")),
        make_message(6, 1, MessageType.VERBOSE,
                     ext={ExtKey.RESUME_INFO.value: json.dumps({"interrupt_id": "confirm-booking"})}),
    ]


def test_unpaired_calls_are_dropped_by_default(resolver: StubResolver):
    manager = HistoryManager(resolver)

    messages = manager.build_context(interrupted_log())

    # run 1 holds three paired records, so both of its calls are filtered
    # and the rest of the run is replayed as plain turns
    assert [m.role.value for m in messages] == ["user", "assistant", "tool"]
    assert messages[1].content == "searching flights"
    assert messages[2].content == "3 flights found"
    assert metrics.get_metrics_summary()["history.unpaired_calls_dropped"] == 2
    assert metrics.get_metrics_summary()["latency.history.reconcile"]["count"] == 1


def test_filtering_can_be_turned_off(resolver: StubResolver):
    manager = HistoryManager(resolver, drop_unpaired_calls=True)

    messages = manager.build_context(interrupted_log(), drop_unpaired_calls=False)

    assert [m.role.value for m in messages] == ["user", "assistant", "tool", "assistant", "tool"]
    assert "history.unpaired_calls_dropped" not in metrics.get_metrics_summary()


def test_langchain_context(resolver: StubResolver):
    manager = HistoryManager(resolver, drop_unpaired_calls=False)

    messages = manager.build_langchain_context(interrupted_log()[:4])

    assert [type(m) for m in messages] == [HumanMessage, AIMessage, ToolMessage]
    assert messages[1].tool_calls[0]["args"] == {"to": "OSL"}
    assert messages[2].tool_call_id == "s1"


def test_resume_info(resolver: StubResolver):
    manager = HistoryManager(resolver)

    resume_info = manager.resume_info(interrupted_log())

    assert resume_info.to_payload() == {"interrupt_id": "confirm-booking"}
    assert metrics.get_metrics_summary()["latency.history.resume_lookup"]["count"] == 1


def test_service_context_adds_bound_ids():
    structlog.contextvars.bind_contextvars(trace_id="t-1", conversation_id=42)
    try:
        event = add_service_context(None, "info", {"event": "reconciliation"})
    finally:
        structlog.contextvars.clear_contextvars()

    assert event["trace_id"] == "t-1"
    assert event["conversation_id"] == 42
    assert "timestamp" in event
