from __future__ import annotations

from agentrun.domain.history.grouping import RunGrouper
from agentrun.domain.history.pairing import filter_paired_history
from agentrun.domain.models.message import MessageType
from tests.helpers import assistant, function_call, make_message, tool_result, user

FC = MessageType.FUNCTION_CALL
TR = MessageType.TOOL_RESPONSE


def test_lone_function_call_is_dropped():
    log = [make_message(1, 7, FC, function_call())]
    assert filter_paired_history(log) == []


def test_answered_function_call_is_kept():
    log = [
        make_message(1, 1, MessageType.QUESTION, user("q")),
        make_message(2, 1, FC, function_call()),
        make_message(3, 1, TR, tool_result("r")),
    ]
    assert filter_paired_history(log) == log


def test_only_the_unanswered_run_loses_its_calls():
    log = [
        make_message(1, 1, FC, function_call(call_id="a")),
        make_message(2, 1, TR, tool_result("ra", call_id="a")),
        make_message(3, 2, FC, function_call(call_id="b")),
        make_message(4, 2, TR, tool_result("rb", call_id="b")),
        make_message(5, 2, FC, function_call(call_id="c")),
        make_message(6, 2, MessageType.ANSWER, assistant("waiting")),
    ]

    kept = filter_paired_history(log)

    assert [m.id for m in kept] == [1, 2, 4, 6]


def test_orphaned_tool_response_passes_through():
    log = [
        make_message(1, 3, TR, tool_result("late")),
        make_message(2, 3, MessageType.VERBOSE, content="trace"),
    ]
    assert filter_paired_history(log) == log


def test_run_grouper_keeps_log_order_per_run():
    log = [
        make_message(1, 1, MessageType.QUESTION, user("q1")),
        make_message(2, 2, MessageType.QUESTION, user("q2")),
        make_message(3, 1, FC, function_call()),
        make_message(4, 1, TR, tool_result("r")),
    ]

    runs = RunGrouper(log)

    assert len(runs) == 2
    assert [m.id for m in runs.messages_for(1)] == [1, 3, 4]
    assert [m.id for m in runs.messages_for(2)] == [2]
    assert runs.messages_for(99) == []
    assert runs.has_function_call(1)
    assert not runs.has_function_call(2)
    assert sorted(runs.run_ids) == [1, 2]
