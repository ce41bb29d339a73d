from typing import Annotated

from fastapi import APIRouter, Depends, Request

from agentrun.application.api.schema.history import (
    ReconcileRequest, ReconcileResponse,
    ResumeInfoRequest, ResumeInfoResponse,
    RoundsRequest, RoundsResponse
)
from agentrun.domain.history.history_manager import HistoryManager
from agentrun.domain.history.rounds import ConversationHistory, HistoryConfig, render_history_text

router = APIRouter(prefix="/api/v1/history", tags=["history"])


def get_history_manager(request: Request) -> HistoryManager:
    return request.app.state.history_manager


# Plain def handlers: resolver lookups may block, FastAPI runs these in its thread pool
@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile_endpoint(
    request: ReconcileRequest,
    manager: Annotated[HistoryManager, Depends(get_history_manager)]
):
    messages = manager.build_context(request.messages, request.drop_unpaired_calls)
    return ReconcileResponse(messages=[message.to_payload() for message in messages])


@router.post("/resume-info", response_model=ResumeInfoResponse)
def resume_info_endpoint(
    request: ResumeInfoRequest,
    manager: Annotated[HistoryManager, Depends(get_history_manager)]
):
    resume_info = manager.resume_info(request.messages)
    return ResumeInfoResponse(
        resume_info=resume_info.to_payload() if resume_info is not None else None
    )


@router.post("/rounds", response_model=RoundsResponse)
def rounds_endpoint(request: RoundsRequest):
    history = ConversationHistory(HistoryConfig(
        enable_history=True,
        history_rounds=request.history_rounds,
        include_current_turn=request.include_current_turn
    ))
    messages = history.get_history_messages(request.history)
    return RoundsResponse(
        messages=[message.to_payload() for message in messages],
        text=render_history_text(messages)
    )
