"""Shared test helpers and stub classes.

Build log records with ``make_message`` instead of spelling out JSON payloads
in every test.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from agentrun.domain.history.media import MediaURIResolver, ResolutionError
from agentrun.domain.models.message import Message, MessageType


def make_message(
    id: int,
    run_id: int,
    message_type: MessageType,
    model: Optional[Dict[str, Any]] = None,
    content: Optional[str] = None,
    ext: Optional[Dict[str, str]] = None,
    model_content: Optional[str] = None,
) -> Message:
    """Create a log record; ``model`` is JSON encoded into model_content."""
    if model_content is None:
        model_content = json.dumps(model) if model is not None else ""
    if content is None:
        content = (model or {}).get("content", "")
    return Message(
        id=id,
        run_id=run_id,
        message_type=message_type,
        content=content,
        model_content=model_content,
        ext=ext or {},
    )


def user(text: str) -> Dict[str, Any]:
    return {"role": "user", "content": text}


def assistant(text: str) -> Dict[str, Any]:
    return {"role": "assistant", "content": text}


def function_call(name: str = "calc", call_id: str = "call_1", arguments: str = "{}") -> Dict[str, Any]:
    return {
        "role": "assistant",
        "content": "",
        "tool_calls": [
            {"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}
        ],
    }


def tool_result(text: str, call_id: str = "call_1") -> Dict[str, Any]:
    return {"role": "tool", "content": text, "tool_call_id": call_id}


def image_message(uri: str, text: str = "") -> Dict[str, Any]:
    return {
        "role": "user",
        "content": text,
        "multi_content": [{"type": "image_url", "image_url": {"uri": uri}}],
    }


class StubResolver(MediaURIResolver):
    """Resolves uri to https://cdn.test/<uri>; uris starting with 'missing' fail."""

    def __init__(self):
        self.calls: List[str] = []

    def resolve(self, uri: str) -> str:
        self.calls.append(uri)
        if uri.startswith("missing"):
            raise ResolutionError(uri, "not found")
        return f"https://cdn.test/{uri}"
