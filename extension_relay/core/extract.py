"""Normalize the heterogeneous inference API reply shapes into plain text.

The hosted inference API does not use one reply schema across model
families: text-generation models answer with ``[{"generated_text": ...}]``,
some pipelines with a bare string or ``{"result": ...}``, and the chat
router with OpenAI-style ``choices``. :func:`extract_answer` tries an
ordered list of strategies and falls back to serializing the payload, so a
reply is never dropped.
"""

import json
from collections.abc import Callable
from typing import Any

ANSWER_FIELDS = ("generated_text", "text", "result", "answer")
LIST_ITEM_FIELDS = ("generated_text", "text")


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def from_string(payload: Any) -> str | None:
    """A bare JSON string is already the answer."""
    if isinstance(payload, str):
        return payload
    return None


def from_list_head(payload: Any) -> str | None:
    """``[{"generated_text": ...}]`` or ``[{"text": ...}]``."""
    if not isinstance(payload, list) or not payload:
        return None
    head = payload[0]
    if not isinstance(head, dict):
        return None
    for field in LIST_ITEM_FIELDS:
        value = _non_empty_str(head.get(field))
        if value is not None:
            return value
    return None


def from_named_fields(payload: Any) -> str | None:
    """An object carrying one of the known answer fields."""
    if not isinstance(payload, dict):
        return None
    for field in ANSWER_FIELDS:
        value = _non_empty_str(payload.get(field))
        if value is not None:
            return value
    return None


def from_chat_choices(payload: Any) -> str | None:
    """OpenAI-style ``choices[0].message.content``."""
    if not isinstance(payload, dict):
        return None
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


STRATEGIES: tuple[Callable[[Any], str | None], ...] = (
    from_string,
    from_list_head,
    from_named_fields,
    from_chat_choices,
)


def serialize(payload: Any) -> str:
    """Compact JSON, matching what a browser's JSON.stringify would produce."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def extract_answer(payload: Any) -> str:
    """Return the human-readable answer contained in an upstream reply."""
    for strategy in STRATEGIES:
        answer = strategy(payload)
        if answer is not None:
            return answer
    return serialize(payload)


def extract_transcript(payload: Any) -> str:
    """Return the trimmed ``text`` of a speech-to-text reply ("" when there is none)."""
    if isinstance(payload, dict):
        text = payload.get("text")
        if isinstance(text, str):
            return text.strip()
    return ""
