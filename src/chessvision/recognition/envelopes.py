"""
Readers for provider response envelopes.

Each reader recognizes one JSON shape and returns the generated text, or
None when the envelope does not have that shape. Adapters list the readers
they accept in priority order.
"""

from typing import Any, Callable


EnvelopeReader = Callable[[Any], str | None]


def _dig(obj: Any, *path: str | int) -> Any:
    """Follow a path of keys/indices, returning None on any mismatch."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(obj, list) or not -len(obj) <= step < len(obj):
                return None
        elif not isinstance(obj, dict):
            return None
        elif step not in obj:
            return None
        obj = obj[step]
    return obj


def _text_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def chat_completion_text(envelope: Any) -> str | None:
    """`{"choices": [{"message": {"content": "..."}}]}`"""
    return _text_or_none(_dig(envelope, "choices", 0, "message", "content"))


def messages_text(envelope: Any) -> str | None:
    """`{"content": [{"text": "..."}]}`"""
    return _text_or_none(_dig(envelope, "content", 0, "text"))


def output_text(envelope: Any) -> str | None:
    """`{"output_text": "..."}`"""
    return _text_or_none(_dig(envelope, "output_text"))


def output_items_text(envelope: Any) -> str | None:
    """
    `{"output": [{"content": [{"type": "output_text", "text": "..."}]}]}`

    Output items are scanned in order, since reasoning items without
    content may precede the message. An item whose content is a plain
    string is accepted too.
    """
    items = _dig(envelope, "output")
    if not isinstance(items, list):
        return None

    for item in items:
        content = _dig(item, "content")
        if isinstance(content, list):
            for part in content:
                if _dig(part, "type") == "output_text":
                    text = _text_or_none(_dig(part, "text"))
                    if text is not None:
                        return text
        else:
            text = _text_or_none(content)
            if text is not None:
                return text

    return None
