"""Output post-processing for tools that print line-delimited JSON events."""

from __future__ import annotations

import json


def _text_of(event: object) -> str | None:
    if not isinstance(event, dict) or event.get("type") != "text":
        return None
    part = event.get("part")
    if not isinstance(part, dict):
        return None
    text = part.get("text")
    return text if isinstance(text, str) else None


def extract(raw_output: str, wants_structured: bool) -> str:
    """Return the assistant text carried by ``{"type": "text", "part": {"text": ...}}`` events.

    Lines that are not JSON, or are JSON of another shape, are skipped. When no
    text event is found the raw output is returned unchanged.
    """
    if not wants_structured:
        return raw_output

    fragments: list[str] = []
    for line in raw_output.splitlines():
        if not line.strip():
            continue
        try:
            event = json.loads(line)
        except (ValueError, RecursionError):
            continue
        text = _text_of(event)
        if text is not None:
            fragments.append(text)

    if not fragments:
        return raw_output
    return "\n".join(fragments)
