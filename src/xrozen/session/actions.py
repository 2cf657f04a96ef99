"""Extraction of action payloads embedded in assistant replies.

The assistant function may smuggle a structured block into its text reply
by wrapping it in a repeated marker::

    Sure!__ACTION_DATA__{"type": "create_project"}__ACTION_DATA__ Done.

The block is removed before display. Interpreting it is left to callers.
"""

import json
import re
from typing import Any, NamedTuple

ACTION_MARKER = "__ACTION_DATA__"

_ACTION_RE = re.compile(re.escape(ACTION_MARKER) + r"(.+?)" + re.escape(ACTION_MARKER))


class ActionExtraction(NamedTuple):
    """Display text with action blocks removed, plus the first block's raw text."""

    display_text: str
    payload: str | None


def extract_action_payload(text: str) -> ActionExtraction:
    """Strip every marker-delimited block from ``text``.

    Args:
        text: Raw reply from the assistant function

    Returns:
        ActionExtraction with trimmed display text and the first payload,
        or the untouched text and None when no block is present
    """
    match = _ACTION_RE.search(text)
    if match is None:
        return ActionExtraction(text, None)
    return ActionExtraction(_ACTION_RE.sub("", text).strip(), match.group(1))


def decode_action_payload(payload: str | None) -> dict[str, Any] | None:
    """Decode a payload as a JSON object; None if absent or not an object."""
    if not payload:
        return None
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError:
        return None
    return decoded if isinstance(decoded, dict) else None
