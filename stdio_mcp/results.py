"""Helpers for presenting tool results shaped as ``{"content": [...]}``."""

from __future__ import annotations

import json
import sys
from typing import IO, Any


def parse_json_safely(text: str) -> tuple[bool, Any]:
    """Return ``(True, parsed)`` for JSON text, ``(False, text)`` otherwise."""
    try:
        return True, json.loads(text)
    except (TypeError, ValueError):
        return False, text


def _error_message(content: list[Any]) -> str | None:
    for item in content:
        if not isinstance(item, dict) or item.get("type") != "error":
            continue
        err = item.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            code = err.get("code")
            if isinstance(code, str) and code:
                return f"{err['message']} ({code})"
            return err["message"]
    return None


def extract_output(result: Any) -> Any:
    """Pick the most useful payload out of a tool result.

    Preference order: the first ``error`` item's message, the first
    ``json`` item's value, the first ``text`` item (JSON-decoded when
    possible). Anything not shaped like a content result is returned as is.
    """
    content = result.get("content") if isinstance(result, dict) else None
    if not isinstance(content, list):
        return result

    message = _error_message(content)
    if message:
        return message

    for item in content:
        if isinstance(item, dict) and item.get("type") == "json" and "json" in item:
            return item["json"]

    for item in content:
        if isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str):
            return parse_json_safely(item["text"])[1]

    return result


def first_text(result: Any) -> str:
    """Return ``result.content[0].text`` or an empty string."""
    if not isinstance(result, dict):
        return ""
    content = result.get("content")
    if not isinstance(content, list) or not content or not isinstance(content[0], dict):
        return ""
    text = content[0].get("text")
    return text if isinstance(text, str) else ""


def print_result(result: Any, file: IO[str] | None = None) -> None:
    """Print a tool result: strings raw, anything else as indented JSON."""
    out = file if file is not None else sys.stdout
    output = extract_output(result)
    if isinstance(output, str):
        print(output, file=out)
    else:
        print(json.dumps(output, indent=2, ensure_ascii=False, default=str), file=out)
