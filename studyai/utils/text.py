"""
Text utilities shared by the pipeline stages.

All functions are pure (no I/O, no LLM).
"""

from __future__ import annotations


def extract_json_object(text: str) -> str | None:
    """
    Return the first balanced ``{...}`` substring of ``text``.

    Braces inside JSON string literals are ignored, so a value like
    ``"a } b"`` does not close the object early.  Returns None when no
    opening brace is ever balanced.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            ch = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:pos + 1]
        # Unbalanced from this brace; try the next candidate.
        start = text.find("{", start + 1)
    return None


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut ``text`` to ``limit`` characters, appending ``suffix`` only when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + suffix


def preview(text: str, limit: int = 80) -> str:
    """Single-line preview for log messages."""
    flat = " ".join((text or "").split())
    return truncate(flat, limit)
