"""
Prompt assembly for answer generation.

System prompt structure:
  1. Header (persona, subject, curriculum context)
  2. Base formatting rules
  3. Numbered source block (only when sources exist)
  4. Intent-specific rules (MATH / CODE / GRAPH only)
  5. Request-type rules (notes / quiz only)
"""

from __future__ import annotations

from studyai.prompts.constants import (
    BASE_RULES,
    INTENT_RULES,
    REQUEST_TYPE_RULES,
    SOURCE_CONTENT_LIMIT,
    USER_PROMPT_TEMPLATES,
)
from studyai.schemas.intent import Intent
from studyai.schemas.response import RequestType
from studyai.schemas.retrieval import Source
from studyai.utils.text import truncate


def build_prompt_header(subject: str | None, context: str | None) -> str:
    return (
        "You are an expert AI study assistant for university students.\n"
        f"Subject: {subject or 'General'}\n"
        f"Context: {context or 'University curriculum'}"
    )


def build_source_block(sources: list[Source]) -> str:
    """Number sources from 1; the number is what the model must cite."""
    lines = ["## Knowledge Base Sources:"]
    for idx, src in enumerate(sources, start=1):
        lines.append(f"[{idx}] {src.title}: {truncate(src.content, SOURCE_CONTENT_LIMIT)}")
    return "\n".join(lines)


def build_system_prompt(
    *,
    intent: Intent,
    request_type: RequestType,
    sources: list[Source],
    subject: str | None = None,
    context: str | None = None,
) -> str:
    parts: list[str] = [build_prompt_header(subject, context), BASE_RULES]

    if sources:
        parts.append(build_source_block(sources))

    intent_rules = INTENT_RULES.get(intent)
    if intent_rules:
        parts.append(intent_rules)

    type_rules = REQUEST_TYPE_RULES.get(request_type)
    if type_rules:
        parts.append(type_rules)

    return "\n\n".join(parts)


def build_user_prompt(query: str, request_type: RequestType) -> str:
    template = USER_PROMPT_TEMPLATES.get(request_type)
    if template is None:
        return query
    return template.format(query=query)
