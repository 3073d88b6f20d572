"""
Centralized prompt rule blocks.

The system prompt is assembled from these in a fixed order: base rules,
numbered sources, intent rules, request-type rules.
"""

from __future__ import annotations

from studyai.schemas.intent import Intent
from studyai.schemas.response import RequestType


# ── Base rules (every request) ──────────────────────────────────────
BASE_RULES = """FORMATTING RULES:
- Use LaTeX for ALL math: inline as $x^2$, display blocks as $$\\int f(x)\\,dx$$
- Cite sources by their number in square brackets, e.g. [1], [2]
- Put code in fenced blocks with a language tag, e.g. ```python
- Mark code the student can run by adding :executable to the tag, e.g. ```python:executable
- Be concise but thorough"""


# ── Intent-specific rules ───────────────────────────────────────────
INTENT_RULES: dict[Intent, str] = {
    Intent.MATH: """## Math Response Requirements:
- Show the complete step-by-step derivation
- Use LaTeX for every equation
- Include Python code for verification when applicable
- Clearly state the final answer""",
    Intent.CODE: """## Code Response Requirements:
- Provide complete, runnable code and mark it :executable
- Include comments for the non-obvious parts
- Show the expected output
- Explain the algorithm/approach""",
    Intent.GRAPH: """## Visualization Requirements:
- Provide complete matplotlib code that draws the figure, marked :executable
- Include axis labels and a title
- Explain what the visualization shows""",
}


# ── Request-type rules ──────────────────────────────────────────────
REQUEST_TYPE_RULES: dict[RequestType, str] = {
    RequestType.NOTES: """## Study Notes Format:
- Structured, exam-ready notes
- Clear headings and subheadings
- Key definitions, formulas and concepts
- Highlight the key points likely to appear in exams
- Bullet points for easy scanning""",
    RequestType.QUIZ: """## Quiz Format:
- Exactly 5 multiple-choice questions
- Exactly 4 options per question, labelled A, B, C, D
- Mix of difficulty levels covering the key concepts
- After all questions, an ANSWER KEY with a brief explanation for each answer""",
}


# ── User message wrappers ───────────────────────────────────────────
USER_PROMPT_TEMPLATES: dict[RequestType, str] = {
    RequestType.NOTES: "Create detailed study notes on: {query}",
    RequestType.QUIZ: "Create practice MCQ questions on: {query}",
}

SOURCE_CONTENT_LIMIT = 300
