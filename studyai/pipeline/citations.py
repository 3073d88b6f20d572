"""
Pipeline stage 5: Citation resolution.

Binds every ``[n]`` marker to the n-th retrieved source (1-based).
Markers without a matching source stay unresolved in the segment stream
and are simply left out of the citation list.
"""

from __future__ import annotations

from studyai.schemas.retrieval import Citation, Source
from studyai.schemas.segments import ParsedResponse
from studyai.utils.logging import get_logger
from studyai.utils.text import truncate

logger = get_logger("studyai.pipeline.citations")

SNIPPET_LENGTH = 150


def build_citation(citation_id: int, source: Source) -> Citation:
    return Citation(
        id=citation_id,
        title=source.title,
        url=source.url,
        snippet=truncate(source.content, SNIPPET_LENGTH),
        type="internal",
    )


def resolve_citations(parsed: ParsedResponse, sources: list[Source]) -> list[Citation]:
    """One Citation per distinct resolvable id, in first-appearance order."""
    citations: list[Citation] = []
    seen: set[int] = set()
    unresolved: list[int] = []

    for citation_id in parsed.citation_ids():
        if citation_id in seen:
            continue
        seen.add(citation_id)
        if 1 <= citation_id <= len(sources):
            citations.append(build_citation(citation_id, sources[citation_id - 1]))
        else:
            unresolved.append(citation_id)

    if unresolved:
        logger.info("[CITATIONS] Unresolved markers %s (%d source(s))", unresolved, len(sources))
    return citations
