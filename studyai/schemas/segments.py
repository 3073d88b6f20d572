"""
Typed segments of a parsed model reply.

A reply is decomposed into an ordered stream of Text / Math / Code /
CitationRef / Graph segments.  Each segment keeps the exact span of the
reply it was cut from in ``raw`` (never serialised), so joining the raw
spans always gives back the original reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Literal, Union

from pydantic import Field

from studyai.schemas.base import CamelModel


class _SegmentBase(CamelModel):
    raw: str = Field(default="", exclude=True, repr=False)


class TextSegment(_SegmentBase):
    type: Literal["text"] = "text"
    content: str


class MathSegment(_SegmentBase):
    type: Literal["math"] = "math"
    latex: str
    display: bool = False  # True for $$block$$, False for $inline$


class CodeSegment(_SegmentBase):
    type: Literal["code"] = "code"
    content: str
    language: str = "text"
    executable: bool = False


class CitationRef(_SegmentBase):
    type: Literal["citation"] = "citation"
    id: int


class GraphSegment(_SegmentBase):
    type: Literal["graph"] = "graph"
    python_code: str


Segment = Annotated[
    Union[TextSegment, MathSegment, CodeSegment, CitationRef, GraphSegment],
    Field(discriminator="type"),
]


@dataclass
class ParsedResponse:
    """
    Result of segmenting one reply.

    ``primary_*`` point at the first segment of each kind inside
    ``segments`` (the same object, not a copy).
    """

    segments: list = field(default_factory=list)
    has_executable_code: bool = False
    primary_code: CodeSegment | None = None
    primary_math: MathSegment | None = None
    primary_graph: GraphSegment | None = None

    @property
    def has_math(self) -> bool:
        return self.primary_math is not None

    @property
    def has_graph(self) -> bool:
        return self.primary_graph is not None

    def citation_ids(self) -> list[int]:
        """Citation ids in stream order (duplicates kept)."""
        return [s.id for s in self.segments if isinstance(s, CitationRef)]

    def source_text(self) -> str:
        """Rebuild the reply the segments were parsed from."""
        return "".join(s.raw for s in self.segments)
