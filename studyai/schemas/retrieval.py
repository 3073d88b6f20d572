"""
Schemas for the retrieval stage and citation resolution.

Source order is the citation contract: the model is told to cite the
n-th source as ``[n]``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field, field_validator

from studyai.schemas.base import CamelModel


class Source(CamelModel):
    """One knowledge-base passage returned by the retrieval service."""
    title: str = "Note"
    url: str = "#"
    content: str = ""

    # The retrieval service sends ids, types and metadata we do not use
    model_config = ConfigDict(extra="ignore")

    @field_validator("title", "url", "content", mode="before")
    @classmethod
    def _null_to_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class RetrievalPayload(CamelModel):
    """Wire shape of a retrieval service response."""
    sources: list[Source] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class Citation(CamelModel):
    """A citation marker bound to its source (id = 1-based source index)."""
    id: int
    title: str
    url: str
    snippet: str
    type: Literal["internal", "external"] = "internal"
