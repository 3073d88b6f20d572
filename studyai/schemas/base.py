"""
Shared pydantic base for everything that crosses the HTTP boundary.

Clients speak camelCase (``subjectId``, ``modelUsed``); Python code uses
snake_case.  Both spellings are accepted on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
