"""Shared fixtures for the pipeline tests."""

import json

import pytest

from studyai.schemas.retrieval import Source


def _classifier_reply(intent="CONCEPTUAL", confidence=0.85, retrieval=True, computation=False, visualization=False):
    """A classifier reply wrapped in prose, the way models often answer."""
    payload = {
        "intent": intent,
        "confidence": confidence,
        "needsRetrieval": retrieval,
        "needsComputation": computation,
        "needsVisualization": visualization,
    }
    return f"Here is the classification:\n{json.dumps(payload)}\n"


@pytest.fixture
def classifier_reply():
    """Builder for classifier replies."""
    return _classifier_reply


@pytest.fixture
def newton_sources():
    """Two knowledge-base passages about Newton's laws."""
    return [
        Source(
            title="Unit 2: Newton's Laws",
            url="/physics/mechanics?tab=notes&unit=2",
            content="The net force on a body equals its mass times its acceleration. " * 5,
        ),
        Source(
            title="PYQ 2022: Force and Motion",
            url="/physics/mechanics?tab=pyqs&year=2022",
            content="Derive F = ma from the definition of momentum.",
        ),
    ]
