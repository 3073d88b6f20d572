"""Tests for tier routing and model resolution."""

import pytest

from studyai.core.config import Settings, settings
from studyai.pipeline.model_selector import (
    MODEL_ROUTING,
    build_routing_table,
    resolve_model,
    route,
)
from studyai.schemas.intent import Intent, ModelTier


class TestRoute:
    """Intent and confidence to tier."""

    @pytest.mark.parametrize("intent", [Intent.MATH, Intent.CODE, Intent.MIXED])
    @pytest.mark.parametrize("confidence", [0.0, 0.5, 0.9, 0.95, 1.0])
    def test_complex_intents_ignore_confidence(self, intent, confidence):
        assert route(intent, confidence) == ModelTier.COMPLEX

    @pytest.mark.parametrize("intent", [Intent.FACTUAL, Intent.CONCEPTUAL, Intent.GRAPH])
    def test_high_confidence_is_fast(self, intent):
        assert route(intent, 0.95) == ModelTier.FAST
        assert route(intent, 1.0) == ModelTier.FAST

    @pytest.mark.parametrize("confidence", [0.0, 0.5, 0.85, 0.9])
    def test_threshold_is_exclusive(self, confidence):
        """Exactly 0.9 is not enough for the fast tier."""
        assert route(Intent.FACTUAL, confidence) == ModelTier.DEFAULT


class TestResolveModel:
    def test_uses_configured_models(self):
        assert resolve_model(ModelTier.FAST) == settings.fast_model
        assert resolve_model(ModelTier.DEFAULT) == settings.default_model
        assert resolve_model(ModelTier.COMPLEX) == settings.complex_model

    def test_custom_table(self):
        cfg = Settings(fast_model="m-fast", default_model="m-default", complex_model="m-complex")
        table = build_routing_table(cfg)
        assert resolve_model(ModelTier.COMPLEX, table) == "m-complex"
        assert dict(table) == {
            ModelTier.FAST: "m-fast",
            ModelTier.DEFAULT: "m-default",
            ModelTier.COMPLEX: "m-complex",
        }

    def test_routing_table_is_read_only(self):
        with pytest.raises(TypeError):
            MODEL_ROUTING[ModelTier.FAST] = "something-else"
