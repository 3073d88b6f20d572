"""Tests for prompt assembly."""

import pytest

from studyai.prompts.answer_generator import build_source_block, build_system_prompt, build_user_prompt
from studyai.prompts.classifier import build_classifier_prompt
from studyai.prompts.constants import BASE_RULES, INTENT_RULES, REQUEST_TYPE_RULES
from studyai.schemas.intent import Intent
from studyai.schemas.response import RequestType
from studyai.schemas.retrieval import Source


class TestSystemPrompt:
    """Section order and conditional sections."""

    def test_section_order(self, newton_sources):
        prompt = build_system_prompt(
            intent=Intent.MATH,
            request_type=RequestType.NOTES,
            sources=newton_sources,
            subject="Physics",
            context="Semester 1",
        )

        header = prompt.index("Subject: Physics")
        base = prompt.index(BASE_RULES)
        first_source = prompt.index("[1] Unit 2: Newton's Laws")
        second_source = prompt.index("[2] PYQ 2022: Force and Motion")
        intent_rules = prompt.index(INTENT_RULES[Intent.MATH])
        type_rules = prompt.index(REQUEST_TYPE_RULES[RequestType.NOTES])

        assert header < base < first_source < second_source < intent_rules < type_rules
        assert "Context: Semester 1" in prompt

    def test_defaults_without_subject(self):
        prompt = build_system_prompt(intent=Intent.CONCEPTUAL, request_type=RequestType.ASK, sources=[])
        assert "Subject: General" in prompt
        assert "Context: University curriculum" in prompt

    def test_no_sources_no_block(self):
        prompt = build_system_prompt(intent=Intent.CONCEPTUAL, request_type=RequestType.ASK, sources=[])
        assert "Knowledge Base Sources" not in prompt

    @pytest.mark.parametrize("intent", [Intent.FACTUAL, Intent.CONCEPTUAL, Intent.MIXED])
    def test_no_intent_rules(self, intent):
        prompt = build_system_prompt(intent=intent, request_type=RequestType.ASK, sources=[])
        for rules in INTENT_RULES.values():
            assert rules not in prompt

    @pytest.mark.parametrize("request_type", [RequestType.ASK, RequestType.CODE])
    def test_no_request_type_rules(self, request_type):
        prompt = build_system_prompt(intent=Intent.CODE, request_type=request_type, sources=[])
        assert INTENT_RULES[Intent.CODE] in prompt
        for rules in REQUEST_TYPE_RULES.values():
            assert rules not in prompt

    def test_quiz_rules(self):
        prompt = build_system_prompt(intent=Intent.FACTUAL, request_type=RequestType.QUIZ, sources=[])
        assert "Exactly 5 multiple-choice questions" in prompt
        assert "ANSWER KEY" in prompt


class TestSourceBlock:
    def test_numbered_from_one(self, newton_sources):
        block = build_source_block(newton_sources)
        lines = block.split("\n")
        assert lines[0] == "## Knowledge Base Sources:"
        assert lines[1].startswith("[1] Unit 2: Newton's Laws: ")
        assert lines[2] == "[2] PYQ 2022: Force and Motion: Derive F = ma from the definition of momentum."

    def test_content_clipped(self):
        block = build_source_block([Source(title="Long", content="x" * 400)])
        assert block.split("\n")[1] == "[1] Long: " + "x" * 300 + "..."


class TestUserPrompt:
    @pytest.mark.parametrize(
        "request_type,expected",
        [
            (RequestType.ASK, "Newton's laws"),
            (RequestType.CODE, "Newton's laws"),
            (RequestType.NOTES, "Create detailed study notes on: Newton's laws"),
            (RequestType.QUIZ, "Create practice MCQ questions on: Newton's laws"),
        ],
    )
    def test_wrappers(self, request_type, expected):
        assert build_user_prompt("Newton's laws", request_type) == expected


class TestClassifierPrompt:
    def test_mentions_every_intent(self):
        prompt = build_classifier_prompt("Plot sin(x)", "Maths")
        for intent in Intent:
            assert intent.value in prompt
        assert "Plot sin(x)" in prompt
        assert "needsVisualization" in prompt
