"""Tests for the medical-content safety filter."""

import pytest

from fitcoach.agent.safety import MEDICAL_KEYWORDS, REFUSAL_MESSAGE, is_restricted, matched_keywords


class TestIsRestricted:

    @pytest.mark.parametrize("text", [
        "I have knee pain when I squat",
        "Can I exercise with DIABETES?",
        "Which supplement should I take?",
        "I think I tore a ligament",
        "my doctor changed my medication",
        "is this a symptom of something",
    ])
    def test_medical_questions_flagged(self, text):
        assert is_restricted(text)

    @pytest.mark.parametrize("text", [
        "Give me a beginner workout plan",
        "How do I stay motivated?",
        "",
    ])
    def test_fitness_questions_pass(self, text):
        assert not is_restricted(text)

    def test_substring_match(self):
        # Best-effort substring matching: "painful" contains "pain"
        assert is_restricted("running is painful")

    def test_every_keyword_triggers(self):
        for keyword in MEDICAL_KEYWORDS:
            assert is_restricted(f"question about {keyword} please"), keyword

    def test_none_is_not_restricted(self):
        assert not is_restricted(None)

    def test_matched_keywords(self):
        assert matched_keywords("Chronic pain after injury") == ["injury", "pain", "chronic"]


class TestRefusalMessage:

    def test_lists_allowed_topics(self):
        for topic in ["Workout plans", "Fitness tips", "Motivation", "General wellness"]:
            assert topic in REFUSAL_MESSAGE

    def test_recommends_professionals(self):
        assert "physician" in REFUSAL_MESSAGE
        assert "physical therapist" in REFUSAL_MESSAGE
