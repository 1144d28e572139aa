"""Tests for system prompt synthesis and personality profiles."""

import pytest

from fitcoach.agent.personalities import (
    PERSONALITIES,
    QUICK_ACTION_SUGGESTIONS,
    PersonalityProfile,
    clean_quick_action,
    get_option,
)
from fitcoach.agent.system_prompt import (
    CoachingTier,
    RESPONSE_FORMAT_BLOCK,
    ROLE_BLOCK,
    build_system_prompt,
    coaching_tier,
)
from fitcoach.memory.profile import LifestyleSnapshot


LIFESTYLE = LifestyleSnapshot(steps=4200, exercise_minutes=25, sleep_hours=6.5)


# ── Tenure Tiers ────────────────────────────────────────────────────

class TestCoachingTier:

    @pytest.mark.parametrize("days,tier", [
        (0, CoachingTier.EXPLORATORY),
        (3, CoachingTier.EXPLORATORY),
        (4, CoachingTier.BALANCED),
        (8, CoachingTier.BALANCED),
        (9, CoachingTier.DIRECTIVE),
        (365, CoachingTier.DIRECTIVE),
        (-1, CoachingTier.EXPLORATORY),
    ])
    def test_boundaries(self, days, tier):
        assert coaching_tier(days) is tier

    @pytest.mark.parametrize("days,marker", [
        (3, "COACHING STYLE (Days 0-3)"),
        (4, "COACHING STYLE (Days 4-8)"),
        (8, "COACHING STYLE (Days 4-8)"),
        (9, "COACHING STYLE (Days 9+)"),
    ])
    def test_prompt_contains_tier_block(self, days, marker):
        prompt = build_system_prompt("goal_finisher", days, LIFESTYLE)
        assert marker in prompt
        assert prompt.count("COACHING STYLE") == 1


# ── Prompt Assembly ─────────────────────────────────────────────────

class TestBuildSystemPrompt:

    def test_block_order(self):
        prompt = build_system_prompt(PersonalityProfile.CREATIVE_EXPLORER, 5, LIFESTYLE)
        positions = [
            prompt.index("IMPORTANT SAFETY RULES"),
            prompt.index("USER PERSONALITY: Creative Explorer"),
            prompt.index("COACHING STYLE"),
            prompt.index("USER'S CURRENT LIFESTYLE DATA"),
            prompt.index("RESPONSE FORMAT"),
        ]
        assert positions == sorted(positions)
        assert prompt.startswith(ROLE_BLOCK)
        assert prompt.endswith(RESPONSE_FORMAT_BLOCK)

    @pytest.mark.parametrize("pid,title", [
        ("encouragement_seeker", "Encouragement Seeker"),
        ("creative_explorer", "Creative Explorer"),
        ("goal_finisher", "Goal Finisher"),
    ])
    def test_personality_selected_by_id(self, pid, title):
        assert f"USER PERSONALITY: {title}" in build_system_prompt(pid, 0, LIFESTYLE)

    def test_unknown_personality_falls_back(self):
        prompt = build_system_prompt("night_owl", 0, LIFESTYLE)
        assert "USER PERSONALITY: Encouragement Seeker" in prompt

    def test_lifestyle_values_interpolated(self):
        prompt = build_system_prompt("goal_finisher", 10, LIFESTYLE)
        assert "Daily Steps: 4200" in prompt
        assert "Exercise Minutes Today: 25" in prompt
        assert "Sleep Last Night: 6.5 hours" in prompt

    def test_whole_float_rendered_without_decimal(self):
        prompt = build_system_prompt("goal_finisher", 10, LifestyleSnapshot(8000.0, 30.0, 7.0))
        assert "Daily Steps: 8000" in prompt
        assert "Sleep Last Night: 7 hours" in prompt

    def test_deterministic_and_non_empty(self):
        a = build_system_prompt("goal_finisher", 4, LIFESTYLE)
        b = build_system_prompt("goal_finisher", 4, LIFESTYLE)
        assert a == b
        assert a.strip()


# ── Personalities ───────────────────────────────────────────────────

class TestPersonalities:

    def test_from_id(self):
        assert PersonalityProfile.from_id("goal_finisher") is PersonalityProfile.GOAL_FINISHER
        assert PersonalityProfile.from_id(" Creative_Explorer ") is PersonalityProfile.CREATIVE_EXPLORER
        assert PersonalityProfile.from_id(None) is PersonalityProfile.ENCOURAGEMENT_SEEKER

    def test_catalogue_covers_every_profile(self):
        assert {opt.profile for opt in PERSONALITIES} == set(PersonalityProfile)

    def test_get_option(self):
        assert get_option("goal_finisher").title == "Goal Finisher"
        assert get_option("bogus").title == "Encouragement Seeker"

    def test_clean_quick_action(self):
        assert clean_quick_action("🏃‍♂️ Beginner workout plan") == "Beginner workout plan"
        assert clean_quick_action("🔥 Quick warm-up routine") == "Quick warm-up routine"

    def test_all_quick_actions_clean_to_text(self):
        for suggestion in QUICK_ACTION_SUGGESTIONS:
            cleaned = clean_quick_action(suggestion)
            assert cleaned and cleaned.isascii()
