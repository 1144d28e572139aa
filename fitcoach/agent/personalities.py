"""Personality profiles and the coaching behavior each one selects."""

import re
from dataclasses import dataclass
from enum import Enum


class PersonalityProfile(Enum):
    ENCOURAGEMENT_SEEKER = "encouragement_seeker"
    CREATIVE_EXPLORER = "creative_explorer"
    GOAL_FINISHER = "goal_finisher"

    @classmethod
    def from_id(cls, value) -> "PersonalityProfile":
        """Resolve a stored personality id; unknown ids fall back to encouragement_seeker."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return DEFAULT_PERSONALITY


DEFAULT_PERSONALITY = PersonalityProfile.ENCOURAGEMENT_SEEKER


@dataclass(frozen=True)
class PersonalityOption:
    profile: PersonalityProfile
    title: str
    description: str
    traits: tuple[str, ...]


PERSONALITIES: tuple[PersonalityOption, ...] = (
    PersonalityOption(
        profile=PersonalityProfile.ENCOURAGEMENT_SEEKER,
        title="Encouragement Seeker",
        description="I need motivation and positive reinforcement to stay on track",
        traits=(
            "Loves positive reinforcement",
            "Needs frequent encouragement",
            "Celebrates small wins",
            "Thrives on support",
        ),
    ),
    PersonalityOption(
        profile=PersonalityProfile.CREATIVE_EXPLORER,
        title="Creative Explorer",
        description="I prefer variety and creative approaches to fitness",
        traits=(
            "Loves variety and creativity",
            "Prefers diverse workouts",
            "Enjoys new ideas",
            "Dislikes repetition",
        ),
    ),
    PersonalityOption(
        profile=PersonalityProfile.GOAL_FINISHER,
        title="Goal Finisher",
        description="I want structured plans and clear milestones",
        traits=(
            "Loves structured plans",
            "Goal-oriented mindset",
            "Tracks progress actively",
            "Focused on results",
        ),
    ),
)


PERSONALITY_PROMPTS = {
    PersonalityProfile.ENCOURAGEMENT_SEEKER: """\
USER PERSONALITY: Encouragement Seeker
- This user needs frequent reassurance and positive reinforcement
- They get easily demotivated, so be extra supportive and encouraging
- Celebrate small wins and progress
- Use phrases like "You've got this!", "Great job!", "Every step counts!"
- Break down goals into smaller, achievable milestones
- Provide frequent motivation and acknowledge their efforts
""",
    PersonalityProfile.CREATIVE_EXPLORER: """\
USER PERSONALITY: Creative Explorer
- This user gets easily distracted and prefers variety
- They dislike being spoon-fed information
- Offer creative workout ideas and alternatives
- Present information in engaging, non-repetitive ways
- Encourage exploration of different fitness activities
- Use metaphors, analogies, and interesting facts
- Keep responses dynamic and thought-provoking
""",
    PersonalityProfile.GOAL_FINISHER: """\
USER PERSONALITY: Goal Finisher
- This user is highly motivated and goal-oriented
- They prefer structured plans with clear checkboxes
- Provide detailed, actionable steps
- Use numbered lists, schedules, and clear milestones
- Be direct and efficient in communication
- Focus on measurable progress and achievement
- Include specific targets and deadlines
""",
}


def personality_block(personality) -> str:
    return PERSONALITY_PROMPTS[PersonalityProfile.from_id(personality)]


def get_option(personality) -> PersonalityOption:
    profile = PersonalityProfile.from_id(personality)
    return next(opt for opt in PERSONALITIES if opt.profile is profile)


# -- Quick actions -----------------------------------------------------------

QUICK_ACTION_SUGGESTIONS = (
    "🏃‍♂️ Beginner workout plan",
    "🔥 Quick warm-up routine",
    "💪 Strength training tips",
    "🧘‍♀️ Flexibility exercises",
    "🎯 Stay motivated",
    "🥗 Pre-workout nutrition",
    "💤 Sleep and recovery",
    "📊 Track my progress",
)


def clean_quick_action(suggestion: str) -> str:
    """Strip emoji and punctuation from a quick-action label before sending it."""
    return re.sub(r"[^\w\s-]", "", suggestion, flags=re.ASCII).strip()
