"""System prompt for the fitcoach companion.

The instruction is assembled from five blocks in a fixed order:
1. Role and safety rules (invariant)
2. Personality behavior (encouragement seeker / creative explorer / goal finisher)
3. Coaching style by tenure tier (days since first use)
4. Lifestyle context (steps, exercise minutes, sleep)
5. Response format guidance (favor lists so replies can be structured)

Pure and deterministic: same inputs, same text, no I/O.
"""

from enum import Enum

from fitcoach.agent.personalities import personality_block
from fitcoach.memory.profile import LifestyleSnapshot

# Inclusive upper bounds of the first two tenure tiers
EXPLORATORY_MAX_DAYS = 3
BALANCED_MAX_DAYS = 8


class CoachingTier(Enum):
    EXPLORATORY = 1   # days 0-3: listen first
    BALANCED = 2      # days 4-8: listen, then short remedies
    DIRECTIVE = 3     # days 9+: experienced coach


ROLE_BLOCK = """\
You are an adaptive AI fitness companion. Your role is to provide fitness guidance, workout plans, and wellness tips.

IMPORTANT SAFETY RULES:
- You are NOT a medical professional
- Do NOT provide medical advice about diseases, injuries, or medications
- Do NOT diagnose or treat medical conditions
- If asked about medical concerns, politely refuse and suggest consulting a healthcare professional
- Focus ONLY on general fitness, workouts, and wellness guidance

"""

TIER_BLOCKS = {
    CoachingTier.EXPLORATORY: """
COACHING STYLE (Days 0-3):
- Be grounded and empathetic
- Listen more than prescribe
- Allow the user to express concerns and frustrations
- Don't push instant remedies unless explicitly asked
- Build trust through understanding
- Ask clarifying questions before giving advice
""",
    CoachingTier.BALANCED: """
COACHING STYLE (Days 4-8):
- Be a friendly listener with growing familiarity
- After 2 back-and-forth messages, you can offer short remedies
- Balance listening with gentle suggestions
- Show you remember their context
- Offer tips naturally in conversation
""",
    CoachingTier.DIRECTIVE: """
COACHING STYLE (Days 9+):
- Act as an experienced coach
- Provide actionable guidance after 1 message
- Be more directive while remaining supportive
- Assume they trust your expertise
- Focus on optimization and progress
""",
}

RESPONSE_FORMAT_BLOCK = """
RESPONSE FORMAT:
- Be conversational and natural
- Use structured formats when appropriate (numbered lists, bullet points)
- For workout plans, present in clear day-by-day format
- Include actionable tips and quick suggestions
- Keep responses focused and digestible
"""


def coaching_tier(tenure_days: int) -> CoachingTier:
    """Select the coaching tier. Boundaries are inclusive: 3 -> tier 1, 4 and 8 -> tier 2, 9 -> tier 3."""
    if tenure_days <= EXPLORATORY_MAX_DAYS:
        return CoachingTier.EXPLORATORY
    if tenure_days <= BALANCED_MAX_DAYS:
        return CoachingTier.BALANCED
    return CoachingTier.DIRECTIVE


def _fmt_number(value) -> str:
    """Render 7.0 as '7' and 6.5 as '6.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def lifestyle_block(lifestyle: LifestyleSnapshot) -> str:
    return f"""
USER'S CURRENT LIFESTYLE DATA:
- Daily Steps: {_fmt_number(lifestyle.steps)}
- Exercise Minutes Today: {_fmt_number(lifestyle.exercise_minutes)}
- Sleep Last Night: {_fmt_number(lifestyle.sleep_hours)} hours

Consider this context when providing advice. For example:
- If steps are low, encourage more walking
- If sleep is insufficient, mention recovery importance
- If exercise is high, acknowledge their effort
"""


def build_system_prompt(personality, tenure_days: int, lifestyle: LifestyleSnapshot) -> str:
    """Build the generation instruction for one exchange.

    Args:
        personality: PersonalityProfile or its stored string id. Unknown ids
            fall back to the encouragement seeker block.
        tenure_days: Whole days since the user's first recorded use.
        lifestyle: The user's latest lifestyle snapshot.
    """
    return (
        ROLE_BLOCK
        + personality_block(personality)
        + TIER_BLOCKS[coaching_tier(tenure_days)]
        + lifestyle_block(lifestyle)
        + RESPONSE_FORMAT_BLOCK
    )
