"""Safety filter: refuse medical, injury and medication questions.

Best-effort keyword screening. Missing a medical question is acceptable;
the system prompt repeats the same rules for the model as a second line.
"""

MEDICAL_KEYWORDS = (
    "disease", "diabetes", "heart disease", "cancer", "injury", "fracture",
    "ligament", "tear", "medication", "medicine", "drug", "supplement",
    "pill", "prescription", "diagnosis", "symptom", "pain", "chronic",
)

REFUSAL_MESSAGE = """\
I appreciate your question, but I'm not able to provide advice on medical conditions, injuries, or medications.

As a fitness companion, I'm here to help with:
✓ Workout plans and exercises
✓ Fitness tips and techniques
✓ Motivation and consistency
✓ General wellness guidance

For concerns about injuries, diseases, or medical conditions, I strongly recommend consulting with:
• A licensed physician or healthcare provider
• A certified physical therapist
• A registered sports medicine specialist

Is there a general fitness topic I can help you with instead?"""


def is_restricted(text: str) -> bool:
    """True if the text mentions any restricted medical term (substring match)."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in MEDICAL_KEYWORDS)


def matched_keywords(text: str) -> list[str]:
    """Return the restricted terms found in text, in keyword order."""
    lowered = (text or "").lower()
    return [keyword for keyword in MEDICAL_KEYWORDS if keyword in lowered]
