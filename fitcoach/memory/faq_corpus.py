"""Curated fitness FAQ corpus. Read-only at runtime."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FAQEntry:
    question: str
    answer: str


FITNESS_FAQS: tuple[FAQEntry, ...] = (
    FAQEntry(
        question="What are the best exercises for beginners?",
        answer=(
            "Start with bodyweight exercises like squats, push-ups, planks, and walking. "
            "These build foundational strength without equipment."
        ),
    ),
    FAQEntry(
        question="How often should I work out?",
        answer=(
            "Aim for 3-5 days per week with rest days in between. "
            "Consistency matters more than intensity when starting out."
        ),
    ),
    FAQEntry(
        question="What should I eat before a workout?",
        answer=(
            "Have a light meal with carbs and protein 1-2 hours before. "
            "Examples: banana with peanut butter, oatmeal, or a small smoothie."
        ),
    ),
    FAQEntry(
        question="How do I stay motivated?",
        answer=(
            "Set realistic goals, track progress, find a workout buddy, and celebrate small wins. "
            "Make fitness enjoyable, not a chore."
        ),
    ),
    FAQEntry(
        question="What are good warm-up exercises?",
        answer=(
            "Dynamic stretches, light cardio (5-10 min), arm circles, leg swings, "
            "and mobility work prepare your body for exercise."
        ),
    ),
    FAQEntry(
        question="How much water should I drink?",
        answer=(
            "Aim for 8-10 glasses daily, more if exercising. "
            "Drink before, during, and after workouts to stay hydrated."
        ),
    ),
    FAQEntry(
        question="How important is sleep for fitness?",
        answer=(
            "7-9 hours is crucial. Sleep aids muscle recovery, hormone regulation, "
            "and energy levels for workouts."
        ),
    ),
    FAQEntry(
        question="Can I work out every day?",
        answer=(
            "You can do light activity daily, but intense workouts need rest days. "
            "Listen to your body and avoid overtraining."
        ),
    ),
    FAQEntry(
        question="What's the best time to work out?",
        answer=(
            "The best time is when you'll be consistent. Morning, afternoon, or evening - "
            "choose what fits your schedule and energy levels."
        ),
    ),
    FAQEntry(
        question="How do I prevent muscle soreness?",
        answer=(
            "Proper warm-up, gradual progression, stretching, adequate hydration, "
            "and rest help minimize soreness."
        ),
    ),
)
