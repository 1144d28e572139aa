"""Response structurer: recover workout plans and tip lists from coach replies.

Works in two passes:
    1. classify_line() tags every line as DAY_HEADER, LIST_ITEM, NOTE_LABEL,
       TIPS_HEADING or PLAIN.
    2. One assembly pass turns the tagged lines into a WorkoutPlan, else a
       TipsList, else PlainText.

classify_content() is total: any input, including "" or whitespace, yields
a result. Ambiguous text always degrades to PlainText with the original
text untouched.
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import ClassVar

logger = logging.getLogger(__name__)

MIN_EXERCISE_NAME_CHARS = 2
MIN_TIP_CHARS = 6
MIN_TIPS = 2

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_DAY_TOKEN = r"(?:day\s+\d+|" + "|".join(DAY_NAMES) + r")"

# "**Monday: Chest and Triceps**", "Day 1 - Upper Body", "Tuesday", "**Monday**: Legs"
_DAY_HEADER_RE = re.compile(
    r"^\*{0,2}(?P<day>" + _DAY_TOKEN + r")\*{0,2}"
    r"(?:\s*[-:]\s*(?P<focus>[^*]+?))?"
    r"\s*\*{0,2}\s*:?$",
    re.IGNORECASE,
)

# "1. ...", "- ...", "* ...", "• ..."  ("**bold**" is emphasis, not a bullet)
_LIST_ITEM_RE = re.compile(r"^(?:\d+\.|\*(?!\*)|-|•)\s*(?P<content>.+)$")

# "Note: ...", "**Tip:** ...", "Remember - ...", "Cool-down: ..."
_NOTE_LABEL_RE = re.compile(
    r"^\*{0,2}(?P<label>notes?|tips?|remember|cool[- ]?down)\*{0,2}\s*[:\-–]\s*\*{0,2}\s*(?P<note>.+)$",
    re.IGNORECASE,
)

_TIPS_WORD_RE = re.compile(r"\btips?\b", re.IGNORECASE)
_HEADING_DECORATION_RE = re.compile(r"^[#\s*]+|[\s*]+$")
MAX_HEADING_WORDS = 8

# Name runs up to the first "-", ":" or "(", so "Push-ups" yields "Push".
_EXERCISE_NAME_RE = re.compile(r"^(?P<name>[^-:(]+)")
_SETS_RE = re.compile(r"(\d+)\s*sets?\b", re.IGNORECASE)
_REPS_RE = re.compile(r"(?:\b(?:x|of)\s*)?(\d+(?:[-–]\d+)?)\s*reps?\b", re.IGNORECASE)
_COMPACT_SETS_REPS_RE = re.compile(
    r"\b(\d+)\s*[x×]\s*(\d+(?:-\d+)?)\b(?!\s*(?:minutes?|mins?|seconds?|secs?)\b)",
    re.IGNORECASE,
)
_DURATION_RE = re.compile(
    r"(\d+(?:[-–]\d+)?)\s*(?:minutes?|mins?|seconds?|secs?)\b",
    re.IGNORECASE,
)
_EXERCISE_NOTE_RE = re.compile(r"\(([^)]+)\)|note:\s*(.+)", re.IGNORECASE)


# -- Content types -----------------------------------------------------------

@dataclass
class Exercise:
    name: str
    sets: str | None = None
    reps: str | None = None
    duration: str | None = None
    notes: str | None = None


@dataclass
class DayPlan:
    day: str
    exercises: list[Exercise]
    focus: str | None = None
    notes: str | None = None


@dataclass
class StructuredContent:
    """Base for the three renderable shapes. `text` is always the raw reply."""
    type: ClassVar[str] = "text"
    text: str

    def to_dict(self) -> dict:
        return {"type": self.type, **asdict(self)}


@dataclass
class PlainText(StructuredContent):
    type: ClassVar[str] = "text"


@dataclass
class WorkoutPlan(StructuredContent):
    type: ClassVar[str] = "workout_plan"
    days: list[DayPlan] = field(default_factory=list)


@dataclass
class TipsList(StructuredContent):
    type: ClassVar[str] = "tips_list"
    tips: list[str] = field(default_factory=list)
    title: str | None = None


# -- Pass 1: line classification ----------------------------------------------

class LineKind(Enum):
    DAY_HEADER = "day_header"
    LIST_ITEM = "list_item"
    NOTE_LABEL = "note_label"
    TIPS_HEADING = "tips_heading"
    PLAIN = "plain"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    text: str                    # the stripped line
    listed: bool = False         # started with a list marker
    item: str | None = None      # text after the list marker
    day: str | None = None
    focus: str | None = None
    note: str | None = None
    title: str | None = None


def _clean_heading(text: str) -> str:
    return _HEADING_DECORATION_RE.sub("", text).rstrip(":").strip()


def _is_tips_heading(text: str) -> bool:
    if not _TIPS_WORD_RE.search(text):
        return False
    bare = _HEADING_DECORATION_RE.sub("", text)
    return bare.endswith(":") or len(bare.split()) <= MAX_HEADING_WORDS


def classify_line(line: str) -> ClassifiedLine:
    """Tag a single line. Checked in order: day header, list item / note, note, tips heading."""
    text = line.strip()
    if not text:
        return ClassifiedLine(LineKind.PLAIN, text)

    header = _DAY_HEADER_RE.match(text)
    if header:
        focus = header.group("focus")
        return ClassifiedLine(
            LineKind.DAY_HEADER,
            text,
            day=" ".join(header.group("day").split()),
            focus=focus.strip() if focus and focus.strip() else None,
        )

    listed = _LIST_ITEM_RE.match(text)
    item = listed.group("content").strip() if listed else None
    body = item if listed else text

    note = _NOTE_LABEL_RE.match(body)
    if note:
        return ClassifiedLine(
            LineKind.NOTE_LABEL, text, listed=bool(listed), item=item,
            note=note.group("note").strip(),
        )

    if listed:
        return ClassifiedLine(LineKind.LIST_ITEM, text, listed=True, item=item)

    if _is_tips_heading(text):
        return ClassifiedLine(LineKind.TIPS_HEADING, text, title=_clean_heading(text))

    return ClassifiedLine(LineKind.PLAIN, text)


def classify_lines(text: str) -> list[ClassifiedLine]:
    return [classify_line(line) for line in text.splitlines()]


# -- Pass 2: assembly -----------------------------------------------------------

def parse_exercise(content: str) -> Exercise | None:
    """Pull name, sets, reps, duration and notes out of one list item.

    Returns None when no usable name precedes the first separator.
    """
    name_match = _EXERCISE_NAME_RE.match(content)
    if not name_match:
        return None
    name = name_match.group("name").strip()
    if len(name) < MIN_EXERCISE_NAME_CHARS:
        return None

    exercise = Exercise(name=name)

    sets = _SETS_RE.search(content)
    if sets:
        exercise.sets = sets.group(1)

    reps = _REPS_RE.search(content)
    if reps:
        exercise.reps = reps.group(1).replace("–", "-")

    if exercise.sets is None and exercise.reps is None:
        compact = _COMPACT_SETS_REPS_RE.search(content)
        if compact:
            exercise.sets, exercise.reps = compact.group(1), compact.group(2)

    duration = _DURATION_RE.search(content)
    if duration:
        exercise.duration = duration.group(0)

    note = _EXERCISE_NOTE_RE.search(content)
    if note:
        exercise.notes = (note.group(1) or note.group(2)).strip()

    return exercise


def assemble_workout(lines: list[ClassifiedLine]) -> list[DayPlan]:
    """Group lines under day headers; keep only days with at least one exercise."""
    days: list[DayPlan] = []
    current: DayPlan | None = None

    def flush():
        if current is not None and current.exercises:
            days.append(current)

    for line in lines:
        if line.kind is LineKind.DAY_HEADER:
            flush()
            current = DayPlan(day=line.day, exercises=[], focus=line.focus)
        elif current is None:
            continue
        elif line.kind is LineKind.LIST_ITEM:
            exercise = parse_exercise(line.item)
            if exercise:
                current.exercises.append(exercise)
        elif line.kind is LineKind.NOTE_LABEL and current.notes is None:
            current.notes = line.note
    flush()
    return days


def assemble_tips(lines: list[ClassifiedLine]) -> tuple[str | None, list[str]]:
    """Title from the first tips heading; tips from list items that follow it.

    Without a heading every list item is a candidate.
    """
    title = None
    start = 0
    for i, line in enumerate(lines):
        if line.kind is LineKind.TIPS_HEADING:
            title, start = line.title, i + 1
            break

    tips = []
    for line in lines[start:]:
        if line.listed and line.item and len(line.item) >= MIN_TIP_CHARS:
            tips.append(line.item)
    return title, tips


def classify_content(raw_text: str) -> StructuredContent:
    """Classify a reply as workout_plan, tips_list or text (in that priority)."""
    text = raw_text if raw_text is not None else ""
    lines = classify_lines(text)

    days = assemble_workout(lines)
    if days:
        logger.info("Found workout plan with %d days", len(days))
        return WorkoutPlan(text=text, days=days)

    title, tips = assemble_tips(lines)
    if len(tips) >= MIN_TIPS:
        logger.info("Found tips list with %d tips", len(tips))
        return TipsList(text=text, tips=tips, title=title)

    return PlainText(text=text)


def has_structured_content(text: str) -> bool:
    return classify_content(text).type != PlainText.type
