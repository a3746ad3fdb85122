"""
Tone Classifier

Maps a learner message (plus a performance snapshot) onto the register the
mentor should answer in. Pure keyword/threshold matching, no model calls.
"""

from enum import Enum
from typing import Iterable, Optional

from course_mentor.learner_context import PerformanceSnapshot

# Shared with the response synthesizer's struggle branch
STRUGGLE_KEYWORDS = (
    "stuck",
    "difficult",
    "hard",
    "struggling",
    "confused",
    "give up",
    "frustrated",
)

EXPLANATORY_CUES = (
    "what is",
    "how does",
    "explain",
    "why",
    "understand",
    "concept",
    "mean",
    "definition",
)

LOW_SCORE_THRESHOLD = 60


class Tone(str, Enum):
    """Rhetorical register of a mentor response."""
    MOTIVATIONAL = "motivational"
    EXPLANATORY = "explanatory"
    GUIDING = "guiding"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test against a keyword set."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def is_struggling(message: str) -> bool:
    return contains_any(message, STRUGGLE_KEYWORDS)


def classify(message: str, perf: Optional[PerformanceSnapshot] = None) -> Tone:
    """
    Classify the tone a response to `message` should take.

    Rules (first match wins):
    1. Struggle keyword in the message -> motivational
    2. At least one quiz taken with average score below 60 -> motivational
    3. Explanatory cue in the message -> explanatory
    4. Otherwise -> guiding

    Args:
        message: Raw learner input
        perf: PerformanceSnapshot (None is treated as "no quizzes taken")

    Returns:
        Tone
    """
    if is_struggling(message):
        return Tone.MOTIVATIONAL

    if perf is not None and perf.total_quizzes > 0 and perf.average_score < LOW_SCORE_THRESHOLD:
        return Tone.MOTIVATIONAL

    if contains_any(message, EXPLANATORY_CUES):
        return Tone.EXPLANATORY

    return Tone.GUIDING
