"""
Learner Context

Snapshot data models and the aggregator that folds the collaborator stores
(profile, analytics, consistency calendar, course catalog) into a single
DecisionContext for one mentor response.

Aggregation never fails: anything missing or malformed degrades to the
neutral defaults below.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_NAME = "there"
DEFAULT_LEARNING_STYLE = "adaptive"

DIFFICULTY_LABELS = ["", "beginner", "intermediate", "advanced", "expert", "master"]


@dataclass(frozen=True)
class LearnerSnapshot:
    """Learner profile as seen by the mentor."""
    name: str = DEFAULT_NAME
    learning_style: str = DEFAULT_LEARNING_STYLE
    goals: Tuple[str, ...] = ()
    interests: Tuple[str, ...] = ()
    skill_level: Optional[str] = None


@dataclass(frozen=True)
class PerformanceSnapshot:
    """Quiz analytics. Every field is 0 when analytics are unavailable."""
    average_score: float = 0.0  # 0-100
    total_quizzes: int = 0
    total_credits: int = 0
    stars: int = 0


@dataclass(frozen=True)
class ConsistencySnapshot:
    """Number of days with recorded engagement."""
    active_day_count: int = 0


@dataclass(frozen=True)
class CourseMaterial:
    title: str
    content: str = ""


@dataclass(frozen=True)
class CourseVideo:
    title: str
    description: str = ""
    url: Optional[str] = None


@dataclass(frozen=True)
class CourseFocus:
    """The course the session is scoped to."""
    title: str
    description: str = ""
    difficulty: int = 0  # 0-5
    credits: int = 0
    recommended_for: Tuple[str, ...] = ()
    materials: Tuple[CourseMaterial, ...] = ()
    videos: Tuple[CourseVideo, ...] = ()
    question_count: int = 0
    course_id: Optional[str] = None

    @property
    def difficulty_label(self) -> str:
        """Lower-case difficulty name ("intermediate" when unset)."""
        if 0 <= self.difficulty < len(DIFFICULTY_LABELS):
            return DIFFICULTY_LABELS[self.difficulty] or "intermediate"
        return "intermediate"

    def summary(self) -> str:
        """Compact text description, used for diagnostics."""
        lines = [f"Course: {self.title}", f"Description: {self.description}"]
        if self.materials:
            lines.append(f"Materials: {', '.join(m.title for m in self.materials)}")
        if self.videos:
            lines.append(f"Videos: {', '.join(v.title for v in self.videos)}")
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class DecisionContext:
    """Consolidated, default-filled learner state for one response."""
    learner: LearnerSnapshot = field(default_factory=LearnerSnapshot)
    performance: PerformanceSnapshot = field(default_factory=PerformanceSnapshot)
    consistency: ConsistencySnapshot = field(default_factory=ConsistencySnapshot)
    course: Optional[CourseFocus] = None


@dataclass
class CollaboratorSnapshots:
    """
    Already-fetched values from the collaborator stores.

    Any field may be None ("not loaded yet"). Records may be mappings with
    camelCase or snake_case keys, or plain objects exposing attributes.
    """
    profile: Any = None
    performance: Any = None
    consistency: Any = None
    courses: Optional[Mapping[str, Any]] = None


# ==================== Field helpers ====================

def _field(source: Any, *names: str, default: Any = None) -> Any:
    """Read the first present field from a mapping or object."""
    if source is None:
        return default
    for name in names:
        if isinstance(source, Mapping):
            if name in source and source[name] is not None:
                return source[name]
        else:
            value = getattr(source, name, None)
            if value is not None:
                return value
    return default


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return default if number != number else number  # nan


def _as_int(value: Any, default: int = 0) -> int:
    number = _as_float(value, float(default))
    try:
        return max(0, int(number))
    except (OverflowError, ValueError):  # inf / nan
        return default


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _as_strings(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    try:
        return tuple(str(item).strip() for item in value if item is not None and str(item).strip())
    except TypeError:
        return ()


def _items(value: Any) -> Tuple[Any, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def _count(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return _as_int(value)
    try:
        return len(value)
    except TypeError:
        return 0


# ==================== Snapshot builders ====================

def build_learner(profile: Any) -> LearnerSnapshot:
    if profile is None:
        return LearnerSnapshot()
    return LearnerSnapshot(
        name=_as_text(_field(profile, "name", "full_name", "fullName"), DEFAULT_NAME),
        learning_style=_as_text(_field(profile, "learning_style", "learningStyle"), DEFAULT_LEARNING_STYLE),
        goals=_as_strings(_field(profile, "goals")),
        interests=_as_strings(_field(profile, "interests")),
        skill_level=_as_text(_field(profile, "skill_level", "skillLevel")) or None,
    )


def build_performance(stats: Any) -> PerformanceSnapshot:
    if stats is None:
        return PerformanceSnapshot()
    average = _as_float(_field(stats, "average_score", "averageScore"))
    return PerformanceSnapshot(
        average_score=min(100.0, max(0.0, average)),
        total_quizzes=_as_int(_field(stats, "total_quizzes", "totalQuizzes")),
        total_credits=_as_int(_field(stats, "total_credits", "totalCredits")),
        stars=_as_int(_field(stats, "stars")),
    )


def build_consistency(calendar: Any) -> ConsistencySnapshot:
    if isinstance(calendar, ConsistencySnapshot):
        return calendar
    return ConsistencySnapshot(active_day_count=_count(calendar))


def _build_material(item: Any) -> Optional[CourseMaterial]:
    title = _as_text(_field(item, "title"))
    if not title:
        return None
    return CourseMaterial(title=title, content=_as_text(_field(item, "content")))


def _build_video(item: Any) -> Optional[CourseVideo]:
    title = _as_text(_field(item, "title"))
    if not title:
        return None
    return CourseVideo(
        title=title,
        description=_as_text(_field(item, "description")),
        url=_as_text(_field(item, "url")) or None,
    )


def build_course(record: Any, course_id: Optional[str] = None) -> Optional[CourseFocus]:
    if record is None:
        return None
    if isinstance(record, CourseFocus):
        return record

    title = _as_text(_field(record, "title"))
    if not title:
        logger.warning(f"⚠️ [LearnerContext] Course {course_id!r} has no title, ignoring focus")
        return None

    materials = tuple(m for m in map(_build_material, _items(_field(record, "materials"))) if m)
    videos = tuple(
        v for v in map(_build_video, _items(_field(record, "videos", "youtube_videos", "youtubeVideos"))) if v
    )
    question_count = _field(record, "question_count", "questionCount")
    if question_count is None:
        question_count = _count(_field(record, "questions"))

    return CourseFocus(
        title=title,
        description=_as_text(_field(record, "description")),
        difficulty=min(5, _as_int(_field(record, "difficulty"))),
        credits=_as_int(_field(record, "credits")),
        recommended_for=_as_strings(_field(record, "recommended_for", "recommendedFor")),
        materials=materials,
        videos=videos,
        question_count=_as_int(question_count),
        course_id=course_id or _as_text(_field(record, "id")) or None,
    )


def aggregate(
    snapshots: Optional[CollaboratorSnapshots],
    focused_course_id: Optional[str] = None,
) -> DecisionContext:
    """
    Build a DecisionContext from collaborator snapshots.

    Performs no I/O. Missing snapshots produce default sub-objects; an unknown
    course id simply leaves the context unscoped.

    Args:
        snapshots: Current collaborator values (None means nothing loaded)
        focused_course_id: Course the session is scoped to, if any

    Returns:
        DecisionContext
    """
    snapshots = snapshots or CollaboratorSnapshots()

    course = None
    if focused_course_id and snapshots.courses:
        course = build_course(snapshots.courses.get(focused_course_id), focused_course_id)

    return DecisionContext(
        learner=build_learner(snapshots.profile),
        performance=build_performance(snapshots.performance),
        consistency=build_consistency(snapshots.consistency),
        course=course,
    )
