"""
Learner Data Manager

Read-only access to the collaborator stores the mentor draws context from:
learner profile, quiz analytics, consistency calendar and course catalog.

Backed by Supabase tables when a client is configured, with an in-memory
fallback otherwise. Every read failure is logged and returned as None
("no data"); the context aggregator turns that into defaults.
"""

import logging
from typing import Any, Dict, List, Optional

from course_mentor.learner_context import CollaboratorSnapshots

logger = logging.getLogger(__name__)

# Stars awarded per quiz attempt by score
STAR_BANDS = ((90, 3), (70, 2), (60, 1))


def stars_for_score(score: float) -> int:
    for threshold, stars in STAR_BANDS:
        if score >= threshold:
            return stars
    return 0


def summarize_quiz_results(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Aggregate quiz attempt rows into performance stats.

    Rows carry `score` (0-100) and optionally `credits_earned` and `stars`;
    stars are derived from the score when the column is absent.

    Returns:
        Dict with average_score, total_quizzes, total_credits, stars
    """
    scores = []
    credits = 0
    stars = 0
    for row in rows:
        try:
            score = float(row.get("score") or 0)
        except (TypeError, ValueError):
            continue
        scores.append(score)
        credits += int(row.get("credits_earned") or 0)
        stars += int(row["stars"]) if row.get("stars") is not None else stars_for_score(score)

    return {
        "average_score": sum(scores) / len(scores) if scores else 0.0,
        "total_quizzes": len(scores),
        "total_credits": credits,
        "stars": stars,
    }


class LearnerDataManager:
    """
    Collaborator gateway for the mentor.

    Tables: profiles, quiz_results, consistency_days, courses, quiz_questions.
    """

    def __init__(self, supabase_client=None):
        """
        Initialize LearnerDataManager.

        Args:
            supabase_client: Supabase client instance (optional)
        """
        self.supabase = supabase_client
        self.use_supabase = supabase_client is not None

        # In-memory fallback stores
        self._profiles: Dict[str, Dict[str, Any]] = {}
        self._quiz_results: Dict[str, List[Dict[str, Any]]] = {}
        self._consistency_days: Dict[str, List[str]] = {}
        self._courses: Dict[str, Dict[str, Any]] = {}

        if not self.use_supabase:
            logger.warning("⚠️ [LearnerDataManager] Supabase not available, using in-memory fallback")

    # ==================== In-memory seeding ====================

    def add_profile(self, user_id: str, profile: Dict[str, Any]):
        self._profiles[user_id] = dict(profile)

    def add_quiz_result(self, user_id: str, score: float, credits_earned: int = 0, course_id: Optional[str] = None):
        self._quiz_results.setdefault(user_id, []).append({
            "course_id": course_id,
            "score": score,
            "credits_earned": credits_earned,
        })

    def add_consistency_day(self, user_id: str, day: str):
        days = self._consistency_days.setdefault(user_id, [])
        if day not in days:
            days.append(day)

    def add_course(self, course_id: str, course: Dict[str, Any]):
        self._courses[course_id] = dict(course, id=course_id)

    # ==================== Reads ====================

    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the learner profile (name, interests, goals, learning_style, skill_level).

        Args:
            user_id: User UUID

        Returns:
            Profile dict or None if not found
        """
        if not self.use_supabase:
            return self._profiles.get(user_id)

        try:
            result = self.supabase.table('profiles') \
                .select('*') \
                .eq('id', user_id) \
                .execute()

            if result.data:
                return result.data[0]
            return None
        except Exception as e:
            logger.error(f"❌ [LearnerDataManager] Error loading profile: {e}")
            return None

    async def get_performance_stats(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Aggregate the learner's quiz results.

        Args:
            user_id: User UUID

        Returns:
            Dict with average_score, total_quizzes, total_credits, stars, or None on failure
        """
        if not self.use_supabase:
            return summarize_quiz_results(self._quiz_results.get(user_id, []))

        try:
            result = self.supabase.table('quiz_results') \
                .select('score, credits_earned, stars') \
                .eq('user_id', user_id) \
                .execute()
            return summarize_quiz_results(result.data or [])
        except Exception as e:
            logger.error(f"❌ [LearnerDataManager] Error loading quiz results: {e}")
            return None

    async def get_consistency_calendar(self, user_id: str) -> Optional[List[str]]:
        """
        Get the days (ISO dates) with recorded engagement.

        Args:
            user_id: User UUID

        Returns:
            List of day strings, or None on failure
        """
        if not self.use_supabase:
            return list(self._consistency_days.get(user_id, []))

        try:
            result = self.supabase.table('consistency_days') \
                .select('day') \
                .eq('user_id', user_id) \
                .order('day', desc=False) \
                .execute()
            return [row["day"] for row in (result.data or []) if row.get("day")]
        except Exception as e:
            logger.error(f"❌ [LearnerDataManager] Error loading consistency calendar: {e}")
            return None

    async def get_course_with_videos(self, course_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a course record with its materials, videos and question count.

        Args:
            course_id: Course identifier

        Returns:
            Course dict or None if not found
        """
        if not self.use_supabase:
            return self._courses.get(course_id)

        try:
            result = self.supabase.table('courses') \
                .select('*') \
                .eq('id', course_id) \
                .execute()

            if not result.data:
                logger.warning(f"⚠️ [LearnerDataManager] Course {course_id} not found")
                return None
            course = dict(result.data[0])

            questions = self.supabase.table('quiz_questions') \
                .select('id', count='exact') \
                .eq('course_id', course_id) \
                .execute()
            course["question_count"] = questions.count if questions.count is not None else len(questions.data or [])
            return course
        except Exception as e:
            logger.error(f"❌ [LearnerDataManager] Error loading course {course_id}: {e}")
            return None

    async def load_snapshots(self, user_id: Optional[str], course_id: Optional[str] = None) -> CollaboratorSnapshots:
        """
        Fetch every collaborator value for a session.

        Args:
            user_id: User UUID (None yields empty snapshots)
            course_id: Course in focus, if any

        Returns:
            CollaboratorSnapshots (fields are None where data is unavailable)
        """
        snapshots = CollaboratorSnapshots()
        if user_id:
            snapshots.profile = await self.get_profile(user_id)
            snapshots.performance = await self.get_performance_stats(user_id)
            snapshots.consistency = await self.get_consistency_calendar(user_id)

        if course_id:
            course = await self.get_course_with_videos(course_id)
            if course is not None:
                snapshots.courses = {course_id: course}

        logger.info(
            f"📊 [LearnerDataManager] Snapshots for {str(user_id)[:20]}: "
            f"profile={'yes' if snapshots.profile else 'no'}, course={course_id if snapshots.courses else None}"
        )
        return snapshots
