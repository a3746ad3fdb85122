"""
Unit Tests for the Learner Data Manager

Tests in-memory reads, quiz aggregation and Supabase failure handling.
"""

import pytest
import sys
import os
from unittest.mock import MagicMock

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "course_mentor", "src"))

from course_mentor.learner_context import aggregate
from course_mentor.learner_data_manager import LearnerDataManager, stars_for_score, summarize_quiz_results


class TestSummarizeQuizResults:
    """Test suite for summarize_quiz_results()."""

    def test_empty(self):
        """Test no quiz rows give zeroed stats."""
        assert summarize_quiz_results([]) == {
            "average_score": 0.0, "total_quizzes": 0, "total_credits": 0, "stars": 0,
        }

    def test_aggregates_rows(self):
        """Test quiz rows are averaged and credits summed."""
        stats = summarize_quiz_results([
            {"score": 95, "credits_earned": 10},
            {"score": 72, "credits_earned": 5},
            {"score": 50, "credits_earned": 0, "stars": 0},
            {"score": "n/a"},
        ])
        assert stats["total_quizzes"] == 3
        assert stats["average_score"] == pytest.approx(72.333, rel=1e-3)
        assert stats["total_credits"] == 15
        assert stats["stars"] == 5

    @pytest.mark.parametrize("score,stars", [(100, 3), (90, 3), (89, 2), (70, 2), (69, 1), (60, 1), (59, 0)])
    def test_star_bands(self, score, stars):
        """Test scores map onto star bands."""
        assert stars_for_score(score) == stars


class TestInMemoryStore:
    """Test suite for the in-memory fallback store."""

    @pytest.fixture
    def manager(self):
        manager = LearnerDataManager()
        manager.add_profile("u1", {"name": "Kai", "interests": ["rust"], "learning_style": "reading"})
        manager.add_quiz_result("u1", 80, credits_earned=10)
        manager.add_quiz_result("u1", 90, credits_earned=20)
        manager.add_consistency_day("u1", "2024-03-01")
        manager.add_consistency_day("u1", "2024-03-01")
        manager.add_consistency_day("u1", "2024-03-02")
        manager.add_course("rust-1", {"title": "Rust", "materials": [{"title": "Ownership"}], "question_count": 6})
        return manager

    @pytest.mark.asyncio
    async def test_load_snapshots_feeds_aggregator(self, manager):
        """Test loaded snapshots aggregate into a full context."""
        snapshots = await manager.load_snapshots("u1", "rust-1")
        ctx = aggregate(snapshots, "rust-1")

        assert ctx.learner.name == "Kai"
        assert ctx.performance.average_score == 85
        assert ctx.performance.total_credits == 30
        assert ctx.performance.stars == 5
        assert ctx.consistency.active_day_count == 2
        assert ctx.course.title == "Rust"
        assert ctx.course.question_count == 6

    @pytest.mark.asyncio
    async def test_unknown_user_and_course(self, manager):
        """Test unknown ids read as None."""
        snapshots = await manager.load_snapshots("nobody", "missing")
        assert snapshots.profile is None
        assert snapshots.courses is None
        ctx = aggregate(snapshots, "missing")
        assert ctx.learner.name == "there"
        assert ctx.course is None

    @pytest.mark.asyncio
    async def test_anonymous(self, manager):
        """Test an anonymous session loads empty snapshots."""
        snapshots = await manager.load_snapshots(None)
        assert snapshots.profile is None
        assert snapshots.performance is None


class TestSupabaseStore:
    """Test suite for Supabase-backed reads."""

    @pytest.fixture
    def supabase(self):
        return MagicMock()

    @pytest.mark.asyncio
    async def test_read_failure_returns_none(self, supabase):
        """Test a failing Supabase query reads as None."""
        supabase.table.side_effect = RuntimeError("connection refused")
        manager = LearnerDataManager(supabase_client=supabase)

        assert await manager.get_profile("u1") is None
        assert await manager.get_performance_stats("u1") is None
        assert await manager.get_consistency_calendar("u1") is None
        assert await manager.get_course_with_videos("c1") is None

        ctx = aggregate(await manager.load_snapshots("u1", "c1"), "c1")
        assert ctx.performance.total_quizzes == 0

    @pytest.mark.asyncio
    async def test_profile_query(self, supabase):
        """Test the profile read queries the profiles table."""
        result = MagicMock(data=[{"id": "u1", "name": "Noor"}])
        supabase.table.return_value.select.return_value.eq.return_value.execute.return_value = result
        manager = LearnerDataManager(supabase_client=supabase)

        assert await manager.get_profile("u1") == {"id": "u1", "name": "Noor"}
        supabase.table.assert_called_with("profiles")
