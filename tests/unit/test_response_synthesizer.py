"""
Unit Tests for the Response Synthesizer

Tests rule order, per-branch tone/resources and the documented scenarios.
"""

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "course_mentor", "src"))

from course_mentor.learner_context import (
    ConsistencySnapshot,
    CourseFocus,
    CourseMaterial,
    CourseVideo,
    DecisionContext,
    LearnerSnapshot,
    PerformanceSnapshot,
)
from course_mentor.resource_gateway import ResourceFetchGateway, ResourceType
from course_mentor.response_synthesizer import ResponseSynthesizer, resolve_video_topic
from course_mentor.tone_classifier import Tone


class RecordingProvider:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.queries = []

    def search(self, query, max_results=5):
        self.queries.append((query, max_results))
        if self.error:
            raise self.error
        return self.results


BAND_HEADERS = {
    "mastery": "Outstanding Performance",
    "strong": "Excellent Progress",
    "developing": "Solid Effort",
    "encouragement": "Every Expert Started Here",
}


def make_context(average=0.0, quizzes=0, credits=0, stars=0, days=0, course=None, **learner):
    return DecisionContext(
        learner=LearnerSnapshot(**{"name": "Sam", **learner}),
        performance=PerformanceSnapshot(average_score=average, total_quizzes=quizzes, total_credits=credits, stars=stars),
        consistency=ConsistencySnapshot(active_day_count=days),
        course=course,
    )


@pytest.fixture
def course():
    return CourseFocus(
        title="Rust Systems",
        description="Memory-safe systems programming",
        difficulty=3,
        credits=40,
        recommended_for=("backend developers",),
        materials=(CourseMaterial("Ownership", "..."), CourseMaterial("Borrowing", "...")),
        videos=(
            CourseVideo("Ownership in 10 minutes", "Quick intro", "https://youtu.be/1"),
            CourseVideo("Lifetimes", "Deep dive", "https://youtu.be/2"),
        ),
        question_count=12,
        course_id="rust-101",
    )


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def synthesizer(provider):
    return ResponseSynthesizer(ResourceFetchGateway(provider))


class TestScenarios:
    """End-to-end synthesizer scenarios."""

    @pytest.mark.asyncio
    async def test_stuck_learner_gets_struggle_branch(self, synthesizer):
        """Test a stuck learner gets the struggle reply."""
        payload = await synthesizer.synthesize("I'm stuck on this", make_context(average=40, quizzes=5))
        assert payload.tone == Tone.MOTIVATIONAL
        assert payload.rule == "struggle"
        assert payload.resources == ()
        assert "5 quizzes" in payload.text

    @pytest.mark.asyncio
    async def test_what_is_with_course_gets_deep_dive(self, synthesizer, course):
        """Test a concept question in a course gets the deep dive."""
        payload = await synthesizer.synthesize("what is recursion", make_context(course=course))
        assert payload.tone == Tone.EXPLANATORY
        assert payload.rule == "course_deep_dive"
        assert [r.type for r in payload.resources] == [ResourceType.VIDEO, ResourceType.MATERIAL, ResourceType.QUIZ]
        assert "Deep Dive: Rust Systems" in payload.text
        assert "**Level:** Advanced" in payload.text

    @pytest.mark.asyncio
    async def test_python_videos_with_empty_results_and_no_course(self, synthesizer, provider):
        """Test an empty video search without a course asks for a topic."""
        payload = await synthesizer.synthesize("show me python videos", make_context())
        assert payload.rule == "video"
        assert payload.tone == Tone.GUIDING
        assert payload.resources == ()
        assert "Video Tutorial Search" in payload.text
        assert provider.queries == [("python tutorial programming", 5)]


class TestProgressBranch:
    """Test suite for the progress rule."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", range(0, 101))
    async def test_every_score_maps_to_exactly_one_band(self, synthesizer, score):
        """Test every score lands in exactly one progress band."""
        payload = await synthesizer.synthesize("how am i doing?", make_context(average=score, quizzes=3))

        matched = [band for band, header in BAND_HEADERS.items() if header in payload.text]
        if score >= 90:
            expected = "mastery"
        elif score >= 75:
            expected = "strong"
        elif score >= 60:
            expected = "developing"
        else:
            expected = "encouragement"
        assert matched == [expected]
        assert payload.tone == Tone.MOTIVATIONAL
        assert f"**{score}%**" in payload.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [0, 45, 70, 95, 100])
    async def test_no_quizzes_gives_onboarding(self, synthesizer, score):
        """Test a learner without quizzes gets the onboarding reply."""
        payload = await synthesizer.synthesize("show my progress", make_context(average=score, quizzes=0))
        assert "Welcome to your learning journey" in payload.text
        assert not any(header in payload.text for header in BAND_HEADERS.values())
        assert payload.tone == Tone.GUIDING
        assert [r.title for r in payload.resources] == ["Getting Started Videos"]

    @pytest.mark.asyncio
    async def test_band_resources(self, synthesizer):
        """Test each band attaches its resource."""
        mastery = await synthesizer.synthesize("stats", make_context(average=92, quizzes=4))
        assert [r.title for r in mastery.resources] == ["Advanced Challenge Quizzes"]

        developing = await synthesizer.synthesize("stats", make_context(average=61.25, quizzes=4))
        assert [r.type for r in developing.resources] == [ResourceType.VIDEO, ResourceType.MATERIAL, ResourceType.QUIZ]
        assert "**61.2%**" in developing.text or "**61.3%**" in developing.text


class TestVideoBranch:
    """Test suite for the video rule."""

    @pytest.mark.asyncio
    async def test_results_are_embedded_up_to_three(self, provider, synthesizer):
        """Test at most three videos are embedded."""
        provider.results = [
            {"title": f"Python {i}", "description": "d" * 150, "url": f"https://youtu.be/{i}"} for i in range(5)
        ]
        payload = await synthesizer.synthesize("any python tutorial?", make_context())

        assert payload.tone == Tone.EXPLANATORY
        assert [r.title for r in payload.resources] == ["Python 0", "Python 1", "Python 2"]
        assert "Fresh Video Tutorials for python" in payload.text
        assert "d" * 100 + "..." in payload.text
        assert "Python 3" not in payload.text

    @pytest.mark.asyncio
    async def test_course_title_has_priority(self, provider, synthesizer, course):
        """Test the course title is the search topic when focused."""
        await synthesizer.synthesize("python videos please", make_context(course=course))
        assert provider.queries[0][0] == "Rust Systems tutorial programming"

    @pytest.mark.asyncio
    async def test_empty_results_fall_back_to_course_videos(self, synthesizer, course):
        """Test an empty search falls back to the course videos."""
        payload = await synthesizer.synthesize("I want to watch something", make_context(course=course))
        assert "Curated Videos for Rust Systems" in payload.text
        assert payload.tone == Tone.EXPLANATORY
        assert [r.url for r in payload.resources] == ["https://youtu.be/1", "https://youtu.be/2"]

    @pytest.mark.asyncio
    async def test_provider_failure_is_contained(self, provider, synthesizer):
        """Test a failing provider still produces a reply."""
        provider.error = RuntimeError("quota exceeded")
        payload = await synthesizer.synthesize("youtube javascript", make_context())
        assert payload.rule == "video"
        assert "Video Tutorial Search" in payload.text

    def test_topic_resolution_order(self, course):
        """Test the topic comes from course, vocabulary, then interests."""
        assert resolve_video_topic("react videos", make_context(course=course)) == "Rust Systems"
        assert resolve_video_topic("react videos", make_context()) == "react"
        assert resolve_video_topic("videos", make_context(interests=("quantum computing",))) == "quantum computing"
        assert resolve_video_topic("videos", make_context()) is None


class TestConsistencyBranch:
    """Test suite for the consistency rule."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days,header", [
        (0, "let's build your learning consistency"),
        (1, "Starting Strong"),
        (6, "Starting Strong"),
        (7, "Building Momentum"),
        (13, "Building Momentum"),
        (14, "Great Momentum"),
        (29, "Great Momentum"),
        (30, "Incredible Dedication"),
        (120, "Incredible Dedication"),
    ])
    async def test_bands(self, synthesizer, provider, days, header):
        """Test streak lengths map onto consistency bands."""
        payload = await synthesizer.synthesize("what's my streak", make_context(days=days))
        assert header in payload.text
        assert payload.tone == Tone.MOTIVATIONAL
        assert payload.resources == ()
        assert provider.queries == []


class TestCourseBranches:
    """Test suite for the course-scoped rules."""

    @pytest.mark.asyncio
    async def test_deep_dive_resources_follow_course_content(self, synthesizer, course):
        """Test deep-dive resources follow the course content."""
        bare = CourseFocus(title="Drafts", materials=(CourseMaterial("Notes"),))
        payload = await synthesizer.synthesize("explain this", make_context(course=bare))
        assert [r.type for r in payload.resources] == [ResourceType.MATERIAL]
        assert "**Level:** Intermediate" in payload.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("style,marker", [
        ("visual", "Start with video tutorials (your strength!)"),
        ("reading", "Begin with course materials (your strength!)"),
        ("adaptive", "Combine videos and materials"),
    ])
    async def test_deep_dive_learning_style(self, synthesizer, course, style, marker):
        """Test the deep dive adapts to the learning style."""
        payload = await synthesizer.synthesize("how does ownership work", make_context(course=course, learning_style=style))
        assert marker in payload.text

    @pytest.mark.asyncio
    async def test_materials_listed(self, synthesizer, course):
        """Test course materials are listed."""
        payload = await synthesizer.synthesize("show me the reading material", make_context(course=course))
        assert payload.rule == "course_materials"
        assert payload.tone == Tone.EXPLANATORY
        assert "**1. Ownership**" in payload.text
        assert [r.title for r in payload.resources] == ["Ownership", "Borrowing"]

    @pytest.mark.asyncio
    async def test_materials_pending(self, synthesizer):
        """Test a course without materials gets the pending reply."""
        payload = await synthesizer.synthesize("any material?", make_context(course=CourseFocus(title="Go")))
        assert "materials are being prepared" in payload.text
        assert payload.tone == Tone.GUIDING
        assert payload.resources == ()

    @pytest.mark.asyncio
    async def test_quiz_checklist(self, synthesizer, course):
        """Test the quiz reply includes the checklist."""
        payload = await synthesizer.synthesize("I want to take the quiz", make_context(course=course))
        assert payload.rule == "course_quiz"
        assert "**12 questions**" in payload.text
        assert [(r.type, r.title) for r in payload.resources] == [(ResourceType.QUIZ, "Rust Systems Quiz")]

    @pytest.mark.asyncio
    async def test_quiz_pending(self, synthesizer):
        """Test a course without questions gets the pending reply."""
        payload = await synthesizer.synthesize("quiz", make_context(course=CourseFocus(title="Go")))
        assert "quiz is being prepared" in payload.text

    @pytest.mark.asyncio
    async def test_course_rules_need_focus(self, synthesizer):
        """Test course rules are skipped without a focused course."""
        payload = await synthesizer.synthesize("I want to take the quiz", make_context())
        assert payload.rule == "default"


class TestOtherBranches:
    """Test suite for the remaining rules."""

    @pytest.mark.asyncio
    async def test_study_strategy_uses_interests(self, synthesizer):
        """Test study advice mentions the learner's interests."""
        payload = await synthesizer.synthesize("study tips please", make_context(interests=("python", "ai", "web")))
        assert "Concentrate on: python and ai" in payload.text
        assert payload.tone == Tone.GUIDING

    @pytest.mark.asyncio
    async def test_goals_with_and_without_stated_goals(self, synthesizer):
        """Test the goals reply with and without stated goals."""
        with_goals = await synthesizer.synthesize("help me achieve my goal", make_context(goals=("ship a project",)))
        assert "Your Stated Goals" in with_goals.text
        assert "1. ship a project" in with_goals.text

        without = await synthesizer.synthesize("help me achieve my goal", make_context())
        assert "Goal-Setting Framework" in without.text
        assert without.tone == Tone.GUIDING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("average,quizzes,marker", [
        (50, 2, "Review course materials for challenging topics"),
        (69.9, 2, "Review course materials for challenging topics"),
        (70, 2, "Balance video learning with reading materials"),
        (79, 2, "Balance video learning with reading materials"),
        (80, 2, "Challenge yourself with advanced courses"),
        (0, 0, "Balance video learning with reading materials"),
    ])
    async def test_recommendation_lists(self, synthesizer, average, quizzes, marker):
        """Test recommendations adapt to the learner's stats."""
        payload = await synthesizer.synthesize("what do you recommend?", make_context(average=average, quizzes=quizzes, credits=100))
        assert marker in payload.text
        assert "earn 150 total credits" in payload.text
        assert payload.tone == Tone.GUIDING
        assert len(payload.resources) == 2

    @pytest.mark.asyncio
    async def test_gratitude(self, synthesizer):
        """Test thanks gets the gratitude reply."""
        payload = await synthesizer.synthesize("thank you!", make_context(stars=5))
        assert "**5 stars**" in payload.text
        assert payload.tone == Tone.MOTIVATIONAL

    @pytest.mark.asyncio
    async def test_default(self, synthesizer):
        """Test unmatched input gets the default reply."""
        payload = await synthesizer.synthesize("hello", make_context(average=72.5, quizzes=4))
        assert payload.rule == "default"
        assert payload.tone == Tone.GUIDING
        assert len(payload.resources) == 3
        assert "4 quizzes completed and 72.5% average" in payload.text


class TestRuleOrder:
    """Test suite for rule ordering."""

    @pytest.mark.parametrize("message,rule", [
        ("thanks, how am i doing?", "progress"),
        ("progress videos", "progress"),
        ("video about my streak", "video"),
        ("I'm stuck, how to learn better?", "study_strategy"),
        ("this is hard, what should i do", "struggle"),
        ("I want to learn, what do you suggest", "goals"),
        ("what next?", "recommendation"),
        ("much appreciated", "gratitude"),
        ("good morning", None),
    ])
    def test_first_match_wins(self, synthesizer, message, rule):
        """Test the first matching rule owns the reply."""
        selected = synthesizer.select_rule(message, make_context())
        assert (selected.name if selected else None) == rule

    def test_course_rules_sit_between_consistency_and_study(self, synthesizer, course):
        """Test course rules sit between consistency and study strategy."""
        ctx = make_context(course=course)
        assert synthesizer.select_rule("explain my streak", ctx).name == "consistency"
        assert synthesizer.select_rule("explain how to learn this", ctx).name == "course_deep_dive"
        assert synthesizer.select_rule("material to improve", ctx).name == "course_materials"
