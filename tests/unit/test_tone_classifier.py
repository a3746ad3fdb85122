"""
Unit Tests for Tone Classifier

Tests keyword/threshold tone selection.
"""

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "course_mentor", "src"))

from course_mentor.learner_context import PerformanceSnapshot
from course_mentor.tone_classifier import STRUGGLE_KEYWORDS, Tone, classify, is_struggling


class TestToneClassifier:
    """Test suite for classify()."""

    @pytest.fixture
    def strong_learner(self):
        return PerformanceSnapshot(average_score=95, total_quizzes=12, total_credits=300, stars=30)

    @pytest.fixture
    def weak_learner(self):
        return PerformanceSnapshot(average_score=40, total_quizzes=5)

    @pytest.mark.parametrize("keyword", STRUGGLE_KEYWORDS)
    def test_struggle_keyword_is_motivational_regardless_of_performance(self, keyword, strong_learner):
        """Struggle keywords win even for top performers."""
        message = f"This topic is {keyword} for me, what is going on?"
        assert classify(message, strong_learner) == Tone.MOTIVATIONAL
        assert classify(message, None) == Tone.MOTIVATIONAL

    def test_low_average_with_quizzes_is_motivational(self, weak_learner):
        """Test a low average with quizzes is motivational."""
        assert classify("what is recursion", weak_learner) == Tone.MOTIVATIONAL

    def test_low_average_without_quizzes_is_not_boosted(self):
        """Test a low average without quizzes is not boosted."""
        perf = PerformanceSnapshot(average_score=0, total_quizzes=0)
        assert classify("what is recursion", perf) == Tone.EXPLANATORY

    def test_score_boundary(self):
        """60 is not a low score."""
        perf = PerformanceSnapshot(average_score=60, total_quizzes=3)
        assert classify("hello there", perf) == Tone.GUIDING
        perf = PerformanceSnapshot(average_score=59.9, total_quizzes=3)
        assert classify("hello there", perf) == Tone.MOTIVATIONAL

    @pytest.mark.parametrize("message", [
        "What is a closure?",
        "HOW DOES the event loop work",
        "please explain generators",
        "why do we need tests",
        "I want to understand decorators",
        "what does this concept mean",
        "give me the definition",
    ])
    def test_explanatory_cues(self, message, strong_learner):
        """Test explanatory cues give the explanatory tone."""
        assert classify(message, strong_learner) == Tone.EXPLANATORY

    def test_default_is_guiding(self, strong_learner):
        """Test plain input is guiding."""
        assert classify("hello mentor", strong_learner) == Tone.GUIDING

    def test_case_insensitive(self):
        """Test keyword matching ignores case."""
        assert is_struggling("I'm totally STUCK")
        assert not is_struggling("all good here")

    def test_tone_label(self):
        """Test tone labels and values."""
        assert Tone.MOTIVATIONAL.label == "Motivational"
        assert Tone.GUIDING.value == "guiding"
