"""
Unit Tests for the Idle Monitor
"""

import asyncio
import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "course_mentor", "src"))

from course_mentor.idle_monitor import IdleMonitor
from course_mentor.session_state import SessionState


class TestIdleMonitor:
    """Test suite for IdleMonitor."""

    @pytest.fixture
    def state(self):
        return SessionState(session_id="idle-test")

    @pytest.fixture
    def monitor(self, state):
        return IdleMonitor(state, tick_seconds=1.0, threshold_seconds=30)

    def test_need_help_after_31_seconds_and_reset_hides_it(self, monitor, state):
        """Test the affordance appears past the threshold and activity hides it."""
        for _ in range(30):
            monitor.tick()
        assert state.idle_seconds == 30
        assert not monitor.show_need_help

        monitor.tick()
        assert monitor.show_need_help

        monitor.reset()
        assert state.idle_seconds == 0
        assert not monitor.show_need_help

    def test_counter_paused_while_panel_open(self, monitor, state):
        """Test ticks do not count while the panel is open."""
        state.panel_open = True
        for _ in range(40):
            monitor.tick()
        assert state.idle_seconds == 0
        assert not monitor.show_need_help

    def test_open_panel_hides_affordance(self, monitor, state):
        """Test an open panel hides the affordance regardless of the counter."""
        state.idle_seconds = 45
        assert monitor.show_need_help
        state.panel_open = True
        assert not monitor.show_need_help

    @pytest.mark.asyncio
    async def test_ticker_runs_and_stops(self, state):
        """Test the background ticker counts and stops cleanly."""
        monitor = IdleMonitor(state, tick_seconds=0.01, threshold_seconds=30)
        monitor.start()
        assert monitor.running
        await asyncio.sleep(0.06)
        await monitor.stop()

        counted = state.idle_seconds
        assert counted >= 1
        assert not monitor.running
        await asyncio.sleep(0.03)
        assert state.idle_seconds == counted
