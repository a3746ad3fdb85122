"""
Mentor Configuration

Runtime settings for the contextual mentor engine.
Values are read from the environment (and a local .env file) so timings and
provider credentials can change without code edits.
"""

import os
import logging
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] Invalid value for {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] Invalid value for {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class MentorSettings:
    """Timing, threshold and provider settings for a mentor session."""
    # Streaming presenter
    stream_tick_seconds: float = 0.05

    # Simulated "thinking" latency before synthesis
    thinking_enabled: bool = True
    thinking_base_seconds: float = 1.0
    thinking_per_char_seconds: float = 0.01
    thinking_variable_cap_seconds: float = 2.0
    thinking_jitter_seconds: float = 0.5

    # Avatar mood
    speaking_settle_seconds: float = 2.0

    # Proactive engagement
    idle_tick_seconds: float = 1.0
    idle_threshold_seconds: int = 30

    # Video search
    video_search_limit: int = 5
    video_display_count: int = 3
    youtube_api_key: Optional[str] = None
    youtube_api_base_url: str = DEFAULT_YOUTUBE_API_BASE_URL
    video_search_timeout_seconds: float = 10.0

    def thinking_delay(self, message: str, jitter: float = 0.0) -> float:
        """
        Simulated latency for a message.

        Args:
            message: Raw learner input
            jitter: Random factor in [0, 1)

        Returns:
            Delay in seconds (0 when thinking is disabled)
        """
        if not self.thinking_enabled:
            return 0.0
        variable = min(len(message) * self.thinking_per_char_seconds, self.thinking_variable_cap_seconds)
        return self.thinking_base_seconds + variable + jitter * self.thinking_jitter_seconds

    @classmethod
    def from_env(cls) -> "MentorSettings":
        """Build settings from environment variables (loads .env first)."""
        load_dotenv()

        defaults = cls()
        thinking_raw = os.getenv("MENTOR_THINKING_ENABLED", "true").lower()
        return cls(
            stream_tick_seconds=_env_float("MENTOR_STREAM_TICK_SECONDS", defaults.stream_tick_seconds),
            thinking_enabled=thinking_raw not in ("0", "false", "no", "off"),
            speaking_settle_seconds=_env_float("MENTOR_SPEAKING_SETTLE_SECONDS", defaults.speaking_settle_seconds),
            idle_threshold_seconds=_env_int("MENTOR_IDLE_THRESHOLD_SECONDS", defaults.idle_threshold_seconds),
            youtube_api_key=os.getenv("YOUTUBE_API_KEY") or None,
            youtube_api_base_url=os.getenv("YOUTUBE_API_BASE_URL", DEFAULT_YOUTUBE_API_BASE_URL),
            video_search_timeout_seconds=_env_float("VIDEO_SEARCH_TIMEOUT_SECONDS", defaults.video_search_timeout_seconds),
        )

    @classmethod
    def instant(cls, **overrides) -> "MentorSettings":
        """Zero-latency settings for tests and scripted runs."""
        base = cls(
            stream_tick_seconds=0.0,
            thinking_enabled=False,
            speaking_settle_seconds=0.0,
        )
        return replace(base, **overrides)
