"""
Session Manager

In-memory registry of live MentorSessions keyed by session id.
Conversation state is process-local and is not persisted across restarts.
"""

import logging
import uuid
from typing import Dict, List, Optional

from course_mentor.config import MentorSettings
from course_mentor.learner_context import CollaboratorSnapshots
from course_mentor.mentor_session import MentorSession
from course_mentor.resource_gateway import ResourceFetchGateway, YouTubeSearchProvider
from course_mentor.response_synthesizer import ResponseSynthesizer

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Owns every mounted MentorSession.

    Sessions share one ResponseSynthesizer (and therefore one video search
    provider); each session owns its own timers.
    """

    def __init__(
        self,
        settings: Optional[MentorSettings] = None,
        synthesizer: Optional[ResponseSynthesizer] = None,
    ):
        """
        Initialize SessionManager.

        Args:
            settings: Settings handed to every new session
            synthesizer: Shared synthesizer (built from settings when None)
        """
        self.settings = settings or MentorSettings()
        self.synthesizer = synthesizer or self._build_synthesizer(self.settings)
        self._sessions: Dict[str, MentorSession] = {}

    @staticmethod
    def _build_synthesizer(settings: MentorSettings) -> ResponseSynthesizer:
        provider = None
        if settings.youtube_api_key:
            provider = YouTubeSearchProvider(
                api_key=settings.youtube_api_key,
                base_url=settings.youtube_api_base_url,
                timeout=settings.video_search_timeout_seconds,
            )
        else:
            logger.warning("⚠️ [SessionManager] YOUTUBE_API_KEY not set, live video search disabled")
        return ResponseSynthesizer(
            gateway=ResourceFetchGateway(provider),
            video_search_limit=settings.video_search_limit,
            video_display_count=settings.video_display_count,
        )

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def get_session(self, session_id: str, user_id: Optional[str] = None) -> Optional[MentorSession]:
        """
        Look up a live session.

        Args:
            session_id: Session identifier
            user_id: When given, sessions owned by another user are not returned

        Returns:
            MentorSession or None
        """
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if user_id and session.state.user_id and session.state.user_id != user_id:
            return None
        return session

    def get_or_create_session(
        self,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
        snapshots: Optional[CollaboratorSnapshots] = None,
        course_id: Optional[str] = None,
        start: bool = True,
    ) -> MentorSession:
        """
        Return the live session for `session_id`, mounting a new one if needed.

        An existing session gets its collaborator snapshots refreshed (when
        given) and its course focus updated (when given).

        Args:
            session_id: Session identifier (generated when None)
            user_id: Owning user
            snapshots: Current collaborator values
            course_id: Course to scope the session to
            start: Mount immediately (welcome message + idle ticker)

        Returns:
            MentorSession
        """
        session = self.get_session(session_id, user_id) if session_id else None
        if session is not None:
            if snapshots is not None:
                session.update_snapshots(snapshots)
            if course_id:
                session.set_course_focus(course_id)
            return session

        if not session_id or session_id in self._sessions:
            # Unknown caller for a live id gets a fresh session
            session_id = uuid.uuid4().hex
        session = MentorSession(
            session_id=session_id,
            user_id=user_id,
            settings=self.settings,
            synthesizer=self.synthesizer,
            snapshots=snapshots,
            focused_course_id=course_id,
        )
        self._sessions[session_id] = session
        if start:
            session.start()
        logger.info(f"✅ [SessionManager] Created session {session_id[:8]} ({len(self._sessions)} live)")
        return session

    async def close_session(self, session_id: str) -> bool:
        """
        Unmount and forget a session.

        Returns:
            True if a session was closed
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.close()
        return True

    async def close_all(self):
        for session_id in list(self._sessions):
            await self.close_session(session_id)
        logger.info("🛑 [SessionManager] All sessions closed")
