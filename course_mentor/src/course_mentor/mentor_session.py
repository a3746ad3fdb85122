"""
Mentor Session

The session state machine behind the floating mentor. Owns the conversation
history, the avatar mood, the panel flag, the idle ticker and the active
stream; the synthesizer and presenter only return values that the session
turns into history updates.

Mood lifecycle: idle -> thinking (submit, held through synthesis) ->
speaking (streaming) -> idle (after the settle delay).
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from course_mentor.config import MentorSettings
from course_mentor.idle_monitor import IdleMonitor
from course_mentor.learner_context import CollaboratorSnapshots, DecisionContext, aggregate, build_learner
from course_mentor.response_synthesizer import ResponsePayload, ResponseSynthesizer
from course_mentor.session_state import AvatarMood, DeliveryState, Message, Sender, SessionState
from course_mentor.streaming_presenter import CancelHandle, StreamingPresenter
from course_mentor.tone_classifier import Tone

logger = logging.getLogger(__name__)


WELCOME_TEMPLATE = """Hi {name}, I'm your personal mentor! ✨

I'm here to give you the best learning experience I can:

🧠 **Contextual Intelligence**
• Deep understanding of course materials and video content
• Smart content extraction and cross-referencing
• Personalized explanations based on your learning style

💬 **Refined Communication**
• Smooth, natural conversation flow
• Adaptive tone matching your needs
• Structured, easy-to-read responses

🎯 **Performance-Driven Insights**
• Real-time analysis of your progress
• Personalized study recommendations
• Proactive learning support

🎥 **YouTube Integration**
• Fetch fresh tutorials on any topic
• Contextual video suggestions
• Content analysis and recommendations

How can I help you excel in your learning journey today?"""


# ==================== "Ask the mentor" prompts ====================

def course_question(course_title: str) -> str:
    return f"Can you explain {course_title} and help me understand the key concepts?"


def video_question(video_title: str, course_title: str) -> str:
    return f'Can you explain the key concepts from the video "{video_title}" in the {course_title} course?'


def quiz_question(question_text: str) -> str:
    return f'Can you help me understand this question: "{question_text}"?'


# ==================== Events ====================

class SessionEventType(str, Enum):
    MESSAGE = "message"  # message appended to history
    TOKEN = "token"  # streaming progress for an assistant message
    DONE = "done"  # assistant message delivered in full
    MOOD = "mood"  # avatar mood changed


@dataclass(frozen=True)
class SessionEvent:
    type: SessionEventType
    message: Optional[Message] = None
    text: str = ""
    mood: Optional[AvatarMood] = None


SessionListener = Callable[[SessionEvent], None]


@dataclass
class _ActiveStream:
    handle: CancelHandle
    message: Message
    payload: ResponsePayload


class MentorSession:
    """
    Stateful mentor for one mounted assistant.

    Usage:
        session = MentorSession("abc", snapshots=snapshots, settings=MentorSettings.instant())
        session.start()
        reply = await session.submit("how am i doing?")
        await session.wait_until_delivered()
        await session.close()
    """

    def __init__(
        self,
        session_id: str,
        user_id: Optional[str] = None,
        settings: Optional[MentorSettings] = None,
        synthesizer: Optional[ResponseSynthesizer] = None,
        snapshots: Optional[CollaboratorSnapshots] = None,
        focused_course_id: Optional[str] = None,
        rng: Callable[[], float] = random.random,
    ):
        """
        Initialize MentorSession.

        Args:
            session_id: Session identifier
            user_id: Owning user (optional)
            settings: Timing settings (defaults to MentorSettings())
            synthesizer: Response synthesizer (defaults to one without video search)
            snapshots: Current collaborator values
            focused_course_id: Course the session is mounted on, if any
            rng: Source of thinking-delay jitter in [0, 1)
        """
        self.settings = settings or MentorSettings()
        self.synthesizer = synthesizer or ResponseSynthesizer(
            video_search_limit=self.settings.video_search_limit,
            video_display_count=self.settings.video_display_count,
        )
        self.snapshots = snapshots or CollaboratorSnapshots()
        self.rng = rng

        self.state = SessionState(session_id=session_id, user_id=user_id, focused_course_id=focused_course_id)
        self.presenter = StreamingPresenter(self.settings.stream_tick_seconds)
        self.idle = IdleMonitor(
            self.state,
            tick_seconds=self.settings.idle_tick_seconds,
            threshold_seconds=self.settings.idle_threshold_seconds,
        )

        self.closed = False
        self._listeners: List[SessionListener] = []
        self._stream: Optional[_ActiveStream] = None
        self._settle_task: Optional[asyncio.Task] = None
        self._pending_input: Optional[str] = None
        self._submissions = 0

    @property
    def session_id(self) -> str:
        return self.state.session_id

    @property
    def history(self) -> List[Message]:
        return self.state.history

    @property
    def mood(self) -> AvatarMood:
        return self.state.mood

    @property
    def show_need_help(self) -> bool:
        return self.idle.show_need_help

    # ==================== Lifecycle ====================

    def start(self, run_idle_ticker: bool = True):
        """
        Mount the session: seed the welcome message and start the idle ticker.

        The ticker needs a running event loop; pass run_idle_ticker=False to
        drive `self.idle.tick()` manually.
        """
        if not self.state.history:
            self._append(self._welcome_message())
        if run_idle_ticker:
            self.idle.start()
        logger.info(f"🎓 [MentorSession] Session {self.session_id[:8]} mounted (course={self.state.focused_course_id})")

    async def close(self):
        """Unmount: cancel the active stream, the settle timer and the idle ticker."""
        self.closed = True
        self.presenter.cancel()
        self._stream = None
        await self._cancel_settle()
        await self.idle.stop()
        self._listeners.clear()
        logger.info(f"🛑 [MentorSession] Session {self.session_id[:8]} closed")

    def _welcome_message(self) -> Message:
        learner = build_learner(self.snapshots.profile)
        return Message(text=WELCOME_TEMPLATE.format(name=learner.name), sender=Sender.ASSISTANT, tone=Tone.GUIDING)

    # ==================== Listeners ====================

    def add_listener(self, listener: SessionListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: SessionEvent):
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"❌ [MentorSession] Listener failed on {event.type.value}: {e}")

    # ==================== Collaborators ====================

    def update_snapshots(self, snapshots: CollaboratorSnapshots):
        """Replace the collaborator values used by the next response."""
        self.snapshots = snapshots or CollaboratorSnapshots()

    def set_course_focus(self, course_id: Optional[str]):
        self.state.focused_course_id = course_id
        self.state.touch()
        course = self.decision_context().course
        if course is not None:
            logger.debug(f"🎯 [MentorSession] Focus set for {self.session_id[:8]}:\n{course.summary()}")

    def decision_context(self) -> DecisionContext:
        return aggregate(self.snapshots, self.state.focused_course_id)

    # ==================== Panel / activity ====================

    def toggle_panel(self) -> bool:
        self.state.panel_open = not self.state.panel_open
        self.idle.reset()
        self.state.touch()
        return self.state.panel_open

    def record_activity(self):
        self.idle.reset()

    def seed_question(self, text: str, course_id: Optional[str] = None):
        """
        Prefill a question from elsewhere in the app (one-shot).

        Forces the panel open and scopes the session to `course_id` when given.
        """
        self.state.panel_open = True
        if course_id:
            self.set_course_focus(course_id)
        self._pending_input = text
        self.idle.reset()

    def take_pending_input(self) -> Optional[str]:
        pending, self._pending_input = self._pending_input, None
        return pending

    # ==================== Conversation ====================

    def _append(self, message: Message):
        self.state.history.append(message)
        self.state.touch()
        self._emit(SessionEvent(SessionEventType.MESSAGE, message=message))

    def _set_mood(self, mood: AvatarMood):
        if self.state.mood == mood:
            return
        self.state.mood = mood
        self._emit(SessionEvent(SessionEventType.MOOD, mood=mood))

    async def submit(self, text: str) -> Optional[Message]:
        """
        Submit learner input and start streaming the response.

        Returns once streaming has started; use `wait_until_delivered()` to
        wait for the full text. Empty or whitespace-only input is ignored.

        Args:
            text: Raw learner input

        Returns:
            The assistant Message (streaming), or None when nothing was submitted
        """
        if self.closed or not text or not text.strip():
            return None

        self._submissions += 1
        submission = self._submissions

        self._supersede_stream()
        self._drop_settle()

        self._append(Message(text=text, sender=Sender.USER))
        self._set_mood(AvatarMood.THINKING)

        context = self.decision_context()
        delay = self.settings.thinking_delay(text, self.rng())
        if delay > 0:
            await asyncio.sleep(delay)

        payload = await self.synthesizer.synthesize(text, context)

        if self.closed:
            logger.info(f"🛑 [MentorSession] Session {self.session_id[:8]} closed during synthesis, discarding response")
            return None

        if submission != self._submissions:
            # A newer submission is already in flight; deliver this one whole
            # and leave the active tone to the newer reply
            message = Message(text=payload.text, sender=Sender.ASSISTANT, tone=payload.tone, resources=payload.resources)
            self._append(message)
            self._emit(SessionEvent(SessionEventType.DONE, message=message, text=message.text))
            return message

        self.state.active_tone = payload.tone
        message = Message(
            text="",
            sender=Sender.ASSISTANT,
            tone=payload.tone,
            resources=payload.resources,
            delivery_state=DeliveryState.STREAMING,
        )
        self._append(message)
        self._set_mood(AvatarMood.SPEAKING)

        def on_token(partial: str):
            self.state.streaming_text = partial
            self._emit(SessionEvent(SessionEventType.TOKEN, message=message, text=partial))

        def on_done(full_text: str):
            self._complete(message, full_text)
            self._stream = None
            self._settle_task = asyncio.create_task(self._settle())

        handle = self.presenter.present(payload, on_token, on_done)
        self._stream = _ActiveStream(handle=handle, message=message, payload=payload)
        return message

    async def wait_until_delivered(self):
        """Wait for the active stream (if any) and the mood settle delay."""
        if self._stream is not None:
            await self._stream.handle.wait()
        if self._settle_task is not None:
            try:
                await self._settle_task
            except asyncio.CancelledError:
                pass

    def _complete(self, message: Message, full_text: str):
        message.text = full_text
        message.delivery_state = DeliveryState.COMPLETE
        self.state.streaming_text = ""
        self.state.touch()
        self._emit(SessionEvent(SessionEventType.DONE, message=message, text=full_text))

    def _supersede_stream(self):
        """Cancel the in-flight stream and finalize its message with its own text."""
        stream = self._stream
        self._stream = None
        if stream is None or stream.handle.done:
            return
        stream.handle.cancel()
        self._complete(stream.message, stream.payload.text)

    async def _settle(self):
        await asyncio.sleep(self.settings.speaking_settle_seconds)
        self._set_mood(AvatarMood.IDLE)
        self._settle_task = None

    def _drop_settle(self) -> Optional[asyncio.Task]:
        """Cancel the pending settle timer without waiting for it."""
        task = self._settle_task
        self._settle_task = None
        if task is None or task.done():
            return None
        task.cancel()
        return task

    async def _cancel_settle(self):
        task = self._drop_settle()
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    # ==================== Views ====================

    def snapshot(self) -> Dict[str, Any]:
        """Serialisable view of the session for the presentation shell."""
        return {
            "session_id": self.session_id,
            "panel_open": self.state.panel_open,
            "mood": self.state.mood.value,
            "idle_seconds": self.state.idle_seconds,
            "show_need_help": self.show_need_help,
            "active_tone": self.state.active_tone.value,
            "focused_course_id": self.state.focused_course_id,
            "streaming_text": self.state.streaming_text,
            "history": [m.to_dict() for m in self.state.history],
        }
