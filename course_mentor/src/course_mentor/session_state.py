"""
Session State Data Model

Defines the conversation message and SessionState dataclasses for a mentor
session.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from course_mentor.resource_gateway import ResourceItem
from course_mentor.tone_classifier import Tone


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class DeliveryState(str, Enum):
    COMPLETE = "complete"
    STREAMING = "streaming"


class AvatarMood(str, Enum):
    IDLE = "idle"
    THINKING = "thinking"
    SPEAKING = "speaking"


@dataclass
class Message:
    """One entry in the conversation history."""
    text: str
    sender: Sender
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)
    tone: Optional[Tone] = None
    resources: Tuple[ResourceItem, ...] = ()
    delivery_state: DeliveryState = DeliveryState.COMPLETE

    @property
    def is_streaming(self) -> bool:
        return self.delivery_state == DeliveryState.STREAMING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "sender": self.sender.value,
            "timestamp": self.timestamp.isoformat(),
            "tone": self.tone.value if self.tone else None,
            "resources": [r.to_dict() for r in self.resources],
            "delivery_state": self.delivery_state.value,
        }


@dataclass
class SessionState:
    """Mutable state of one mounted mentor."""
    session_id: str
    user_id: Optional[str] = None
    panel_open: bool = False
    history: List[Message] = field(default_factory=list)
    mood: AvatarMood = AvatarMood.IDLE
    idle_seconds: int = 0
    active_tone: Tone = Tone.GUIDING
    focused_course_id: Optional[str] = None
    # Partial text of the assistant message currently being streamed
    streaming_text: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)

    def touch(self):
        self.last_updated = datetime.now()
