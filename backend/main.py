"""
FastAPI Backend for the Course Mentor

Provides REST API endpoints with:
- JWT Authentication
- Live mentor sessions (mount, panel, seed question, activity, unmount)
- Real-time streaming of mentor responses over SSE
- Learner context loaded from Supabase (in-memory fallback)
"""

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from typing import Optional, List, Dict, Any
import os
import sys
import json
import time
import asyncio
import logging
import signal

# Setup enhanced logging with pretty formatting
from lib.logger import setup_logging, get_logger

setup_logging(level=logging.INFO, use_colors=True)

logger = get_logger("backend.main")

# Add the course_mentor package to Python path
backend_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(backend_dir)

package_src = os.path.join(project_root, 'course_mentor', 'src')
if os.path.exists(package_src) and package_src not in sys.path:
    sys.path.insert(0, package_src)

from lib.supabase_client import get_optional_supabase_client
from lib.auth import get_current_user

from course_mentor.config import MentorSettings
from course_mentor.learner_data_manager import LearnerDataManager
from course_mentor.mentor_session import MentorSession, SessionEvent, SessionEventType
from course_mentor.session_manager import SessionManager

# Seconds between liveness checks while waiting on a stream
STREAM_POLL_SECONDS = 1.0

_session_manager: Optional[SessionManager] = None
_data_manager: Optional[LearnerDataManager] = None


def get_session_manager() -> SessionManager:
    """Get or create the singleton SessionManager."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager(settings=MentorSettings.from_env())
    return _session_manager


def get_data_manager() -> LearnerDataManager:
    """Get or create the singleton LearnerDataManager."""
    global _data_manager
    if _data_manager is None:
        _data_manager = LearnerDataManager(supabase_client=get_optional_supabase_client())
    return _data_manager


app = FastAPI(
    title="Course Mentor API",
    description="REST API for the contextual course mentor",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== Pydantic Models ====================

class CreateSessionRequest(BaseModel):
    session_id: Optional[str] = None
    course_id: Optional[str] = None


class MentorMessage(BaseModel):
    content: str


class PanelRequest(BaseModel):
    open: Optional[bool] = None  # None toggles


class SeedRequest(BaseModel):
    text: str
    course_id: Optional[str] = None


class ResourceModel(BaseModel):
    type: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None


class MessageModel(BaseModel):
    id: str
    text: str
    sender: str
    timestamp: str
    tone: Optional[str] = None
    resources: List[ResourceModel] = []
    delivery_state: str


class SessionSnapshot(BaseModel):
    session_id: str
    panel_open: bool
    mood: str
    idle_seconds: int
    show_need_help: bool
    active_tone: str
    focused_course_id: Optional[str] = None
    streaming_text: str = ""
    pending_input: Optional[str] = None
    history: List[MessageModel]


# ==================== Helper Functions ====================

def require_session(manager: SessionManager, session_id: str, user: dict) -> MentorSession:
    session = manager.get_session(session_id, user_id=user["id"])
    if session is None:
        logger.warning("Session not found", data={"session_id": session_id[:20], "user_id": user["id"]})
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def to_snapshot(session: MentorSession, pending_input: Optional[str] = None) -> SessionSnapshot:
    return SessionSnapshot(**session.snapshot(), pending_input=pending_input)


def sse(data: Dict[str, Any]) -> str:
    return f"data: {json.dumps(data)}\n\n"


async def refresh_snapshots(session: MentorSession, data_manager: LearnerDataManager):
    """Reload collaborator values for the session's user and course."""
    snapshots = await data_manager.load_snapshots(session.state.user_id, session.state.focused_course_id)
    session.update_snapshots(snapshots)


# ==================== API Endpoints ====================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Course Mentor API",
        "version": "1.0.0",
        "live_sessions": len(get_session_manager()),
        "supabase_connected": get_data_manager().use_supabase,
    }


@app.post("/api/mentor/sessions", response_model=SessionSnapshot)
async def create_session(
    request: CreateSessionRequest,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
    data_manager: LearnerDataManager = Depends(get_data_manager),
):
    """Mount a mentor session (optionally scoped to a course)."""
    logger.request("POST", "/api/mentor/sessions", user_id=user["id"], data={"course_id": request.course_id})

    snapshots = await data_manager.load_snapshots(user["id"], request.course_id)
    session = manager.get_or_create_session(
        session_id=request.session_id,
        user_id=user["id"],
        snapshots=snapshots,
        course_id=request.course_id,
    )
    logger.success("Session mounted", data={"session_id": session.session_id[:20], "history": len(session.history)})
    return to_snapshot(session)


@app.get("/api/mentor/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session_state(
    session_id: str,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
):
    """Current session state. A seeded question is returned once as pending_input."""
    session = require_session(manager, session_id, user)
    pending = session.take_pending_input()
    logger.debug("Session state read", data={"session_id": session_id[:20], "pending_input": pending is not None})
    return to_snapshot(session, pending_input=pending)


@app.post("/api/mentor/sessions/{session_id}/messages")
async def send_message(
    session_id: str,
    message: MentorMessage,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
    data_manager: LearnerDataManager = Depends(get_data_manager),
):
    """
    Submit learner input and stream the mentor response with SSE.

    Events: {"type": "chunk", "content": <partial text>} per token, then
    {"type": "done", ...} with tone and resources, or {"type": "error"}.
    """
    session = require_session(manager, session_id, user)
    if not message.content or not message.content.strip():
        raise HTTPException(status_code=422, detail="Message content must not be empty")

    await refresh_snapshots(session, data_manager)
    logger.request("POST", f"/api/mentor/sessions/{session_id}/messages", user_id=user["id"], data={
        "message_length": len(message.content),
    })

    async def generate():
        start_time = time.time()
        events: asyncio.Queue = asyncio.Queue()
        listener = events.put_nowait
        session.add_listener(listener)

        try:
            reply = await session.submit(message.content)
            if reply is None:
                yield sse({"type": "error", "content": "Session is no longer active", "done": True})
                return

            while True:
                try:
                    event: SessionEvent = await asyncio.wait_for(events.get(), timeout=STREAM_POLL_SECONDS)
                except asyncio.TimeoutError:
                    if session.closed:
                        yield sse({"type": "error", "content": "Session closed during streaming", "done": True})
                        return
                    continue

                if event.message is not reply:
                    continue

                if event.type == SessionEventType.TOKEN:
                    yield sse({"type": "chunk", "content": event.text, "done": False})
                elif event.type == SessionEventType.DONE:
                    logger.response(200, f"/api/mentor/sessions/{session_id}/messages", duration=time.time() - start_time, data={
                        "tone": reply.tone.value if reply.tone else None,
                        "resources": len(reply.resources),
                    })
                    yield sse({
                        "type": "done",
                        "content": reply.text,
                        "metadata": {
                            "session_id": session_id,
                            "message_id": reply.id,
                            "tone": reply.tone.value if reply.tone else None,
                            "resources": [r.to_dict() for r in reply.resources],
                        },
                        "done": True,
                    })
                    return

        except Exception as e:
            logger.error("Error in mentor stream", error=e, data={"session_id": session_id})
            yield sse({"type": "error", "content": f"Error: {str(e)}", "done": True})
        finally:
            session.remove_listener(listener)

    return StreamingResponse(generate(), media_type="text/event-stream")


@app.post("/api/mentor/sessions/{session_id}/panel", response_model=SessionSnapshot)
async def set_panel(
    session_id: str,
    request: PanelRequest,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
):
    """Open, close or toggle the mentor panel."""
    session = require_session(manager, session_id, user)
    if request.open is None or request.open != session.state.panel_open:
        session.toggle_panel()
    return to_snapshot(session)


@app.post("/api/mentor/sessions/{session_id}/seed", response_model=SessionSnapshot)
async def seed_question(
    session_id: str,
    request: SeedRequest,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
    data_manager: LearnerDataManager = Depends(get_data_manager),
):
    """Prefill a question (opens the panel; optionally scopes to a course)."""
    session = require_session(manager, session_id, user)
    if not request.text.strip():
        raise HTTPException(status_code=422, detail="Seed text must not be empty")

    session.seed_question(request.text, request.course_id)
    if request.course_id:
        await refresh_snapshots(session, data_manager)
    logger.info("Seeded question", data={"session_id": session_id[:20], "course_id": request.course_id})
    return to_snapshot(session)


@app.post("/api/mentor/sessions/{session_id}/activity")
async def record_activity(
    session_id: str,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
):
    """Pointer/key activity from the shell: resets the idle counter."""
    session = require_session(manager, session_id, user)
    session.record_activity()
    return {"idle_seconds": session.state.idle_seconds, "show_need_help": session.show_need_help}


@app.delete("/api/mentor/sessions/{session_id}")
async def delete_session(
    session_id: str,
    user: dict = Depends(get_current_user),
    manager: SessionManager = Depends(get_session_manager),
):
    """Unmount a session (cancels its stream and timers)."""
    require_session(manager, session_id, user)
    await manager.close_session(session_id)
    return {"status": "deleted", "session_id": session_id}


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown event - unmount every live session."""
    if _session_manager is not None:
        await _session_manager.close_all()
        logger.info("🛑 Mentor sessions closed")


if __name__ == "__main__":
    import uvicorn

    def handle_exit(*args):
        """Handle graceful shutdown."""
        logger.section("SERVER SHUTDOWN", {"reason": "signal received"})
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_exit)
    signal.signal(signal.SIGTERM, handle_exit)

    try:
        uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
    except KeyboardInterrupt:
        logger.info("🛑 Server stopped.")
        sys.exit(0)
