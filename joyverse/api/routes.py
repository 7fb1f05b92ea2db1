"""API routes for children, sessions, activity tracking and health checks."""

from fastapi import APIRouter, HTTPException

from joyverse.core.config import get_settings
from joyverse.models.session import (
    AssignedGamesUpdate,
    Child,
    ChildCreate,
    EmotionEvent,
    GameType,
    PuzzleCompletion,
    PuzzleCreate,
    Recording,
    RecordingCreate,
    Session,
    SessionCreate,
    SessionResponse,
    ThemeChange,
    TracingAttempt,
    TracingCreate,
)
from joyverse.services.activity import activity_service
from joyverse.services.progress_store import ChildExistsError, progress_store

router = APIRouter()

SESSION_PATH = "/sessions/{therapist_code}/{username}/{session_id}"


def _not_found(what: str = "Session") -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()

    return {
        "status": "healthy",
        "service": "joyverse-backend",
        "version": "0.1.0",
        "dependencies": {
            "store": await progress_store.ping(),
            "store_backend": settings.store_backend.value,
        },
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check for Kubernetes."""
    store_status = await progress_store.ping()

    checks = {
        "config": True,
        "store": store_status != "disconnected",
    }

    return {
        "ready": all(checks.values()),
        "checks": checks,
    }


# ========== Children ==========


@router.post("/children", response_model=Child, status_code=201)
async def add_child(request: ChildCreate):
    """Add a child to a therapist's roster."""
    try:
        return await progress_store.register_child(
            request.therapist_code,
            request.username,
            assigned_themes=request.assigned_themes,
            assigned_games=request.assigned_games,
            preferred_story=request.preferred_story,
        )
    except ChildExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/children/{therapist_code}")
async def list_children(therapist_code: str):
    """List the usernames on a therapist's roster."""
    return {"children": await progress_store.list_children(therapist_code)}


@router.put("/children/{therapist_code}/{username}/games", response_model=Child)
async def set_assigned_games(therapist_code: str, username: str, request: AssignedGamesUpdate):
    """Replace the games assigned to a child."""
    child = await activity_service.set_assigned_games(therapist_code, username, request.assigned_games)
    if not child:
        raise _not_found("Child")
    return child


@router.post("/children/{therapist_code}/{username}/completed-games/{game}", response_model=Child)
async def mark_game_completed(therapist_code: str, username: str, game: GameType):
    """Mark a game as completed by a child."""
    child = await activity_service.mark_game_completed(therapist_code, username, game)
    if not child:
        raise _not_found("Child")
    return child


@router.get("/children/{therapist_code}/{username}/sessions", response_model=list[Session])
async def list_child_sessions(therapist_code: str, username: str):
    """Get all sessions of a child, oldest first."""
    sessions = await activity_service.list_sessions(therapist_code, username)
    if sessions is None:
        raise _not_found("Child")
    return sessions


# ========== Sessions ==========


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(request: SessionCreate):
    """Log a child in, opening a new session."""
    session = await progress_store.start_session(request.therapist_code, request.username)
    if not session:
        raise _not_found("Child")

    return SessionResponse(
        session_id=session.session_id,
        username=request.username,
        assigned_themes=session.assigned_themes,
        preferred_game=session.preferred_game,
        preferred_story=session.preferred_story,
    )


@router.get(SESSION_PATH, response_model=Session)
async def get_session(therapist_code: str, username: str, session_id: str):
    """Get session details."""
    found = await progress_store.find_session(therapist_code, username, session_id)
    if not found:
        raise _not_found()
    return found[1]


@router.post(SESSION_PATH + "/themes")
async def track_theme_change(therapist_code: str, username: str, session_id: str, request: ThemeChange):
    """Log a theme switch during the session."""
    themes = await activity_service.track_theme_change(
        therapist_code, username, session_id, request.theme
    )
    if themes is None:
        raise _not_found()
    return {"current_theme": request.theme, "themes_changed": themes}


@router.post(SESSION_PATH + "/emotions")
async def track_emotion(therapist_code: str, username: str, session_id: str, request: EmotionEvent):
    """Append an emotion tag to the session."""
    emotions = await activity_service.track_emotion(
        therapist_code, username, session_id, request.emotion
    )
    if emotions is None:
        raise _not_found()
    return {"emotions_of_child": emotions}


@router.post(SESSION_PATH + "/emotion-readings")
async def record_emotion_reading(
    therapist_code: str, username: str, session_id: str, request: EmotionEvent
):
    """Buffer an emotion prediction for the activity in progress."""
    buffered = await activity_service.record_emotion_reading(
        therapist_code, username, session_id, request.emotion
    )
    if buffered is None:
        raise _not_found()
    return {"emotion": request.emotion, "buffered": buffered}


@router.get(SESSION_PATH + "/dominant-emotion")
async def pop_dominant_emotion(therapist_code: str, username: str, session_id: str):
    """Get the most frequent buffered emotion and start a fresh buffer."""
    if not await progress_store.find_session(therapist_code, username, session_id):
        raise _not_found()

    emotion = await activity_service.pop_dominant_emotion(therapist_code, username, session_id)
    if emotion is None:
        raise HTTPException(status_code=404, detail="No emotions recorded for this activity yet")
    return {"emotion": emotion}


@router.post(SESSION_PATH + "/puzzles", response_model=PuzzleCompletion)
async def record_puzzle(therapist_code: str, username: str, session_id: str, request: PuzzleCreate):
    """Record a completed puzzle."""
    puzzle = await activity_service.record_puzzle(
        therapist_code, username, session_id, PuzzleCompletion(**request.model_dump())
    )
    if puzzle is None:
        raise _not_found()
    return puzzle


@router.post(SESSION_PATH + "/tracing", response_model=TracingAttempt)
async def save_tracing(therapist_code: str, username: str, session_id: str, request: TracingCreate):
    """Store a traced letter image."""
    tracing = await activity_service.save_tracing(
        therapist_code, username, session_id, TracingAttempt(**request.model_dump())
    )
    if tracing is None:
        raise _not_found()
    return tracing


@router.get(SESSION_PATH + "/tracing", response_model=list[TracingAttempt])
async def get_tracing_results(therapist_code: str, username: str, session_id: str):
    found = await progress_store.find_session(therapist_code, username, session_id)
    if not found:
        raise _not_found()
    return found[1].tracing_results


@router.post(SESSION_PATH + "/recordings", response_model=Recording)
async def save_recording(therapist_code: str, username: str, session_id: str, request: RecordingCreate):
    """Attach a reading recording reference to the session."""
    recording = await activity_service.save_recording(
        therapist_code, username, session_id, Recording(**request.model_dump())
    )
    if recording is None:
        raise _not_found()
    return recording
