"""Child and session data models."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from joyverse.models.analytics import TypingAnalysis
from joyverse.models.attempt import Attempt, utcnow


class GameType(str, Enum):
    """Activities a therapist can assign to a child."""

    TYPING = "typing"
    PUZZLES = "puzzles"
    READING = "reading"
    TRACING = "tracing"


def new_session_id() -> str:
    return uuid4().hex


class PuzzleCompletion(BaseModel):
    """A puzzle finished during a session."""

    theme: str
    level: int
    puzzle_id: str
    completed_at: datetime = Field(default_factory=utcnow)
    emotions_during: list[str] = Field(default_factory=list)


class TracingAttempt(BaseModel):
    """A traced letter image saved as-is, without evaluation."""

    letter: str
    image_data: str
    traced_at: datetime = Field(default_factory=utcnow)


class Recording(BaseModel):
    """Reference to a reading-aloud recording stored elsewhere."""

    story_title: str
    audio_ref: str
    duration_ms: int = 0
    recorded_at: datetime = Field(default_factory=utcnow)


class Session(BaseModel):
    """Complete state of one play period for a child."""

    session_id: str = Field(default_factory=new_session_id)
    started_at: datetime = Field(default_factory=utcnow)
    assigned_themes: list[str] = Field(default_factory=list)
    themes_changed: list[str] = Field(default_factory=list)
    emotions_of_child: list[str] = Field(default_factory=list)
    pending_emotions: list[str] = Field(default_factory=list)
    played_puzzles: list[PuzzleCompletion] = Field(default_factory=list)
    typing_results: list[Attempt] = Field(default_factory=list)
    typing_results_map: dict[str, str] = Field(default_factory=dict)
    typing_analysis: TypingAnalysis | None = None
    tracing_results: list[TracingAttempt] = Field(default_factory=list)
    reading_recordings: list[Recording] = Field(default_factory=list)
    preferred_game: str | None = None
    preferred_story: str | None = None


class Child(BaseModel):
    """A child on a therapist's roster with long-lived preferences."""

    therapist_code: str
    username: str
    joined_at: datetime = Field(default_factory=utcnow)
    current_assigned_themes: list[str] = Field(default_factory=list)
    assigned_games: list[GameType] = Field(default_factory=list)
    completed_games: list[GameType] = Field(default_factory=list)
    preferred_game: GameType | None = None
    preferred_story: str | None = None
    played_puzzles: list[str] = Field(default_factory=list)
    sessions: list[Session] = Field(default_factory=list)

    def find_session(self, session_id: str) -> Session | None:
        """Return the session with the given id, if any."""
        for session in self.sessions:
            if session.session_id == session_id:
                return session
        return None


class ChildCreate(BaseModel):
    """Request body for adding a child to a therapist's roster."""

    therapist_code: str
    username: str
    assigned_themes: list[str] = Field(default_factory=list)
    assigned_games: list[GameType] = Field(default_factory=list)
    preferred_story: str | None = None


class AssignedGamesUpdate(BaseModel):
    """Request body replacing a child's assigned games."""

    assigned_games: list[GameType]


class SessionCreate(BaseModel):
    """Request body for a child login, which opens a new session."""

    therapist_code: str
    username: str


class SessionResponse(BaseModel):
    """Response returned when a session is started."""

    session_id: str
    username: str
    assigned_themes: list[str]
    preferred_game: str | None = None
    preferred_story: str | None = None


class ThemeChange(BaseModel):
    theme: str


class EmotionEvent(BaseModel):
    emotion: str


class PuzzleCreate(BaseModel):
    theme: str
    level: int
    puzzle_id: str
    emotions_during: list[str] = Field(default_factory=list)


class TracingCreate(BaseModel):
    letter: str
    image_data: str


class RecordingCreate(BaseModel):
    story_title: str
    audio_ref: str
    duration_ms: int = Field(default=0, ge=0)
