"""Session activity tracking: themes, emotions, puzzles, tracing, recordings."""

from collections import Counter

from joyverse.core.logging import get_logger
from joyverse.models.session import (
    Child,
    GameType,
    PuzzleCompletion,
    Recording,
    Session,
    TracingAttempt,
)
from joyverse.services.progress_store import ProgressStore, progress_store

logger = get_logger(__name__)


def dominant_emotion(readings: list[str]) -> str | None:
    """Most frequent reading; the earliest seen wins a tie."""
    if not readings:
        return None
    return Counter(readings).most_common(1)[0][0]


class ActivityService:
    """Records what a child does during a session, outside of typing."""

    def __init__(self, store: ProgressStore):
        self.store = store

    # ========== Roster ==========

    async def set_assigned_games(
        self, therapist_code: str, username: str, games: list[GameType]
    ) -> Child | None:
        """Replace the child's assigned games; the first one becomes the preferred game."""
        child = await self.store.get_child(therapist_code, username)
        if not child:
            return None

        child.assigned_games = list(dict.fromkeys(games))
        child.preferred_game = child.assigned_games[0] if child.assigned_games else None
        await self.store.save_child(child)
        return child

    async def mark_game_completed(
        self, therapist_code: str, username: str, game: GameType
    ) -> Child | None:
        """Add a game to the child's completed games, once."""
        child = await self.store.get_child(therapist_code, username)
        if not child:
            return None

        if game not in child.completed_games:
            child.completed_games.append(game)
            await self.store.save_child(child)
        return child

    async def list_sessions(self, therapist_code: str, username: str) -> list[Session] | None:
        child = await self.store.get_child(therapist_code, username)
        if not child:
            return None
        return child.sessions

    # ========== Session events ==========

    async def track_theme_change(
        self, therapist_code: str, username: str, session_id: str, theme: str
    ) -> list[str] | None:
        """Log a theme switch. Repeats of the same theme are logged too."""

        def apply(session: Session) -> list[str]:
            session.themes_changed.append(theme)
            return session.themes_changed

        return await self.store.update_session(therapist_code, username, session_id, apply)

    async def track_emotion(
        self, therapist_code: str, username: str, session_id: str, emotion: str
    ) -> list[str] | None:
        """Append an emotion tag to the session."""

        def apply(session: Session) -> list[str]:
            session.emotions_of_child.append(emotion)
            return session.emotions_of_child

        return await self.store.update_session(therapist_code, username, session_id, apply)

    async def record_emotion_reading(
        self, therapist_code: str, username: str, session_id: str, emotion: str
    ) -> int | None:
        """
        Buffer a predicted emotion for the activity currently in progress.

        @returns Number of buffered readings, or None when the session is not found
        """

        def apply(session: Session) -> int:
            session.pending_emotions.append(emotion)
            return len(session.pending_emotions)

        return await self.store.update_session(therapist_code, username, session_id, apply)

    async def pop_dominant_emotion(
        self, therapist_code: str, username: str, session_id: str
    ) -> str | None:
        """
        Return the dominant buffered emotion and clear the buffer.

        @returns The emotion, or None when the session is unknown or nothing is buffered
        """
        found = await self.store.find_session(therapist_code, username, session_id)
        if not found:
            return None
        child, session = found

        emotion = dominant_emotion(session.pending_emotions)
        if emotion is None:
            return None

        session.pending_emotions = []
        await self.store.save_child(child)

        logger.debug("Dominant emotion %s", emotion, extra={"session_id": session_id})
        return emotion

    async def record_puzzle(
        self,
        therapist_code: str,
        username: str,
        session_id: str,
        puzzle: PuzzleCompletion,
    ) -> PuzzleCompletion | None:
        """Log a completed puzzle on the session and on the child's played list."""
        found = await self.store.find_session(therapist_code, username, session_id)
        if not found:
            return None
        child, session = found

        session.played_puzzles.append(puzzle)
        if puzzle.puzzle_id not in child.played_puzzles:
            child.played_puzzles.append(puzzle.puzzle_id)
        await self.store.save_child(child)
        return puzzle

    async def save_tracing(
        self, therapist_code: str, username: str, session_id: str, tracing: TracingAttempt
    ) -> TracingAttempt | None:
        """Store a traced letter. A session without a preferred game becomes a tracing session."""

        def apply(session: Session) -> TracingAttempt:
            if not session.preferred_game:
                session.preferred_game = GameType.TRACING.value
            session.tracing_results.append(tracing)
            return tracing

        return await self.store.update_session(therapist_code, username, session_id, apply)

    async def save_recording(
        self, therapist_code: str, username: str, session_id: str, recording: Recording
    ) -> Recording | None:
        def apply(session: Session) -> Recording:
            session.reading_recordings.append(recording)
            return recording

        return await self.store.update_session(therapist_code, username, session_id, apply)


# Global instance
activity_service = ActivityService(progress_store)
