"""Typing practice service: word selection, result saving and analysis."""

import random
import time
from datetime import datetime, timezone
from typing import Any

from joyverse.core.logging import get_logger
from joyverse.engine import analyzer, difficulty, messages, selector
from joyverse.engine.word_bank import words_for
from joyverse.models.analytics import (
    AggregateInsights,
    ChildTypingReport,
    EmotionalState,
    NextWord,
    OverallStats,
    ProgressPoint,
    RealTimeFeedback,
    SessionAnalysisEntry,
    TypingAnalysis,
)
from joyverse.models.attempt import Attempt, Tier, parse_attempts, utcnow
from joyverse.models.session import GameType, Session
from joyverse.services.progress_store import ProgressStore, progress_store

logger = get_logger(__name__)

RECENT_INSIGHT_WINDOW = 3
REPORT_LIMIT = 5


class GameMismatchError(ValueError):
    """Raised when typing results are saved into a session set up for another game."""


class NoResultsError(ValueError):
    """Raised when an analysis is requested over an empty attempt list."""


def snapshot(attempts: list[Attempt], rng: random.Random | None = None) -> TypingAnalysis:
    """Analyze the full attempt list and stamp it with the counts it was computed from."""
    analysis = analyzer.analyze(attempts, rng)
    return TypingAnalysis(
        **analysis.model_dump(),
        analyzed_at=utcnow(),
        total_words=len(attempts),
        correct_words=sum(1 for attempt in attempts if attempt.correct),
    )


class TypingService:
    """
    Caller side of the typing engine.

    The engine functions are pure; this service loads sessions, appends
    attempts, recomputes the analysis over the whole history and persists
    the result.
    """

    def __init__(self, store: ProgressStore, rng: random.Random | None = None):
        self.store = store
        self.rng = rng

    # ========== Word selection ==========

    def initial_word(self, session_id: str) -> NextWord:
        """First word of a session, always from the medium tier."""
        word = (self.rng or random).choice(words_for(Tier.MEDIUM))
        logger.info("Generated initial word %r", word, extra={"session_id": session_id})
        return NextWord(
            word=word,
            difficulty=Tier.MEDIUM,
            insight=messages.INITIAL_WORD_GREETING,
            is_initial=True,
        )

    def next_word(
        self,
        session_id: str,
        history: Any,
        difficulty_override: Tier | None = None,
    ) -> NextWord:
        """
        Adaptive next word for the typing history sent by the client.

        Words already in the history are not repeated while the bank lasts.
        """
        history = parse_attempts(history)
        tier = difficulty_override or difficulty.estimate(history)
        used_words = [attempt.word.lower() for attempt in history]

        word = selector.select(history, used_words, tier, self.rng)

        recent_accuracy = analyzer.accuracy_percent(history[-RECENT_INSIGHT_WINDOW:])
        logger.info(
            "Selected %r (%s) | recent accuracy %.0f%%",
            word,
            tier.value,
            recent_accuracy,
            extra={"session_id": session_id},
        )
        return NextWord(
            word=word,
            difficulty=tier,
            recent_accuracy=analyzer.round_half_up(recent_accuracy),
            insight=messages.insight_for(recent_accuracy),
        )

    # ========== Results and analysis ==========

    async def save_results(
        self,
        therapist_code: str,
        username: str,
        session_id: str,
        results: Any,
    ) -> TypingAnalysis | None:
        """
        Append attempts to a session and refresh its cached analysis.

        @returns The new analysis, or None when the session is not found
        @raises GameMismatchError - When the session is assigned to a game other than typing
        """
        attempts = parse_attempts(results)

        def apply(session: Session) -> TypingAnalysis:
            if session.preferred_game and session.preferred_game != GameType.TYPING.value:
                raise GameMismatchError(
                    "Typing results not allowed for this session (preferred game mismatch)"
                )

            for attempt in attempts:
                session.typing_results.append(attempt)
                session.typing_results_map[attempt.word] = attempt.input

            session.typing_analysis = snapshot(session.typing_results, self.rng)
            return session.typing_analysis

        started = time.perf_counter()
        analysis = await self.store.update_session(therapist_code, username, session_id, apply)
        if analysis is None:
            return None

        logger.info(
            "Saved %d attempts: %d%% accuracy, %s, problem letters %s",
            len(attempts),
            analysis.overall_accuracy,
            analysis.emotional_state.value,
            ", ".join(analysis.problematic_letters[:REPORT_LIMIT]) or "none",
            extra={
                "session_id": session_id,
                "latency_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return analysis

    async def analyze_session(
        self, therapist_code: str, username: str, session_id: str
    ) -> TypingAnalysis | None:
        """
        Recompute and persist a session's analysis from its full history.

        @raises NoResultsError - When the session has no typing results yet
        """

        def apply(session: Session) -> TypingAnalysis:
            if not session.typing_results:
                raise NoResultsError("No typing results to analyze")
            session.typing_analysis = snapshot(session.typing_results, self.rng)
            return session.typing_analysis

        analysis = await self.store.update_session(therapist_code, username, session_id, apply)
        if analysis is not None:
            logger.info(
                "Session analyzed: %s",
                analysis.emotional_state.value,
                extra={"session_id": session_id},
            )
        return analysis

    def real_time_feedback(self, partial_history: Any) -> RealTimeFeedback:
        """Quick, read-only feedback on attempts not yet saved."""
        attempts = parse_attempts(partial_history)
        analysis = analyzer.analyze(attempts, self.rng)
        return RealTimeFeedback(
            accuracy=analysis.overall_accuracy,
            emotional_state=analysis.emotional_state,
            encouragement=analysis.encouragement,
            needs_support=analysis.emotional_state
            in (EmotionalState.STRUGGLING, EmotionalState.FRUSTRATED),
            suggested_difficulty=difficulty.estimate(attempts),
        )

    async def child_report(self, therapist_code: str, username: str) -> ChildTypingReport | None:
        """Typing progress across every session of a child."""
        child = await self.store.get_child(therapist_code, username)
        if not child:
            return None

        all_attempts: list[Attempt] = []
        session_analyses: list[SessionAnalysisEntry] = []
        timeline: list[ProgressPoint] = []

        for session in child.sessions:
            if not session.typing_results:
                continue
            all_attempts.extend(session.typing_results)

            analysis = session.typing_analysis or snapshot(session.typing_results, self.rng)
            session_analyses.append(
                SessionAnalysisEntry(
                    session_id=session.session_id,
                    analysis=analysis,
                    date=analysis.analyzed_at,
                )
            )
            timeline.append(
                ProgressPoint(
                    date=session.started_at,
                    accuracy=analysis.overall_accuracy,
                    words_completed=len(session.typing_results),
                )
            )

        total_words = len(all_attempts)
        correct_words = sum(1 for attempt in all_attempts if attempt.correct)
        aggregate = analyzer.analyze(all_attempts, self.rng)

        return ChildTypingReport(
            username=username,
            overall_stats=OverallStats(
                total_words=total_words,
                correct_words=correct_words,
                overall_accuracy=round(correct_words / total_words * 100, 2) if total_words else 0.0,
                total_sessions=len(session_analyses),
            ),
            aggregate_insights=AggregateInsights(
                top_problem_letters=aggregate.problematic_letters[:REPORT_LIMIT],
                strengths=aggregate.strengths[:REPORT_LIMIT],
                confusion_patterns=aggregate.confusion_patterns[:REPORT_LIMIT],
                recommendations=aggregate.recommendations,
                emotional_state=aggregate.emotional_state,
                encouragement=aggregate.encouragement,
            ),
            session_analyses=session_analyses,
            progress_timeline=sorted(timeline, key=lambda point: _as_utc(point.date)),
            has_data=total_words > 0,
        )


def _as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


# Global instance
typing_service = TypingService(progress_store)
