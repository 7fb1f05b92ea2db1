"""Typing analysis and feedback data models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from joyverse.models.attempt import Tier, utcnow


class Severity(str, Enum):
    """How much support the child's typing currently needs."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class EmotionalState(str, Enum):
    """Emotional state inferred from accuracy and pacing."""

    EXCELLING = "excelling"
    CONFIDENT = "confident"
    CHALLENGED = "challenged"
    STRUGGLING = "struggling"
    FRUSTRATED = "frustrated"


class ConfusionPattern(BaseModel):
    """A target letter the child typed as another letter."""

    letter: str
    confused_with: str
    frequency: int


class PerformanceMetrics(BaseModel):
    """Pacing and trend metrics over an attempt list."""

    avg_time_spent: int = 0
    total_hesitations: int = 0
    avg_hesitations: float = 0.0
    recent_accuracy: int = 0
    is_improving: bool = False


class AnalysisResult(BaseModel):
    """Derived analysis of an attempt list. Never edited by hand."""

    overall_accuracy: int = Field(default=0, ge=0, le=100)
    problematic_letters: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    confusion_patterns: list[ConfusionPattern] = Field(default_factory=list)
    severity: Severity = Severity.MILD
    emotional_state: EmotionalState = EmotionalState.CONFIDENT
    recommendations: list[str] = Field(default_factory=list)
    encouragement: str = ""
    performance_metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)


class TypingAnalysis(AnalysisResult):
    """Analysis cached on a session with the snapshot it was computed from."""

    analyzed_at: datetime = Field(default_factory=utcnow)
    total_words: int = 0
    correct_words: int = 0


class RealTimeFeedback(BaseModel):
    """Lightweight feedback over an in-progress attempt list."""

    accuracy: int
    emotional_state: EmotionalState
    encouragement: str
    needs_support: bool
    suggested_difficulty: Tier


class NextWord(BaseModel):
    """A selected practice word with the reasoning shown to the therapist."""

    word: str
    difficulty: Tier
    recent_accuracy: int = 0
    insight: str = ""
    is_initial: bool = False


class OverallStats(BaseModel):
    total_words: int
    correct_words: int
    overall_accuracy: float
    total_sessions: int


class AggregateInsights(BaseModel):
    top_problem_letters: list[str]
    strengths: list[str]
    confusion_patterns: list[ConfusionPattern]
    recommendations: list[str]
    emotional_state: EmotionalState
    encouragement: str


class SessionAnalysisEntry(BaseModel):
    session_id: str
    analysis: TypingAnalysis
    date: datetime


class ProgressPoint(BaseModel):
    date: datetime
    accuracy: int
    words_completed: int


class ChildTypingReport(BaseModel):
    """Typing progress for one child across all of their sessions."""

    username: str
    overall_stats: OverallStats
    aggregate_insights: AggregateInsights
    session_analyses: list[SessionAnalysisEntry]
    progress_timeline: list[ProgressPoint]
    has_data: bool


# ========== Request bodies ==========


class SessionRef(BaseModel):
    """Identifies a session on a therapist's roster."""

    therapist_code: str
    username: str
    session_id: str


class NextWordRequest(SessionRef):
    """Attempt records are read leniently by the typing service."""

    typing_history: list[Any]
    difficulty_level: Tier | None = None


class TypingResultsCreate(SessionRef):
    results: list[Any]


class RealTimeFeedbackRequest(BaseModel):
    current_results: list[Any] = Field(default_factory=list)


class SaveResultsResponse(BaseModel):
    total_words: int
    analysis: TypingAnalysis
