"""API routes for adaptive typing practice."""

from fastapi import APIRouter, HTTPException

from joyverse.engine.word_bank import TYPING_WORDS
from joyverse.models.analytics import (
    ChildTypingReport,
    NextWord,
    NextWordRequest,
    RealTimeFeedback,
    RealTimeFeedbackRequest,
    SaveResultsResponse,
    SessionRef,
    TypingAnalysis,
    TypingResultsCreate,
)
from joyverse.services.practice import GameMismatchError, NoResultsError, typing_service

router = APIRouter(prefix="/typing", tags=["typing"])


# ========== Words ==========

@router.get("/words")
async def get_word_bank():
    """Get the practice words of every difficulty tier."""
    return {tier.value: list(words) for tier, words in TYPING_WORDS.items()}


@router.post("/initial-word", response_model=NextWord)
async def generate_initial_word(request: SessionRef):
    """Get the first word of a session."""
    return typing_service.initial_word(request.session_id)


@router.post("/next-word", response_model=NextWord)
async def generate_next_word(request: NextWordRequest):
    """Get the next word adapted to the child's typing history."""
    return typing_service.next_word(
        request.session_id,
        request.typing_history,
        request.difficulty_level,
    )


# ========== Results and analysis ==========

@router.post("/results", response_model=SaveResultsResponse)
async def save_typing_results(request: TypingResultsCreate):
    """Save typing attempts and refresh the session analysis."""
    try:
        analysis = await typing_service.save_results(
            request.therapist_code,
            request.username,
            request.session_id,
            request.results,
        )
    except GameMismatchError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if analysis is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return SaveResultsResponse(total_words=analysis.total_words, analysis=analysis)


@router.post("/analyze-session", response_model=TypingAnalysis)
async def analyze_session(request: SessionRef):
    """Recompute the analysis of a session from its full history."""
    try:
        analysis = await typing_service.analyze_session(
            request.therapist_code,
            request.username,
            request.session_id,
        )
    except NoResultsError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if analysis is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return analysis


@router.post("/real-time-feedback", response_model=RealTimeFeedback)
async def real_time_feedback(request: RealTimeFeedbackRequest):
    """Quick feedback on the attempts of a session in progress."""
    if not request.current_results:
        raise HTTPException(status_code=400, detail="No results provided")
    return typing_service.real_time_feedback(request.current_results)


@router.get("/children/{therapist_code}/{username}/analysis", response_model=ChildTypingReport)
async def get_child_analysis(therapist_code: str, username: str):
    """Get typing progress for a child across all sessions."""
    report = await typing_service.child_report(therapist_code, username)
    if not report:
        raise HTTPException(status_code=404, detail="Child not found")
    return report
