"""Pydantic models for quiz sessions."""
from pydantic import BaseModel, Field

from hssc_guru.runner import QuizSession, SubmitOutcome


class NavigateRequest(BaseModel):
    """Jump to a question by position."""

    index: int


class SelectRequest(BaseModel):
    """Choose an option for a question."""

    optionIndex: int = Field(..., ge=0)


class SubmitRequest(BaseModel):
    """Manual submission request."""

    confirm: bool = False


class QuestionView(BaseModel):
    """Question as shown during an attempt (no answer key)."""

    id: str
    text: str
    options: list[str]


class PaletteTileView(BaseModel):
    index: int
    questionId: str
    status: str
    isCurrent: bool


class SessionView(BaseModel):
    """Full state of a running quiz session."""

    testId: str
    topic: str | None = None
    state: str
    index: int
    total: int
    secondsRemaining: int
    clock: str
    answeredCount: int
    current: QuestionView
    answers: dict[str, int | None]
    marked: dict[str, bool]
    timeSpent: dict[str, int]
    palette: list[PaletteTileView]
    confirmBeforeLeave: bool
    attemptId: str | None = None
    lastError: str | None = None

    @classmethod
    def from_session(cls, session: QuizSession) -> "SessionView":
        current = session.current_question
        return cls(
            testId=session.test_id,
            topic=session.topic,
            state=session.state.value,
            index=session.index,
            total=session.total,
            secondsRemaining=session.seconds_remaining,
            clock=session.clock_display,
            answeredCount=session.answered_count,
            current=QuestionView(
                id=current.id, text=current.text, options=list(current.options)
            ),
            answers=dict(session.answers),
            marked=dict(session.marked),
            timeSpent=dict(session.time_spent),
            palette=[
                PaletteTileView(
                    index=tile.index,
                    questionId=tile.question_id,
                    status=tile.status.value,
                    isCurrent=tile.is_current,
                )
                for tile in session.palette()
            ],
            confirmBeforeLeave=session.confirm_before_leave,
            attemptId=session.attempt_id,
            lastError=session.last_error,
        )


class SubmitResponse(BaseModel):
    """Outcome of a submission."""

    status: str
    attemptId: str | None = None
    redirect: str | None = None
    error: str | None = None
    automatic: bool = False

    @classmethod
    def from_outcome(cls, outcome: SubmitOutcome) -> "SubmitResponse":
        return cls(
            status=outcome.status.value,
            attemptId=outcome.attempt_id,
            redirect=outcome.redirect,
            error=outcome.error,
            automatic=outcome.automatic,
        )
