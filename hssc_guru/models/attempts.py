"""Attempt-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel


class AnswerResult(BaseModel):
    """One question of a finished attempt, with the answer key."""

    questionId: str
    questionIndex: int
    text: str
    options: list[str]
    chosenIndex: int | None
    correctIndex: int
    isCorrect: bool
    timeSpentSec: int
    explanation: str | None = None


class AttemptSummary(BaseModel):
    """Attempt as listed on the dashboard."""

    id: str
    testId: str | None = None
    topic: str | None = None
    testSlug: str | None = None
    testName: str | None = None
    startedAt: datetime
    finishedAt: datetime | None
    score: int
    questionCount: int
    percent: float


class AttemptDetail(AttemptSummary):
    """Results view of a single attempt."""

    answeredCount: int
    totalTimeSec: int
    answers: list[AnswerResult]


class DashboardResponse(BaseModel):
    """Attempts of the current user with totals."""

    attempts: list[AttemptSummary]
    total: int
    averagePercent: float | None
    bestScore: int | None
