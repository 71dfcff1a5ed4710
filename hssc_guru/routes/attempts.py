"""Attempt results and dashboard endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DbSession

from hssc_guru.database import get_db
from hssc_guru.dependencies import get_current_user
from hssc_guru.models import AnswerResult, AttemptDetail, AttemptSummary, DashboardResponse
from hssc_guru.models.db.attempt import Attempt
from hssc_guru.models.db.user import User
from hssc_guru.services.attempt_service import (
    count_attempts,
    get_attempt,
    get_attempts_by_user,
    get_question_records,
    get_user_totals,
)
from hssc_guru.utils import validate_id

router = APIRouter(prefix="/api/attempts", tags=["attempts"])


def _summary_fields(attempt: Attempt) -> dict[str, object]:
    return {
        "id": attempt.id,
        "testId": attempt.test_id,
        "topic": attempt.topic,
        "testSlug": attempt.test.slug if attempt.test else None,
        "testName": attempt.test.name if attempt.test else None,
        "startedAt": attempt.started_at,
        "finishedAt": attempt.finished_at,
        "score": attempt.score,
        "questionCount": attempt.question_count,
        "percent": round(attempt.percent_correct, 2),
    }


@router.get("", response_model=DashboardResponse)
def list_my_attempts(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    test_id: str | None = Query(None, alias="testId"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> DashboardResponse:
    """Dashboard: the current user's attempts, newest first."""
    if test_id:
        test_id = validate_id("testId", test_id)

    attempts = get_attempts_by_user(db, current_user.id, test_id, limit, offset)
    totals = get_user_totals(db, current_user.id)
    return DashboardResponse(
        attempts=[AttemptSummary(**_summary_fields(a)) for a in attempts],
        total=count_attempts(db, user_id=current_user.id, test_id=test_id),
        averagePercent=totals["averagePercent"],
        bestScore=totals["bestScore"],
    )


@router.get("/{attempt_id}", response_model=AttemptDetail)
def get_attempt_result(
    attempt_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> AttemptDetail:
    """Results view of one attempt with the answer key."""
    attempt = get_attempt(db, validate_id("attemptId", attempt_id))
    if attempt is None or attempt.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Attempt not found")

    records = get_question_records(db, [a.question_id for a in attempt.answers])
    answers = []
    for answer in attempt.answers:
        record = records.get(answer.question_id)
        answers.append(
            AnswerResult(
                questionId=answer.question_id,
                questionIndex=answer.question_index,
                text=record.text if record else "",
                options=record.options if record else [],
                chosenIndex=answer.chosen_index,
                correctIndex=record.correct_index if record else -1,
                isCorrect=answer.is_correct,
                timeSpentSec=answer.time_spent_sec,
                explanation=record.explanation if record else None,
            )
        )

    return AttemptDetail(
        **_summary_fields(attempt),
        answeredCount=attempt.answered_count,
        totalTimeSec=attempt.total_time_sec,
        answers=answers,
    )
