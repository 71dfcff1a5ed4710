"""Service layer for attempts using the SQL database."""
import logging
import uuid
from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession, joinedload

from hssc_guru.models.db.attempt import Attempt, AttemptAnswer
from hssc_guru.models.db.test import QuestionRecord
from hssc_guru.runner import AttemptSubmission, AuthenticationRequired, SubmissionError
from hssc_guru.runner.submitter import clamp_time_spent
from hssc_guru.utils import parse_iso_timestamp

logger = logging.getLogger(__name__)


def create_attempt(
    db: DBSession,
    user_id: int | None,
    submission: AttemptSubmission,
) -> Attempt:
    """
    Write an attempt and all of its answers in one transaction.

    Args:
        db: Database session
        user_id: Owner of the attempt
        submission: Scored answers produced by the quiz session
    """
    attempt = Attempt(
        id=uuid.uuid4().hex,
        test_id=submission.test_id,
        topic=submission.topic,
        user_id=user_id,
        score=submission.score,
        question_count=submission.question_count,
    )
    started_at = parse_iso_timestamp(submission.started_at)
    if started_at is not None:
        attempt.started_at = started_at
    attempt.finished_at = parse_iso_timestamp(submission.finished_at)

    for record in submission.answers:
        attempt.answers.append(
            AttemptAnswer(
                question_id=record.question_id,
                question_index=record.question_index,
                chosen_index=record.chosen_index,
                is_correct=record.is_correct,
                time_spent_sec=clamp_time_spent(record.time_spent_sec),
            )
        )

    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt


class DatabaseAttemptSubmitter:
    """AttemptSubmitter that writes to the SQL database."""

    def __init__(self, session_factory: Callable[[], DBSession]) -> None:
        self.session_factory = session_factory

    def submit(self, identity: str | None, submission: AttemptSubmission) -> str:
        if identity is None:
            raise AuthenticationRequired("Login required to submit")

        db = self.session_factory()
        try:
            attempt = create_attempt(db, int(identity), submission)
            return attempt.id
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save attempt for {submission.test_id or submission.topic}: {e}")
            raise SubmissionError("Failed to save attempt") from e
        finally:
            db.close()


def get_attempt(db: DBSession, attempt_id: str) -> Attempt | None:
    """Get attempt by ID with answers and test loaded."""
    return db.execute(
        select(Attempt)
        .options(joinedload(Attempt.answers), joinedload(Attempt.test))
        .where(Attempt.id == attempt_id)
    ).unique().scalar_one_or_none()


def get_attempts_by_user(
    db: DBSession,
    user_id: int,
    test_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Attempt]:
    """
    Get attempts for a user, newest first, optionally filtered by test_id.
    """
    query = (
        select(Attempt)
        .options(joinedload(Attempt.test))
        .where(Attempt.user_id == user_id)
    )

    if test_id:
        query = query.where(Attempt.test_id == test_id)

    query = query.order_by(Attempt.started_at.desc()).limit(limit).offset(offset)

    return list(db.execute(query).scalars().all())


def count_attempts(
    db: DBSession,
    user_id: int | None = None,
    test_id: str | None = None,
) -> int:
    """Count attempts matching criteria."""
    query = select(func.count(Attempt.id))

    if user_id:
        query = query.where(Attempt.user_id == user_id)
    if test_id:
        query = query.where(Attempt.test_id == test_id)

    return db.execute(query).scalar() or 0


def get_user_totals(db: DBSession, user_id: int) -> dict[str, float | int | None]:
    """Average percent and best score across a user's attempts."""
    row = db.execute(
        select(
            func.avg(Attempt.score * 100.0 / func.nullif(Attempt.question_count, 0)),
            func.max(Attempt.score),
        ).where(Attempt.user_id == user_id)
    ).one()
    average, best = row
    return {
        "averagePercent": round(float(average), 2) if average is not None else None,
        "bestScore": best,
    }


def get_question_records(db: DBSession, question_ids: list[str]) -> dict[str, QuestionRecord]:
    """Load question bank rows by id."""
    if not question_ids:
        return {}
    rows = db.execute(
        select(QuestionRecord).where(QuestionRecord.id.in_(question_ids))
    ).scalars().all()
    return {row.id: row for row in rows}
