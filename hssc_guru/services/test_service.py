"""Service layer for mock tests and their question sets."""
import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session as DbSession

from hssc_guru.config import (
    DEFAULT_DURATION_MINUTES,
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    PRACTICE_DEFAULT_LIMIT,
    PRACTICE_MAX_LIMIT,
)
from hssc_guru.models.db.test import MockTest, MockTestQuestion, QuestionRecord
from hssc_guru.runner import Question

logger = logging.getLogger(__name__)


def resolve_duration(minutes: int | None) -> int:
    """Effective duration in minutes, clamped to the allowed range."""
    if minutes is None:
        minutes = DEFAULT_DURATION_MINUTES
    return max(MIN_DURATION_MINUTES, min(MAX_DURATION_MINUTES, minutes))


def list_tests(db: DbSession) -> list[MockTest]:
    """List all tests ordered by name."""
    return list(db.execute(select(MockTest).order_by(MockTest.name)).scalars().all())


def get_test_by_slug(db: DbSession, slug: str) -> MockTest | None:
    """Get test by slug."""
    return db.execute(
        select(MockTest).where(MockTest.slug == slug)
    ).scalar_one_or_none()


def count_questions(db: DbSession, test_id: str) -> int:
    """Count questions attached to a test."""
    return db.execute(
        select(func.count(MockTestQuestion.id)).where(MockTestQuestion.test_id == test_id)
    ).scalar() or 0


def to_question(record: QuestionRecord) -> Question:
    """Convert a question bank row into a runner question."""
    return Question(
        id=record.id,
        text=record.text,
        options=tuple(record.options),
        correct_index=record.correct_index,
        explanation=record.explanation,
    )


def load_question_set(db: DbSession, test: MockTest) -> list[Question]:
    """
    Load the ordered question list for a test.
    Rows that do not form a valid question are skipped.
    """
    rows = db.execute(
        select(QuestionRecord)
        .join(MockTestQuestion, MockTestQuestion.question_id == QuestionRecord.id)
        .where(MockTestQuestion.test_id == test.id)
        .order_by(MockTestQuestion.order_index, MockTestQuestion.id)
    ).scalars().all()

    questions = []
    for record in rows:
        try:
            questions.append(to_question(record))
        except ValueError as e:
            logger.warning(f"Skipping question {record.id} in test {test.slug}: {e}")
    return questions


def normalize_topic(topic: str) -> str:
    """Topics match case-insensitively; this is the comparison form."""
    return topic.strip().lower()


def list_topics(db: DbSession) -> list[tuple[str, int]]:
    """
    Topics of the question bank with their question counts, by name.

    Spellings that differ only in case or surrounding spaces are one topic,
    shown under its most used spelling.
    """
    rows = db.execute(
        select(QuestionRecord.topic, func.count(QuestionRecord.id))
        .where(QuestionRecord.topic.is_not(None))
        .group_by(QuestionRecord.topic)
    ).all()

    spellings: dict[str, dict[str, int]] = {}
    for topic, count in rows:
        name = topic.strip()
        if not name:
            continue
        variants = spellings.setdefault(normalize_topic(name), {})
        variants[name] = variants.get(name, 0) + count

    topics = []
    for key in sorted(spellings):
        variants = spellings[key]
        name = min(variants, key=lambda v: (-variants[v], v))
        topics.append((name, sum(variants.values())))
    return topics


def load_practice_set(db: DbSession, topic: str, limit: int = PRACTICE_DEFAULT_LIMIT) -> list[Question]:
    """
    Load up to `limit` questions of one topic from the question bank.
    The order is stable so a resumed practice draft sees the same questions.
    """
    limit = max(1, min(PRACTICE_MAX_LIMIT, limit))
    rows = db.execute(
        select(QuestionRecord)
        .where(func.lower(func.trim(QuestionRecord.topic)) == normalize_topic(topic))
        .order_by(QuestionRecord.id)
    ).scalars().all()

    questions = []
    for record in rows:
        if len(questions) >= limit:
            break
        try:
            questions.append(to_question(record))
        except ValueError as e:
            logger.warning(f"Skipping question {record.id} in topic {topic}: {e}")
    return questions


def practice_duration(question_count: int) -> int:
    """One minute per practice question, clamped like any test duration."""
    return resolve_duration(question_count)


def create_test(
    db: DbSession,
    slug: str,
    name: str,
    questions: list[dict[str, Any]],
    duration_minutes: int | None = None,
    description: str | None = None,
) -> MockTest:
    """
    Create a test together with its questions.

    Each question is a mapping with `text`, `options`, `correct_index` and
    optional `explanation` / `topic`. Raises ValueError before writing
    anything when a question is malformed.
    """
    validated = []
    for order, item in enumerate(questions):
        correct_index = item.get("correct_index")
        if not isinstance(correct_index, int) or isinstance(correct_index, bool):
            raise ValueError(f"Question {order + 1}: correct_index must be an integer")
        question = Question(
            id=str(order),
            text=str(item.get("text", "")),
            options=tuple(str(option) for option in item.get("options", [])),
            correct_index=correct_index,
            explanation=item.get("explanation"),
        )
        if not question.text.strip():
            raise ValueError(f"Question {order + 1}: text is required")
        validated.append((question, item.get("topic")))

    test = MockTest(
        slug=slug,
        name=name,
        description=description,
        duration_minutes=duration_minutes,
    )
    db.add(test)
    db.flush()

    for order, (question, topic) in enumerate(validated):
        record = QuestionRecord(
            text=question.text,
            correct_index=question.correct_index,
            explanation=question.explanation,
            topic=topic,
        )
        record.options = list(question.options)
        db.add(record)
        db.flush()
        db.add(MockTestQuestion(test_id=test.id, question_id=record.id, order_index=order))

    db.commit()
    db.refresh(test)
    return test


def require_test(db: DbSession, slug: str) -> MockTest:
    """Get test by slug or fail with 404."""
    test = get_test_by_slug(db, slug)
    if test is None:
        from fastapi import HTTPException

        raise HTTPException(status_code=404, detail="Test not found")
    return test
