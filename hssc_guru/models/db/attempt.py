"""
Submitted attempts.

An attempt row and all of its answer rows are written in one transaction
when a quiz session is submitted, and never updated afterwards.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hssc_guru.database import Base
from hssc_guru.runner.submitter import MAX_TIME_SPENT_SECONDS

if TYPE_CHECKING:
    from hssc_guru.models.db.test import MockTest
    from hssc_guru.models.db.user import User


class Attempt(Base):
    __tablename__ = "attempts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # exactly one of test_id (mock test) and topic (practice) is set
    test_id: Mapped[str | None] = mapped_column(
        ForeignKey("tests.id", ondelete="CASCADE"), index=True
    )
    topic: Mapped[str | None] = mapped_column(String(100))
    # kept for the statistics when the account is deleted
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    score: Mapped[int] = mapped_column(default=0)
    question_count: Mapped[int] = mapped_column(default=0)

    user: Mapped[User | None] = relationship(back_populates="attempts")
    test: Mapped[MockTest | None] = relationship()
    answers: Mapped[list[AttemptAnswer]] = relationship(
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="AttemptAnswer.question_index",
    )

    @property
    def percent_correct(self) -> float:
        return self.score * 100.0 / self.question_count if self.question_count else 0.0

    @property
    def answered_count(self) -> int:
        return sum(1 for a in self.answers if a.chosen_index is not None)

    @property
    def total_time_sec(self) -> int:
        return sum(a.time_spent_sec for a in self.answers)


class AttemptAnswer(Base):
    """One question of an attempt, in the order it was shown."""

    __tablename__ = "attempt_answers"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question"),
        CheckConstraint(
            f"time_spent_sec BETWEEN 0 AND {MAX_TIME_SPENT_SECONDS}",
            name="ck_attempt_answer_time_spent",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    attempt_id: Mapped[str] = mapped_column(
        ForeignKey("attempts.id", ondelete="CASCADE"), index=True
    )
    question_id: Mapped[str] = mapped_column(ForeignKey("questions.id", ondelete="CASCADE"))
    question_index: Mapped[int]
    chosen_index: Mapped[int | None]
    is_correct: Mapped[bool] = mapped_column(default=False)
    time_spent_sec: Mapped[int] = mapped_column(default=0)

    attempt: Mapped[Attempt] = relationship(back_populates="answers")
