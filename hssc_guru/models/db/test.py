"""
MockTest, QuestionRecord and MockTestQuestion database models.

A test is an ordered selection of questions from the shared question bank.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hssc_guru.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class MockTest(Base):
    """Timed mock test."""

    __tablename__ = "tests"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    items: Mapped[list["MockTestQuestion"]] = relationship(
        "MockTestQuestion",
        back_populates="test",
        cascade="all, delete-orphan",
        order_by="MockTestQuestion.order_index",
    )

    def __repr__(self) -> str:
        return f"<MockTest(id={self.id}, slug='{self.slug}')>"


class QuestionRecord(Base):
    """Question bank entry."""

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    options_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    correct_index: Mapped[int] = mapped_column(nullable=False)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    topic: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    @property
    def options(self) -> list[str]:
        """Parse options from JSON."""
        if not self.options_json:
            return []
        try:
            value = json.loads(self.options_json)
        except (json.JSONDecodeError, TypeError):
            return []
        return [str(item) for item in value] if isinstance(value, list) else []

    @options.setter
    def options(self, value: list[str]) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(list(value), ensure_ascii=False)


class MockTestQuestion(Base):
    """Position of a question inside a test."""

    __tablename__ = "test_questions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    test_id: Mapped[str] = mapped_column(
        ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[str] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    order_index: Mapped[int] = mapped_column(nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("test_id", "question_id", name="uq_test_question"),
    )

    # Relationships
    test: Mapped["MockTest"] = relationship("MockTest", back_populates="items")
    question: Mapped["QuestionRecord"] = relationship("QuestionRecord")
