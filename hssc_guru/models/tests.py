"""Pydantic models for mock tests."""
from pydantic import BaseModel


class MockTestSummary(BaseModel):
    """Mock test listing entry."""

    id: str
    slug: str
    name: str
    description: str | None = None
    durationMinutes: int
    questionCount: int


class MockTestDetail(MockTestSummary):
    """Mock test with the user's resumable state."""

    hasDraft: bool = False


class TopicSummary(BaseModel):
    """A question bank topic available for practice."""

    topic: str
    questionCount: int
