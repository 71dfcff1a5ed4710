"""Boundary between the runner and attempt persistence."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

# Longest time one question may be credited with, in seconds
MAX_TIME_SPENT_SECONDS = 36000


def clamp_time_spent(seconds: int | None) -> int:
    return max(0, min(MAX_TIME_SPENT_SECONDS, seconds or 0))


@dataclass(frozen=True)
class AnswerRecordData:
    question_id: str
    question_index: int
    chosen_index: int | None
    is_correct: bool
    time_spent_sec: int


@dataclass(frozen=True)
class AttemptSubmission:
    """Scored attempt; practice attempts carry a topic instead of a test id."""

    test_id: str | None
    started_at: str
    finished_at: str
    score: int
    answers: list[AnswerRecordData] = field(default_factory=list)
    topic: str | None = None

    @property
    def question_count(self) -> int:
        return len(self.answers)


class AttemptSubmitter(Protocol):
    """Writes one attempt with its answers and returns the attempt id.

    Raises AuthenticationRequired when identity is None and SubmissionError
    when the store rejects the write.
    """

    def submit(self, identity: str | None, submission: AttemptSubmission) -> str: ...
