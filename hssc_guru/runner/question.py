from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    options: tuple[str, ...]
    correct_index: int
    explanation: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))
        if not self.options:
            raise ValueError(f"Question {self.id} has no options")
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"Question {self.id} correct_index {self.correct_index} "
                f"outside {len(self.options)} options"
            )

    def is_correct(self, chosen_index: int | None) -> bool:
        return chosen_index is not None and chosen_index == self.correct_index


def score_answers(
    questions: Sequence[Question], answers: dict[str, int | None]
) -> int:
    """Count questions whose chosen option matches the correct one."""
    return sum(1 for q in questions if q.is_correct(answers.get(q.id)))
