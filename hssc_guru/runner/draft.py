"""
Draft persistence for in-progress attempts.

A draft is a convenience copy of the runner state, written on every change so
that a restarted session resumes where it stopped. Nothing here raises to the
caller: a draft that cannot be written is skipped, a draft that cannot be read
is treated as absent.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from hssc_guru.utils.json_utils import compact_dump, json_load

logger = logging.getLogger(__name__)

DRAFT_VERSION = 1
DRAFT_KEY_PREFIX = "draft:"


@dataclass
class AttemptDraft:
    """Snapshot of a running attempt, keyed by question id."""

    index: int = 0
    seconds_remaining: int = 0
    answers: dict[str, int | None] = field(default_factory=dict)
    marked: dict[str, bool] = field(default_factory=dict)
    time_spent: dict[str, int] = field(default_factory=dict)
    started_at: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Serialize to the versioned storage shape."""
        payload: dict[str, object] = {
            "v": DRAFT_VERSION,
            "idx": self.index,
            "secsLeft": self.seconds_remaining,
            "answers": dict(self.answers),
            "marked": dict(self.marked),
            "timeSpent": dict(self.time_spent),
        }
        if self.started_at:
            payload["startedAt"] = self.started_at
        return payload

    @classmethod
    def from_payload(cls, payload: object) -> AttemptDraft | None:
        """Parse a stored payload; None for other versions or bad shapes."""
        if not isinstance(payload, dict) or payload.get("v") != DRAFT_VERSION:
            return None

        index = payload.get("idx", 0)
        seconds = payload.get("secsLeft", 0)
        if not _is_int(index) or not _is_int(seconds):
            return None

        answers = payload.get("answers", {})
        marked = payload.get("marked", {})
        time_spent = payload.get("timeSpent", {})
        if not all(isinstance(m, dict) for m in (answers, marked, time_spent)):
            return None
        if not all(v is None or _is_int(v) for v in answers.values()):
            return None
        if not all(isinstance(v, bool) for v in marked.values()):
            return None
        if not all(_is_int(v) for v in time_spent.values()):
            return None

        started_at = payload.get("startedAt")
        if started_at is not None and not isinstance(started_at, str):
            started_at = None

        return cls(
            index=index,
            seconds_remaining=seconds,
            answers={str(k): v for k, v in answers.items()},
            marked={str(k): v for k, v in marked.items()},
            time_spent={str(k): v for k, v in time_spent.items()},
            started_at=started_at,
        )

    def copy(self) -> AttemptDraft:
        return copy.deepcopy(self)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class DraftStorage(Protocol):
    """String key-value backend, shaped like browser local storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage, lives as long as the process."""

    def __init__(self) -> None:
        self.items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileStorage:
    """One JSON file per key inside a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        # Write then rename so a crash never leaves half a draft behind
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove_item(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class DraftStore:
    """Best-effort read/write of one AttemptDraft per test id."""

    def __init__(self, storage: DraftStorage) -> None:
        self.storage = storage

    @staticmethod
    def key_for(test_id: str) -> str:
        return f"{DRAFT_KEY_PREFIX}{test_id}"

    def save(self, test_id: str, draft: AttemptDraft) -> None:
        try:
            self.storage.set_item(self.key_for(test_id), compact_dump(draft.to_payload()))
        except Exception as e:
            logger.warning(f"Failed to save draft for test {test_id}: {e}")

    def load(self, test_id: str) -> AttemptDraft | None:
        try:
            raw = self.storage.get_item(self.key_for(test_id))
        except Exception as e:
            logger.warning(f"Failed to read draft for test {test_id}: {e}")
            return None
        if not raw:
            return None

        try:
            payload = json_load(raw)
        except ValueError:
            logger.info(f"Ignoring corrupt draft for test {test_id}")
            return None

        draft = AttemptDraft.from_payload(payload)
        if draft is None:
            logger.info(f"Ignoring incompatible draft for test {test_id}")
        return draft

    def clear(self, test_id: str) -> None:
        try:
            self.storage.remove_item(self.key_for(test_id))
        except Exception as e:
            logger.warning(f"Failed to clear draft for test {test_id}: {e}")
