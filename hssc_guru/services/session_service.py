"""Live quiz sessions, one per user and test."""
import logging
from typing import Callable

from sqlalchemy.orm import Session as DbSession

from hssc_guru.config import LOGIN_PATH, TICK_INTERVAL_SECONDS
from hssc_guru.models.db.test import MockTest
from hssc_guru.runner import (
    AttemptSubmitter,
    DraftStorage,
    DraftStore,
    IntervalTimer,
    Question,
    QuizSession,
    SessionState,
)
from hssc_guru.services.auth_service import has_active_session
from hssc_guru.services.test_service import normalize_topic, practice_duration, resolve_duration

logger = logging.getLogger(__name__)


def practice_key(topic: str) -> str:
    """Registry and draft key of a topic practice session."""
    return f"practice:{normalize_topic(topic)}"


class SessionRegistry:
    """
    Owns the running QuizSession of every (user, test) pair.

    A submitted session stays registered until its outcome has been read
    once (see `release`); opening the same test again replaces any finished
    session with a fresh one.
    """

    def __init__(
        self,
        session_factory: Callable[[], DbSession],
        submitter: AttemptSubmitter,
        storage_factory: Callable[[int], DraftStorage],
        tick_interval: float | None = TICK_INTERVAL_SECONDS,
        login_path: str = LOGIN_PATH,
    ) -> None:
        self.session_factory = session_factory
        self.submitter = submitter
        self.storage_factory = storage_factory
        self.tick_interval = tick_interval
        self.login_path = login_path
        self._sessions: dict[tuple[int, str], QuizSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def drafts_for(self, user_id: int) -> DraftStore:
        return DraftStore(self.storage_factory(user_id))

    def get(self, user_id: int, test_id: str) -> QuizSession | None:
        return self._sessions.get((user_id, test_id))

    def open(self, user_id: int, test: MockTest, questions: list[Question]) -> QuizSession:
        """Return the live session for this test, starting one if needed."""
        return self._launch(
            user_id,
            test.id,
            questions,
            duration_minutes=resolve_duration(test.duration_minutes),
            label=test.slug,
        )

    def open_practice(self, user_id: int, topic: str, questions: list[Question]) -> QuizSession:
        """Return the live practice session for a topic, starting one if needed."""
        return self._launch(
            user_id,
            practice_key(topic),
            questions,
            duration_minutes=practice_duration(len(questions)),
            label=f"practice-{normalize_topic(topic)}",
            topic=topic.strip(),
        )

    def release(self, user_id: int, test_id: str) -> None:
        """Forget a session once its submitted outcome has been handed out."""
        session = self._sessions.get((user_id, test_id))
        if session is not None and session.state is SessionState.SUBMITTED:
            self.discard(user_id, test_id)

    def discard(self, user_id: int, test_id: str) -> None:
        session = self._sessions.pop((user_id, test_id), None)
        if session is not None and session.timer is not None:
            session.timer.stop()

    def shutdown(self) -> None:
        """Stop every timer; drafts stay on disk for the next start."""
        for session in self._sessions.values():
            if session.timer is not None:
                session.timer.stop()
        self._sessions.clear()

    def _launch(
        self,
        user_id: int,
        test_id: str,
        questions: list[Question],
        duration_minutes: int,
        label: str,
        topic: str | None = None,
    ) -> QuizSession:
        key = (user_id, test_id)
        existing = self._sessions.get(key)
        if existing is not None and existing.state in (
            SessionState.RUNNING,
            SessionState.SUBMITTING,
        ):
            return existing
        self.discard(user_id, test_id)
        self._prune(user_id)

        session = QuizSession(
            test_id=test_id,
            questions=questions,
            duration_minutes=duration_minutes,
            drafts=self.drafts_for(user_id),
            submitter=self.submitter,
            identity=self._identity_for(user_id),
            login_path=self.login_path,
            topic=topic,
        )
        if self.tick_interval:
            session.timer = IntervalTimer(
                self.tick_interval,
                self._tick_callback(key),
                name=f"quiz-{user_id}-{label}",
            )

        session.start()
        self._sessions[key] = session
        logger.info(f"Opened session for user {user_id} on {label}")
        return session

    def _prune(self, user_id: int) -> None:
        """Drop this user's submitted sessions whose outcome was never read."""
        stale = [
            test_id
            for (owner, test_id), session in self._sessions.items()
            if owner == user_id and session.state is SessionState.SUBMITTED
        ]
        for test_id in stale:
            self.discard(user_id, test_id)

    def _tick_callback(self, key: tuple[int, str]) -> Callable[[], None]:
        def _tick() -> None:
            session = self._sessions.get(key)
            if session is None:
                return
            outcome = session.tick()
            if outcome is not None:
                logger.info(
                    f"Auto-submit for user {key[0]} on test {key[1]}: {outcome.status.value}"
                )
        return _tick

    def _identity_for(self, user_id: int) -> Callable[[], str | None]:
        def _identity() -> str | None:
            db = self.session_factory()
            try:
                return str(user_id) if has_active_session(db, user_id) else None
            finally:
                db.close()
        return _identity
