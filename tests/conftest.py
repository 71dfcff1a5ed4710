import os
import tempfile

# Keep config from creating data directories in the working tree
os.environ.setdefault("GURU_DATA_DIR", tempfile.mkdtemp(prefix="guru-tests-"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hssc_guru.models.db  # noqa: F401,E402
from hssc_guru.database import Base  # noqa: E402
from hssc_guru.runner import (  # noqa: E402
    AuthenticationRequired,
    DraftStore,
    MemoryStorage,
    Question,
    QuizSession,
)


class RecordingSubmitter:
    """In-memory AttemptSubmitter that can be told to fail."""

    def __init__(self) -> None:
        self.calls = []
        self.error: Exception | None = None

    def submit(self, identity, submission):
        if identity is None:
            raise AuthenticationRequired("Login required to submit")
        if self.error is not None:
            raise self.error
        self.calls.append((identity, submission))
        return f"attempt-{len(self.calls)}"


class FakeTimer:
    def __init__(self) -> None:
        self.running = False
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        self.running = True
        self.starts += 1

    def stop(self) -> None:
        self.running = False
        self.stops += 1


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def questions() -> list[Question]:
    return [
        Question(id="q1", text="Capital of Haryana?", options=("Chandigarh", "Hisar", "Karnal", "Rohtak"), correct_index=0),
        Question(id="q2", text="River through Panipat?", options=("Ganga", "Yamuna", "Ghaggar", "Sutlej"), correct_index=1),
        Question(id="q3", text="Haryana formed in?", options=("1956", "1960", "1966", "1970"), correct_index=2),
    ]


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def submitter() -> RecordingSubmitter:
    return RecordingSubmitter()


@pytest.fixture
def make_session(questions, storage, submitter):
    """Build a QuizSession over shared storage, like reopening the same tab."""

    def _make(
        duration_minutes: int = 10,
        question_list=None,
        identity: str | None = "7",
        timer=None,
    ) -> QuizSession:
        return QuizSession(
            test_id="mock-1",
            questions=questions if question_list is None else question_list,
            duration_minutes=duration_minutes,
            drafts=DraftStore(storage),
            submitter=submitter,
            identity=lambda: identity,
            timer=timer,
            clock=lambda: "2026-01-01T10:00:00+00:00",
        )

    return _make


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()
