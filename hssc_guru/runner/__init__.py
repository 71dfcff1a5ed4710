"""Timed quiz session runner."""
from hssc_guru.runner.draft import (
    DRAFT_VERSION,
    AttemptDraft,
    DraftStorage,
    DraftStore,
    FileStorage,
    MemoryStorage,
)
from hssc_guru.runner.errors import (
    AuthenticationRequired,
    ConfirmationRequired,
    EmptyQuestionSetError,
    InvalidOptionError,
    QuizRunnerError,
    SessionNotRunningError,
    SubmissionError,
    UnknownQuestionError,
)
from hssc_guru.runner.question import Question, score_answers
from hssc_guru.runner.session import (
    PaletteStatus,
    PaletteTile,
    QuizSession,
    SessionState,
    SubmitOutcome,
    SubmitStatus,
)
from hssc_guru.runner.submitter import (
    MAX_TIME_SPENT_SECONDS,
    AnswerRecordData,
    AttemptSubmission,
    AttemptSubmitter,
)
from hssc_guru.runner.timer import IntervalTimer

__all__ = [
    "DRAFT_VERSION",
    "AttemptDraft",
    "DraftStorage",
    "DraftStore",
    "FileStorage",
    "MemoryStorage",
    "AuthenticationRequired",
    "ConfirmationRequired",
    "EmptyQuestionSetError",
    "InvalidOptionError",
    "QuizRunnerError",
    "SessionNotRunningError",
    "SubmissionError",
    "UnknownQuestionError",
    "Question",
    "score_answers",
    "PaletteStatus",
    "PaletteTile",
    "QuizSession",
    "SessionState",
    "SubmitOutcome",
    "SubmitStatus",
    "MAX_TIME_SPENT_SECONDS",
    "AnswerRecordData",
    "AttemptSubmission",
    "AttemptSubmitter",
    "IntervalTimer",
]
