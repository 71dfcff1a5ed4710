"""
Quiz session state machine.

A QuizSession drives one timed attempt over an immutable, ordered question
list:

    LOADING -> RUNNING -> SUBMITTING -> SUBMITTED
                  ^            |
                  +------------+  (login required / store rejected the write)

Every mutation while RUNNING is written to the draft store, so a session
rebuilt from the same store resumes with the same index, clock, answers, marks
and per-question timing. All methods are expected to be called from a single
thread (the event loop that also drives the timer).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

from hssc_guru.runner.draft import AttemptDraft, DraftStore
from hssc_guru.runner.errors import (
    AuthenticationRequired,
    ConfirmationRequired,
    EmptyQuestionSetError,
    InvalidOptionError,
    SessionNotRunningError,
    SubmissionError,
    UnknownQuestionError,
)
from hssc_guru.runner.question import Question, score_answers
from hssc_guru.runner.submitter import (
    AnswerRecordData,
    AttemptSubmission,
    AttemptSubmitter,
    clamp_time_spent,
)
from hssc_guru.utils.time_utils import format_clock, utc_now

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    """Lifecycle state of a quiz session."""

    LOADING = "loading"
    RUNNING = "running"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERRORED = "errored"


class SubmitStatus(str, enum.Enum):
    """Result of a submission attempt."""

    SUBMITTED = "submitted"
    LOGIN_REQUIRED = "login_required"
    FAILED = "failed"


class PaletteStatus(str, enum.Enum):
    ANSWERED = "answered"
    MARKED = "marked"
    MARKED_ANSWERED = "marked_answered"
    UNANSWERED = "unanswered"


@dataclass(frozen=True)
class SubmitOutcome:
    status: SubmitStatus
    attempt_id: str | None = None
    redirect: str | None = None
    error: str | None = None
    automatic: bool = False


@dataclass(frozen=True)
class PaletteTile:
    index: int
    question_id: str
    status: PaletteStatus
    is_current: bool


class Ticker(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


class QuizSession:
    """Timed attempt over a fixed question list."""

    def __init__(
        self,
        test_id: str,
        questions: Sequence[Question],
        duration_minutes: int,
        drafts: DraftStore,
        submitter: AttemptSubmitter,
        identity: Callable[[], str | None],
        timer: Ticker | None = None,
        login_path: str = "/login",
        results_path: str = "/results/{attempt_id}",
        clock: Callable[[], str] = utc_now,
        topic: str | None = None,
    ) -> None:
        # draft key and registry key; practice sessions use "practice:<topic>"
        self.test_id = test_id
        self.topic = topic
        self.questions: tuple[Question, ...] = tuple(questions)
        self.duration_minutes = duration_minutes
        self.drafts = drafts
        self.submitter = submitter
        self.identity = identity
        self.timer = timer
        self.login_path = login_path
        self.results_path = results_path
        self.clock = clock

        self.state = SessionState.LOADING
        self.index = 0
        self.seconds_remaining = max(0, duration_minutes * 60)
        self.answers: dict[str, int | None] = {}
        self.marked: dict[str, bool] = {}
        self.time_spent: dict[str, int] = {}
        self.started_at: str | None = None
        self.attempt_id: str | None = None
        self.last_error: str | None = None
        self._auto_submitted = False
        self._by_id = {q.id: q for q in self.questions}

    # Lifecycle

    def start(self) -> None:
        """Enter RUNNING, restoring a saved draft when one exists."""
        if self.state is not SessionState.LOADING:
            raise SessionNotRunningError(f"Session already {self.state.value}")
        if not self.questions:
            self.state = SessionState.ERRORED
            raise EmptyQuestionSetError()

        draft = self.drafts.load(self.test_id)
        if draft is not None:
            self._restore(draft)
            logger.info(
                f"Resumed draft for test {self.test_id} at question {self.index + 1}, "
                f"{self.seconds_remaining}s left"
            )
        if self.started_at is None:
            self.started_at = self.clock()
        for q in self.questions:
            self.answers.setdefault(q.id, None)
            self.marked.setdefault(q.id, False)
            self.time_spent.setdefault(q.id, 0)

        self.state = SessionState.RUNNING
        if self.timer is not None:
            self.timer.start()

    def _restore(self, draft: AttemptDraft) -> None:
        self.index = min(max(draft.index, 0), self.total - 1)
        self.seconds_remaining = max(0, draft.seconds_remaining)
        self.answers = dict(draft.answers)
        for qid, chosen in self.answers.items():
            question = self._by_id.get(qid)
            if question is not None and chosen is not None and not 0 <= chosen < len(question.options):
                logger.warning(f"Dropping stale answer {chosen} for question {qid}")
                self.answers[qid] = None
        self.marked = dict(draft.marked)
        self.time_spent = dict(draft.time_spent)
        self.started_at = draft.started_at

    def tick(self) -> SubmitOutcome | None:
        """Advance the clock by one second.

        Returns the auto-submission outcome on the tick that exhausts the
        clock, None otherwise. Ticks outside RUNNING change nothing.
        """
        if self.state is not SessionState.RUNNING:
            return None

        self.seconds_remaining = max(0, self.seconds_remaining - 1)
        qid = self.current_question.id
        self.time_spent[qid] = self.time_spent.get(qid, 0) + 1
        self._persist()

        if self.seconds_remaining == 0 and not self._auto_submitted:
            self._auto_submitted = True
            logger.info(f"Time is up for test {self.test_id}, submitting")
            return self._submit(automatic=True)
        return None

    # User actions

    def navigate(self, index: int) -> None:
        self._require_running()
        if 0 <= index < self.total:
            self.index = index
            self._persist()

    def next_question(self) -> None:
        self.navigate(self.index + 1)

    def previous_question(self) -> None:
        self.navigate(self.index - 1)

    def select(self, question_id: str, option_index: int) -> None:
        self._require_running()
        question = self.question(question_id)
        if not 0 <= option_index < len(question.options):
            raise InvalidOptionError(
                f"Option {option_index} out of range for question {question_id}"
            )
        self.answers[question_id] = option_index
        self._persist()

    def clear(self, question_id: str) -> None:
        self._require_running()
        self.question(question_id)
        self.answers[question_id] = None
        self._persist()

    def toggle_mark(self, question_id: str) -> bool:
        self._require_running()
        self.question(question_id)
        flag = not self.marked.get(question_id, False)
        self.marked[question_id] = flag
        self._persist()
        return flag

    def submit(self, confirmed: bool = False) -> SubmitOutcome:
        """Manual submission; the user must confirm it."""
        self._require_running()
        if not confirmed:
            raise ConfirmationRequired("Submit your answers now?")
        return self._submit(automatic=False)

    # Submission

    def _submit(self, automatic: bool) -> SubmitOutcome:
        self.state = SessionState.SUBMITTING
        if self.timer is not None:
            self.timer.stop()

        try:
            identity = self.identity()
            if identity is None:
                raise AuthenticationRequired("Login required to submit")
            attempt_id = self.submitter.submit(identity, self.build_submission())
        except AuthenticationRequired:
            logger.info(f"Submission for test {self.test_id} needs login")
            self._resume()
            return SubmitOutcome(
                SubmitStatus.LOGIN_REQUIRED,
                redirect=self.login_path,
                automatic=automatic,
            )
        except SubmissionError as e:
            logger.warning(f"Submission for test {self.test_id} failed: {e}")
            self.last_error = str(e)
            self._resume()
            return SubmitOutcome(
                SubmitStatus.FAILED, error=self.last_error, automatic=automatic
            )
        except Exception:
            self._resume()
            raise

        self.state = SessionState.SUBMITTED
        self.attempt_id = attempt_id
        self.last_error = None
        self.drafts.clear(self.test_id)
        logger.info(f"Submitted attempt {attempt_id} for test {self.test_id}")
        return SubmitOutcome(
            SubmitStatus.SUBMITTED,
            attempt_id=attempt_id,
            redirect=self.results_path.format(attempt_id=attempt_id),
            automatic=automatic,
        )

    def _resume(self) -> None:
        self.state = SessionState.RUNNING
        # with the clock at zero only a manual submit can end the session
        if self.timer is not None and self.seconds_remaining > 0:
            self.timer.start()

    def build_submission(self) -> AttemptSubmission:
        """Score the current answers and build the records to persist."""
        records = []
        for index, q in enumerate(self.questions):
            chosen = self.answers.get(q.id)
            records.append(
                AnswerRecordData(
                    question_id=q.id,
                    question_index=index,
                    chosen_index=chosen,
                    is_correct=q.is_correct(chosen),
                    time_spent_sec=clamp_time_spent(self.time_spent.get(q.id)),
                )
            )
        return AttemptSubmission(
            test_id=None if self.topic else self.test_id,
            topic=self.topic,
            started_at=self.started_at or self.clock(),
            finished_at=self.clock(),
            score=score_answers(self.questions, self.answers),
            answers=records,
        )

    # Views

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Question:
        return self.questions[self.index]

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.questions if self.answers.get(q.id) is not None)

    @property
    def clock_display(self) -> str:
        return format_clock(self.seconds_remaining)

    @property
    def confirm_before_leave(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def auto_submitted(self) -> bool:
        return self._auto_submitted

    def question(self, question_id: str) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise UnknownQuestionError(question_id) from None

    def palette(self) -> list[PaletteTile]:
        tiles = []
        for i, q in enumerate(self.questions):
            answered = self.answers.get(q.id) is not None
            if self.marked.get(q.id):
                status = PaletteStatus.MARKED_ANSWERED if answered else PaletteStatus.MARKED
            elif answered:
                status = PaletteStatus.ANSWERED
            else:
                status = PaletteStatus.UNANSWERED
            tiles.append(PaletteTile(i, q.id, status, i == self.index))
        return tiles

    def snapshot(self) -> AttemptDraft:
        return AttemptDraft(
            index=self.index,
            seconds_remaining=self.seconds_remaining,
            answers=dict(self.answers),
            marked=dict(self.marked),
            time_spent=dict(self.time_spent),
            started_at=self.started_at,
        )

    def _persist(self) -> None:
        self.drafts.save(self.test_id, self.snapshot())

    def _require_running(self) -> None:
        if self.state is not SessionState.RUNNING:
            raise SessionNotRunningError(f"Session is {self.state.value}")
