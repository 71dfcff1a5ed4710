import json

import pytest

from hssc_guru.runner import (
    AttemptDraft,
    ConfirmationRequired,
    DraftStore,
    EmptyQuestionSetError,
    InvalidOptionError,
    PaletteStatus,
    SessionNotRunningError,
    SessionState,
    SubmissionError,
    SubmitStatus,
    UnknownQuestionError,
)


def test_start_uses_full_duration(make_session) -> None:
    session = make_session(duration_minutes=10)
    session.start()

    assert session.state is SessionState.RUNNING
    assert session.index == 0
    assert session.seconds_remaining == 600
    assert session.clock_display == "10:00"
    assert session.answers == {"q1": None, "q2": None, "q3": None}
    assert session.marked == {"q1": False, "q2": False, "q3": False}
    assert session.time_spent == {"q1": 0, "q2": 0, "q3": 0}
    assert session.confirm_before_leave


def test_empty_question_set_refuses_to_start(make_session) -> None:
    session = make_session(question_list=[])
    with pytest.raises(EmptyQuestionSetError, match="No questions available"):
        session.start()
    assert session.state is SessionState.ERRORED


def test_draft_is_created_on_first_tick(make_session, storage) -> None:
    session = make_session()
    session.start()
    assert storage.items == {}

    session.tick()
    assert "draft:mock-1" in storage.items


@pytest.mark.parametrize("ticks", [0, 1, 59, 61, 599])
def test_remaining_never_negative_and_time_is_attributed(make_session, ticks) -> None:
    session = make_session(duration_minutes=10)
    session.start()

    for t in range(ticks):
        # move around while the clock runs
        if t % 7 == 3:
            session.navigate((session.index + 1) % session.total)
        session.tick()

    assert session.seconds_remaining == max(0, 600 - ticks)
    assert sum(session.time_spent.values()) == ticks


def test_ticks_go_to_the_displayed_question(make_session) -> None:
    session = make_session()
    session.start()

    session.tick()
    session.tick()
    session.navigate(2)
    session.tick()

    assert session.time_spent == {"q1": 2, "q2": 0, "q3": 1}
    assert session.clock_display == "09:57"


def test_navigation_ignores_out_of_range(make_session) -> None:
    session = make_session()
    session.start()

    session.navigate(2)
    session.navigate(3)
    session.navigate(-1)
    assert session.index == 2

    session.next_question()
    assert session.index == 2
    session.previous_question()
    assert session.index == 1


def test_select_clear_and_mark(make_session) -> None:
    session = make_session()
    session.start()

    session.select("q3", 1)
    assert session.answers["q3"] == 1
    assert session.index == 0

    session.clear("q3")
    assert session.answers["q3"] is None

    assert session.toggle_mark("q2") is True
    assert session.toggle_mark("q2") is False


def test_select_validates_question_and_option(make_session) -> None:
    session = make_session()
    session.start()

    with pytest.raises(UnknownQuestionError):
        session.select("q9", 0)
    with pytest.raises(KeyError):
        session.toggle_mark("q9")
    with pytest.raises(InvalidOptionError):
        session.select("q1", 4)
    assert session.answers["q1"] is None


def test_actions_require_running_state(make_session) -> None:
    session = make_session()
    with pytest.raises(SessionNotRunningError):
        session.select("q1", 0)
    assert session.tick() is None

    session.start()
    session.submit(confirmed=True)

    with pytest.raises(SessionNotRunningError):
        session.navigate(1)
    with pytest.raises(SessionNotRunningError):
        session.submit(confirmed=True)


def test_reload_restores_exact_state(make_session) -> None:
    session = make_session()
    session.start()
    session.select("q1", 2)
    session.tick()
    session.navigate(1)
    session.select("q2", 1)
    session.toggle_mark("q2")
    session.tick()
    session.tick()
    session.clear("q1")
    session.navigate(2)
    session.toggle_mark("q3")
    session.tick()
    before = session.snapshot()

    reloaded = make_session()
    reloaded.start()

    assert reloaded.snapshot() == before
    assert reloaded.index == 2
    assert reloaded.seconds_remaining == 596


def test_restore_clamps_index_and_backfills(make_session, storage) -> None:
    DraftStore(storage).save(
        "mock-1",
        AttemptDraft(
            index=99,
            seconds_remaining=120,
            answers={"q1": 1},
            marked={},
            time_spent={"q1": 30},
        ),
    )

    session = make_session()
    session.start()

    assert session.index == 2
    assert session.seconds_remaining == 120
    assert session.answers == {"q1": 1, "q2": None, "q3": None}
    assert session.marked == {"q1": False, "q2": False, "q3": False}
    assert session.time_spent == {"q1": 30, "q2": 0, "q3": 0}


def test_version_mismatch_starts_fresh(make_session, storage) -> None:
    payload = AttemptDraft(index=2, seconds_remaining=5, answers={"q1": 0}).to_payload()
    payload["v"] = 99
    storage.set_item("draft:mock-1", json.dumps(payload))

    session = make_session(duration_minutes=10)
    session.start()

    assert session.index == 0
    assert session.seconds_remaining == 600
    assert session.answers["q1"] is None


def test_manual_submit_scores_answers(make_session, submitter, storage) -> None:
    session = make_session(duration_minutes=10)
    session.start()
    session.select("q1", 0)
    session.select("q2", 3)
    session.tick()

    outcome = session.submit(confirmed=True)

    assert outcome.status is SubmitStatus.SUBMITTED
    assert outcome.attempt_id == "attempt-1"
    assert outcome.redirect == "/results/attempt-1"
    assert not outcome.automatic
    assert session.state is SessionState.SUBMITTED
    assert not session.confirm_before_leave
    assert storage.items == {}

    identity, submission = submitter.calls[0]
    assert identity == "7"
    assert submission.test_id == "mock-1"
    assert submission.score == 1
    assert [a.is_correct for a in submission.answers] == [True, False, False]
    assert [a.chosen_index for a in submission.answers] == [0, 3, None]
    assert [a.time_spent_sec for a in submission.answers] == [1, 0, 0]


def test_manual_submit_requires_confirmation(make_session, submitter) -> None:
    session = make_session()
    session.start()

    with pytest.raises(ConfirmationRequired):
        session.submit()

    assert session.state is SessionState.RUNNING
    assert submitter.calls == []


def test_auto_submit_fires_once(make_session, questions, submitter, storage, fake_timer) -> None:
    session = make_session(duration_minutes=1, question_list=questions[:1], timer=fake_timer)
    session.start()

    outcomes = [session.tick() for _ in range(65)]

    fired = [o for o in outcomes if o is not None]
    assert len(fired) == 1
    assert outcomes[59] is fired[0]
    assert fired[0].status is SubmitStatus.SUBMITTED
    assert fired[0].automatic
    assert fired[0].redirect == "/results/attempt-1"
    assert len(submitter.calls) == 1
    assert submitter.calls[0][1].score == 0
    assert storage.items == {}
    assert session.seconds_remaining == 0
    assert not fake_timer.running


def test_expired_draft_submits_on_next_tick(make_session, storage, submitter) -> None:
    DraftStore(storage).save("mock-1", AttemptDraft(index=0, seconds_remaining=0))
    session = make_session()
    session.start()

    outcome = session.tick()

    assert outcome is not None and outcome.status is SubmitStatus.SUBMITTED
    assert len(submitter.calls) == 1


def test_failed_submission_keeps_draft_and_allows_retry(make_session, submitter, storage, fake_timer) -> None:
    session = make_session(timer=fake_timer)
    session.start()
    session.select("q2", 1)
    session.tick()
    saved = dict(storage.items)

    submitter.error = SubmissionError("network down")
    outcome = session.submit(confirmed=True)

    assert outcome.status is SubmitStatus.FAILED
    assert outcome.error == "network down"
    assert session.state is SessionState.RUNNING
    assert session.last_error == "network down"
    assert storage.items == saved
    assert fake_timer.running
    assert fake_timer.stops == 1

    submitter.error = None
    retry = session.submit(confirmed=True)
    assert retry.status is SubmitStatus.SUBMITTED
    assert retry.attempt_id == "attempt-1"
    assert session.last_error is None


def test_failed_auto_submit_does_not_fire_again(make_session, submitter) -> None:
    session = make_session(duration_minutes=1)
    session.start()
    submitter.error = SubmissionError("storage rejected write")

    outcomes = [session.tick() for _ in range(70)]

    assert [o.status for o in outcomes if o is not None] == [SubmitStatus.FAILED]
    assert session.state is SessionState.RUNNING
    assert session.auto_submitted
    assert submitter.calls == []
    assert sum(session.time_spent.values()) == 70

    submitter.error = None
    assert session.submit(confirmed=True).status is SubmitStatus.SUBMITTED


def test_missing_identity_redirects_to_login(make_session, submitter, storage) -> None:
    session = make_session(identity=None)
    session.start()
    session.select("q1", 0)

    outcome = session.submit(confirmed=True)

    assert outcome.status is SubmitStatus.LOGIN_REQUIRED
    assert outcome.redirect == "/login"
    assert session.state is SessionState.RUNNING
    assert submitter.calls == []
    assert DraftStore(storage).load("mock-1").answers["q1"] == 0


def test_palette_reflects_answers_and_marks(make_session) -> None:
    session = make_session()
    session.start()
    session.select("q1", 0)
    session.toggle_mark("q2")
    session.select("q3", 2)
    session.toggle_mark("q3")
    session.navigate(1)

    tiles = session.palette()

    assert [t.status for t in tiles] == [
        PaletteStatus.ANSWERED,
        PaletteStatus.MARKED,
        PaletteStatus.MARKED_ANSWERED,
    ]
    assert [t.is_current for t in tiles] == [False, True, False]
    assert session.answered_count == 2


def test_restore_drops_out_of_range_answers(make_session, storage) -> None:
    DraftStore(storage).save(
        "mock-1",
        AttemptDraft(index=0, seconds_remaining=300, answers={"q1": 9, "q2": -1, "q3": 2}),
    )

    session = make_session()
    session.start()

    assert session.answers == {"q1": None, "q2": None, "q3": 2}
    assert session.build_submission().score == 1


@pytest.mark.parametrize("identity", [None, "7"])
def test_clock_stays_stopped_after_unsuccessful_auto_submit(
    make_session, submitter, fake_timer, identity
) -> None:
    submitter.error = SubmissionError("storage rejected write")
    session = make_session(duration_minutes=1, identity=identity, timer=fake_timer)
    session.start()

    outcomes = [o for o in (session.tick() for _ in range(60)) if o is not None]

    assert len(outcomes) == 1
    assert outcomes[0].status is (SubmitStatus.LOGIN_REQUIRED if identity is None else SubmitStatus.FAILED)
    assert session.state is SessionState.RUNNING
    assert not fake_timer.running
    assert fake_timer.starts == 1
