"""Quiz session endpoints.

Handlers are coroutines so they run on the event loop thread, the same thread
that delivers timer ticks to the sessions. The in-session actions are shared
by mock test sessions and topic practice sessions (see routes.practice).
"""
from contextlib import contextmanager
from typing import Annotated, Any, Callable, Iterator

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session as DbSession

from hssc_guru.database import get_db
from hssc_guru.dependencies import get_current_user, get_session_registry
from hssc_guru.models import (
    NavigateRequest,
    SelectRequest,
    SessionView,
    SubmitRequest,
    SubmitResponse,
)
from hssc_guru.models.db.user import User
from hssc_guru.runner import (
    ConfirmationRequired,
    EmptyQuestionSetError,
    InvalidOptionError,
    QuizSession,
    SessionNotRunningError,
    SubmitStatus,
    UnknownQuestionError,
)
from hssc_guru.services.session_service import SessionRegistry
from hssc_guru.services.test_service import load_question_set, require_test
from hssc_guru.utils import validate_id

router = APIRouter(prefix="/api/tests/{slug}/session", tags=["sessions"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Registry = Annotated[SessionRegistry, Depends(get_session_registry)]


@contextmanager
def runner_errors() -> Iterator[None]:
    """Translate runner errors into HTTP errors."""
    try:
        yield
    except SessionNotRunningError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except UnknownQuestionError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidOptionError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except ConfirmationRequired as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except EmptyQuestionSetError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


def add_session_actions(router: APIRouter, resolve_session: Callable[..., Any]) -> None:
    """
    Register the in-session endpoints on `router`.

    `resolve_session` is a dependency returning the caller's live QuizSession
    for the router's path, or raising 404.
    """
    LiveSession = Annotated[QuizSession, Depends(resolve_session)]

    @router.get("", response_model=SessionView)
    async def get_session(
        session: LiveSession, current_user: CurrentUser, registry: Registry
    ) -> SessionView:
        """Current state of the session; a submitted one is shown once, then forgotten."""
        view = SessionView.from_session(session)
        registry.release(current_user.id, session.test_id)
        return view

    @router.post("/navigate", response_model=SessionView)
    async def navigate(payload: NavigateRequest, session: LiveSession) -> SessionView:
        """Jump to a question; out-of-range positions are ignored."""
        with runner_errors():
            session.navigate(payload.index)
        return SessionView.from_session(session)

    @router.put("/answers/{question_id}", response_model=SessionView)
    async def select_option(
        question_id: str, payload: SelectRequest, session: LiveSession
    ) -> SessionView:
        """Choose an option for a question."""
        with runner_errors():
            session.select(question_id, payload.optionIndex)
        return SessionView.from_session(session)

    @router.delete("/answers/{question_id}", response_model=SessionView)
    async def clear_option(question_id: str, session: LiveSession) -> SessionView:
        """Clear the chosen option of a question."""
        with runner_errors():
            session.clear(question_id)
        return SessionView.from_session(session)

    @router.post("/marks/{question_id}", response_model=SessionView)
    async def toggle_mark(question_id: str, session: LiveSession) -> SessionView:
        """Flip the mark-for-review flag of a question."""
        with runner_errors():
            session.toggle_mark(question_id)
        return SessionView.from_session(session)

    @router.post("/submit", response_model=SubmitResponse)
    async def submit_session(
        payload: SubmitRequest,
        session: LiveSession,
        current_user: CurrentUser,
        registry: Registry,
    ) -> SubmitResponse:
        """Submit the attempt; requires explicit confirmation."""
        with runner_errors():
            outcome = session.submit(confirmed=payload.confirm)
        if outcome.status is SubmitStatus.SUBMITTED:
            registry.release(current_user.id, session.test_id)
        return SubmitResponse.from_outcome(outcome)


async def _mock_test_session(
    slug: str,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: CurrentUser,
    registry: Registry,
) -> QuizSession:
    test = require_test(db, validate_id("slug", slug))
    session = registry.get(current_user.id, test.id)
    if session is None:
        raise HTTPException(status_code=404, detail="No active session for this test")
    return session


@router.post("", response_model=SessionView)
async def start_session(
    slug: str,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: CurrentUser,
    registry: Registry,
) -> SessionView:
    """Start a session, or resume the running one / the saved draft."""
    test = require_test(db, validate_id("slug", slug))
    questions = load_question_set(db, test)
    with runner_errors():
        session = registry.open(current_user.id, test, questions)
    return SessionView.from_session(session)


add_session_actions(router, _mock_test_session)
