"""Topic practice: a short quiz over the question bank questions of one topic.

Practice sessions run through the same QuizSession machinery as mock tests,
with a clock of one minute per question; the attempt is stored with its topic
instead of a test.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session as DbSession

from hssc_guru.config import PRACTICE_DEFAULT_LIMIT, PRACTICE_MAX_LIMIT
from hssc_guru.database import get_db
from hssc_guru.models import SessionView, TopicSummary
from hssc_guru.routes.sessions import CurrentUser, Registry, add_session_actions, runner_errors
from hssc_guru.runner import QuizSession
from hssc_guru.services.session_service import practice_key
from hssc_guru.services.test_service import list_topics, load_practice_set
from hssc_guru.utils import validate_topic

router = APIRouter(prefix="/api/practice/{topic}/session", tags=["practice"])
topics_router = APIRouter(prefix="/api/topics", tags=["practice"])


@topics_router.get("", response_model=list[TopicSummary])
def list_all_topics(db: Annotated[DbSession, Depends(get_db)]) -> list[TopicSummary]:
    """Topics of the question bank with how many questions each has."""
    return [TopicSummary(topic=topic, questionCount=count) for topic, count in list_topics(db)]


async def _practice_session(
    topic: str, current_user: CurrentUser, registry: Registry
) -> QuizSession:
    session = registry.get(current_user.id, practice_key(validate_topic(topic)))
    if session is None:
        raise HTTPException(status_code=404, detail="No active practice session for this topic")
    return session


@router.post("", response_model=SessionView)
async def start_practice(
    topic: str,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: CurrentUser,
    registry: Registry,
    limit: Annotated[int, Query(ge=1, le=PRACTICE_MAX_LIMIT)] = PRACTICE_DEFAULT_LIMIT,
) -> SessionView:
    """Start practising a topic, or resume the running practice / its draft."""
    topic = validate_topic(topic)
    questions = load_practice_set(db, topic, limit)
    if not questions:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No questions for this topic")
    with runner_errors():
        session = registry.open_practice(current_user.id, topic, questions)
    return SessionView.from_session(session)


add_session_actions(router, _practice_session)
