"""Mock test endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from hssc_guru.database import get_db
from hssc_guru.dependencies import get_optional_user, get_session_registry
from hssc_guru.models import MockTestDetail, MockTestSummary
from hssc_guru.models.db.test import MockTest
from hssc_guru.models.db.user import User
from hssc_guru.services.session_service import SessionRegistry
from hssc_guru.services.test_service import (
    count_questions,
    list_tests,
    require_test,
    resolve_duration,
)
from hssc_guru.utils import validate_id

router = APIRouter(prefix="/api/tests", tags=["tests"])


def _summary_fields(db: DbSession, test: MockTest) -> dict[str, object]:
    return {
        "id": test.id,
        "slug": test.slug,
        "name": test.name,
        "description": test.description,
        "durationMinutes": resolve_duration(test.duration_minutes),
        "questionCount": count_questions(db, test.id),
    }


@router.get("", response_model=list[MockTestSummary])
def list_all_tests(
    db: Annotated[DbSession, Depends(get_db)],
) -> list[MockTestSummary]:
    """List all mock tests."""
    return [MockTestSummary(**_summary_fields(db, test)) for test in list_tests(db)]


@router.get("/{slug}", response_model=MockTestDetail)
def get_test(
    slug: str,
    db: Annotated[DbSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> MockTestDetail:
    """Get a test, including whether the user has an unfinished draft."""
    test = require_test(db, validate_id("slug", slug))
    has_draft = False
    if current_user is not None:
        has_draft = registry.drafts_for(current_user.id).load(test.id) is not None
    return MockTestDetail(**_summary_fields(db, test), hasDraft=has_draft)
