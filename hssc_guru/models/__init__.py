"""Pydantic models."""
from hssc_guru.models.attempts import (
    AnswerResult,
    AttemptDetail,
    AttemptSummary,
    DashboardResponse,
)
from hssc_guru.models.auth import (
    AccountResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
)
from hssc_guru.models.session import (
    NavigateRequest,
    SelectRequest,
    SessionView,
    SubmitRequest,
    SubmitResponse,
)
from hssc_guru.models.tests import MockTestDetail, MockTestSummary, TopicSummary

__all__ = [
    "AnswerResult",
    "AttemptDetail",
    "AttemptSummary",
    "DashboardResponse",
    "AccountResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "TokenResponse",
    "NavigateRequest",
    "SelectRequest",
    "SessionView",
    "SubmitRequest",
    "SubmitResponse",
    "MockTestDetail",
    "MockTestSummary",
    "TopicSummary",
]
