"""Database models."""
from hssc_guru.models.db.user import LoginSession, User
from hssc_guru.models.db.test import MockTest, QuestionRecord, MockTestQuestion
from hssc_guru.models.db.attempt import Attempt, AttemptAnswer

__all__ = [
    "User",
    "LoginSession",
    "MockTest",
    "QuestionRecord",
    "MockTestQuestion",
    "Attempt",
    "AttemptAnswer",
]
