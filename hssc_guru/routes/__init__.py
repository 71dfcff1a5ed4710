"""API route modules."""
from hssc_guru.routes import attempts, auth, practice, sessions, tests

__all__ = ["attempts", "auth", "practice", "sessions", "tests"]
