"""FastAPI dependencies."""
from hssc_guru.dependencies.auth import get_current_user, get_optional_user
from hssc_guru.dependencies.sessions import get_session_registry

__all__ = ["get_current_user", "get_optional_user", "get_session_registry"]
