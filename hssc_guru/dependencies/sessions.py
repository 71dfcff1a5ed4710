"""Quiz session registry dependency."""
from fastapi import Request

from hssc_guru.services.session_service import SessionRegistry


def get_session_registry(request: Request) -> SessionRegistry:
    """Registry installed on the application at startup."""
    return request.app.state.sessions
