"""HSSC Guru API: mock tests, timed quiz sessions and results."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hssc_guru.config import DRAFTS_DIR
from hssc_guru.database import SessionLocal, init_db
from hssc_guru.logging_setup import setup_console_logging
from hssc_guru.routes import attempts, auth, practice, sessions, tests
from hssc_guru.runner import FileStorage
from hssc_guru.services.attempt_service import DatabaseAttemptSubmitter
from hssc_guru.services.cleanup_service import schedule_cleanup
from hssc_guru.services.session_service import SessionRegistry

setup_console_logging()

app = FastAPI(title="HSSC Guru API")

# the web client is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_session_registry() -> SessionRegistry:
    """Registry backed by the database and per-user draft directories."""
    return SessionRegistry(
        session_factory=SessionLocal,
        submitter=DatabaseAttemptSubmitter(SessionLocal),
        storage_factory=lambda user_id: FileStorage(DRAFTS_DIR / str(user_id)),
    )


@app.on_event("startup")
def startup_events() -> None:
    """Initialize database, session registry and cleanup tasks on startup."""
    init_db()
    app.state.sessions = build_session_registry()
    schedule_cleanup()


@app.on_event("shutdown")
def shutdown_events() -> None:
    """Stop quiz timers; drafts remain for the next start."""
    registry = getattr(app.state, "sessions", None)
    if registry is not None:
        registry.shutdown()


@app.get("/api/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


# Include routers
app.include_router(auth.router)
app.include_router(tests.router)
app.include_router(sessions.router)
app.include_router(practice.topics_router)
app.include_router(practice.router)
app.include_router(attempts.router)
