"""Housekeeping: abandoned drafts and expired logins."""
import logging
import threading
import time
from pathlib import Path

from hssc_guru.config import CLEANUP_INTERVAL_SECONDS, DRAFT_RETENTION_DAYS, DRAFTS_DIR
from hssc_guru.database import SessionLocal
from hssc_guru.services.auth_service import purge_expired_logins

logger = logging.getLogger(__name__)

FIRST_RUN_DELAY_SECONDS = 60


def cleanup_stale_drafts(
    drafts_dir: Path = DRAFTS_DIR,
    retention_days: int = DRAFT_RETENTION_DAYS,
) -> int:
    """Delete draft files not written for retention_days; 0 disables."""
    if retention_days <= 0 or not drafts_dir.is_dir():
        return 0

    cutoff = time.time() - retention_days * 86400
    removed = 0
    for path in drafts_dir.rglob("*.json"):
        try:
            if path.stat().st_mtime >= cutoff:
                continue
            path.unlink()
            removed += 1
        except OSError as e:
            logger.warning(f"Could not remove draft {path}: {e}")
    if removed:
        logger.info(f"Removed {removed} abandoned drafts")
    return removed


def cleanup_login_sessions() -> int:
    db = SessionLocal()
    try:
        purged = purge_expired_logins(db)
    finally:
        db.close()
    if purged:
        logger.info(f"Purged {purged} expired logins")
    return purged


def schedule_cleanup(interval: float = CLEANUP_INTERVAL_SECONDS) -> threading.Thread:
    """Run both cleanups periodically on a daemon thread."""

    def _loop() -> None:
        time.sleep(FIRST_RUN_DELAY_SECONDS)
        while True:
            try:
                cleanup_stale_drafts()
                cleanup_login_sessions()
            except Exception:
                logger.exception("Cleanup pass failed")
            time.sleep(interval)

    thread = threading.Thread(target=_loop, name="guru-cleanup", daemon=True)
    thread.start()
    return thread
