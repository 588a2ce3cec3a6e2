"""Celery tasks for session housekeeping."""

import logging

from sqlalchemy.orm import Session

from codelogs.celery_app import app as celery_app
from codelogs.database import SessionLocal
from codelogs.services import auth

logger = logging.getLogger(__name__)


@celery_app.task
def purge_expired_sessions() -> dict:
    """Delete expired login sessions.

    This task runs every 10 minutes via celery-beat.
    """
    db: Session = SessionLocal()
    try:
        purged = auth.purge_expired_sessions(db)
        if purged:
            logger.info(f"Purged {purged} expired sessions")
        return {"success": True, "purged": purged}
    except Exception as e:
        db.rollback()
        logger.error(f"Session purge failed: {e}")
        raise
    finally:
        db.close()
