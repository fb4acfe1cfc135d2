import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from showcase.db.models import AuditLog

logger = logging.getLogger(__name__)


#Record an admin action; an audit failure is logged and never breaks the request
def log_action(
    db: Session,
    action: str,
    actor_id: int | None = None,
    actor_type: str = "admin",
    details: str | None = None,
):
    try:
        db.add(
            AuditLog(
                actor_type=actor_type,
                actor_id=actor_id,
                action=action,
                details=details,
            )
        )
        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not write audit entry %s", action, exc_info=True)
        return

    logger.info("audit %s actor=%s:%s %s", action, actor_type, actor_id, details or "")
