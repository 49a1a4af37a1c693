# utils/audit.py
import logging

from sqlalchemy.exc import SQLAlchemyError

from database import Database
from models.log import Log

logger = logging.getLogger(__name__)


def write_log(database: Database, *, action, resource, status="SUCCESS", meta=None):
    """Audit entry for a change that is already committed; a failed write is only logged."""
    try:
        with database.transaction() as db:
            db.add(Log(action=action, resource=resource, status=status, meta=meta or {}))
    except SQLAlchemyError:
        logger.exception("Audit log %s on %s not written", action, resource)
        return False
    return True
