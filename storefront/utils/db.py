import logging
from contextlib import contextmanager

from models import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional(message="DB transaction failed"):
    """Commit the session when the block succeeds; roll back and re-raise otherwise.

    ``message`` heads the error log line written on failure.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        logger.error("%s: %s", message, e, exc_info=True)
        db.session.rollback()
        raise
