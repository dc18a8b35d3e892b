import logging
from contextlib import contextmanager
from clp.extensions import db

logger = logging.getLogger(__name__)

@contextmanager
def transactional():
    """Yield the session; commit on success, roll back and re-raise on failure."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.debug("Transaction rolled back", exc_info=True)
        raise
