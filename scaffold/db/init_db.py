"""Database bootstrapping utilities."""

from __future__ import annotations

import logging

from scaffold.db import session as db_session
from scaffold.models import Base

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create all database tables if they do not exist."""
    Base.metadata.create_all(bind=db_session.engine)
    logger.info("Database schema ensured for %s", db_session.engine.url.render_as_string(hide_password=True))
