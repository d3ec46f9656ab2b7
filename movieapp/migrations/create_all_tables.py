"""
Migration script to create all database tables

Run this script to create all database tables:
    python -m movieapp.migrations.create_all_tables
"""

import logging

from movieapp.database import engine, Base
# Import all models to ensure they're registered with Base
from movieapp.models import User, Comment  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables():
    """Create all database tables"""
    logger.info("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    create_tables()
