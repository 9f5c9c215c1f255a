"""
Database connection for the relational CDR store.

Uses NullPool: every CDR write opens its own connection and releases it
when the write is done, pooling is left to the database side.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

Base = declarative_base()


def get_engine(config):
    """Create an engine for the configured CDR store, or None when disabled."""
    url = config.database_url()
    if url is None:
        return None
    return create_engine(
        url,
        poolclass=NullPool,
        echo=False,
    )


def get_session(engine):
    """Create a new database session. Caller must close it."""
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    return Session()


def init_db(engine):
    """Create all tables. Call once via /api/setup-db."""
    # Import models so Base knows about them
    import models.xferfaxlog
    import models.fax_numbers
    Base.metadata.create_all(bind=engine)
