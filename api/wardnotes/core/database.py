from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool
from wardnotes.core.config import settings
import logging

logger = logging.getLogger(__name__)


def build_engine(db_url: str):
    """Create the SQLAlchemy engine for the given URL.

    SQLite (local runs and tests) gets a single shared connection; every
    other backend gets a pre-pinged connection pool.
    """
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


db_url = settings.sqlalchemy_database_url
logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL for debugging

engine = build_engine(db_url)


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


def init_db():
    """Initialize database tables."""
    SQLModel.metadata.create_all(engine)
