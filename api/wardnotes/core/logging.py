"""
Logging configuration.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Initialize standard logging for the application at the given level."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is controlled by the engine; keep SQLAlchemy's own loggers quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
