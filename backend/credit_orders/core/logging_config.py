"""
Logging setup

One call at application start-up; every module then uses
logging.getLogger(__name__).
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # psycopg2/sqlalchemy are chatty at DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
