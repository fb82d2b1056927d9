"""Create all tables for the configured database."""

import logging

from umutisafe.config import settings
from umutisafe.database import Base, create_db_engine, wait_for_database
import umutisafe.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(level=logging.INFO)
    engine = create_db_engine(settings.DATABASE_URL, pool_size=settings.DB_POOL_SIZE)
    wait_for_database(
        engine,
        retries=settings.DB_CONNECT_RETRIES,
        backoff_seconds=settings.DB_CONNECT_BACKOFF_SECONDS,
    )
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")
    engine.dispose()


if __name__ == "__main__":
    main()
