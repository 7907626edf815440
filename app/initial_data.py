import anyio
from loguru import logger

from app.core.config import get_settings
from app.database.database import create_db_and_tables, get_store
from app.database.init_sample_data import init_sample_data


async def init() -> None:
    """
    Create the database schema and, outside production, seed sample data.
    """
    create_db_and_tables()
    if get_settings().ENVIRONMENT.lower() != "production":
        await init_sample_data(get_store())


def main() -> None:
    logger.info("Creating initial data")
    anyio.run(init)
    logger.info("Initial data created")


if __name__ == "__main__":
    main()
