import logging

from databases import Database

logger = logging.getLogger("userstore.database")


def create_database(database_url: str) -> Database:
    """Build a (not yet connected) Database for the given URL."""
    return Database(database_url)


async def connect_to_db(database: Database):
    if not database.is_connected:
        await database.connect()
        logger.info("Connected to database")


async def disconnect_from_db(database: Database):
    if database.is_connected:
        await database.disconnect()
        logger.info("Disconnected from database")
