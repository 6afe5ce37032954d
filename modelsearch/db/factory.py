from typing import Optional

from modelsearch.config import Settings, get_settings
from modelsearch.db.interfaces.base import BaseDatabase
from modelsearch.db.interfaces.postgresql import PostgreSQLDatabase, PostgreSQLSettings


def make_database(settings: Optional[Settings] = None) -> BaseDatabase:
    """Create and start the database from application settings."""
    settings = settings or get_settings()
    config = PostgreSQLSettings(
        database_url=settings.postgres_database_url,
        echo_sql=settings.postgres_echo_sql,
        pool_size=settings.postgres_pool_size,
        max_overflow=settings.postgres_max_overflow,
        statement_timeout_ms=settings.postgres_statement_timeout_ms,
        application_name=settings.service_name,
    )
    database = PostgreSQLDatabase(config=config)
    database.startup()
    return database
