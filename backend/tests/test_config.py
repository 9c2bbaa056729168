"""
Tests for settings derived from the environment.
"""

from eventbook.core.config import Settings


def test_migration_url_derived_from_async_url():
    settings = Settings(DATABASE_URL="postgresql+asyncpg://u:p@db:5432/eventbook")
    assert settings.migration_database_url == "postgresql://u:p@db:5432/eventbook"


def test_explicit_sync_url_wins():
    settings = Settings(
        DATABASE_URL="postgresql+asyncpg://u:p@db/eventbook",
        DATABASE_URL_SYNC="postgresql+psycopg2://u:p@replica/eventbook",
    )
    assert settings.migration_database_url == "postgresql+psycopg2://u:p@replica/eventbook"


def test_environment_and_log_level_normalised():
    settings = Settings(ENVIRONMENT="Production", LOG_LEVEL="debug")
    assert settings.is_production
    assert settings.LOG_LEVEL == "DEBUG"
