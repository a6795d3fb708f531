# This project was developed with assistance from AI tools.
"""Settings ownership between the api and db packages."""

from db.config import db_settings
from db.database import engine

from src.core.config import Settings


def test_database_url_owned_by_db_package():
    """The engine is built from DatabaseSettings; the api settings do not shadow it."""
    assert "DATABASE_URL" not in Settings.model_fields
    assert engine.url.render_as_string(hide_password=False) == db_settings.DATABASE_URL


def test_api_settings_carry_only_read_fields():
    assert "APP_NAME" not in Settings.model_fields
    assert "APP_BASE_URL" in Settings.model_fields
