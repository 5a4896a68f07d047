"""Integration tests for the Alembic migration environment on SQLite."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

SCRIPT_LOCATION = Path(__file__).resolve().parents[2] / "backend" / "assistant" / "db" / "alembic"


def _alembic_config() -> Config:
    # No ini file, so env.py leaves logging configuration alone
    config = Config()
    config.set_main_option("script_location", str(SCRIPT_LOCATION))
    return config


class TestMigrations:
    """Test env.py URL handling and the initial schema."""

    def test_upgrade_uses_settings_url(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        db_file = tmp_path / "migrated.db"
        monkeypatch.setenv("ASSISTANT_DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")

        command.upgrade(_alembic_config(), "head")

        engine = create_engine(f"sqlite:///{db_file}")
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert {
            "trip",
            "trip_day",
            "trip_destination",
            "assistant_action_logs",
            "assistant_logs",
        } <= tables

    def test_downgrade_drops_tables(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        db_file = tmp_path / "downgraded.db"
        monkeypatch.setenv("ASSISTANT_DATABASE_URL", f"sqlite:///{db_file}")
        config = _alembic_config()

        command.upgrade(config, "head")
        command.downgrade(config, "base")

        engine = create_engine(f"sqlite:///{db_file}")
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert "trip" not in tables

    def test_missing_url_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ASSISTANT_DATABASE_URL", raising=False)

        with pytest.raises(RuntimeError, match="ASSISTANT_DATABASE_URL must be set"):
            command.upgrade(_alembic_config(), "head")
