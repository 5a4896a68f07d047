"""Unit tests for settings construction."""

import pytest
from pydantic import ValidationError

from backend.assistant.config import MAX_BATCH_SIZE, Settings, load_settings


class TestSettings:
    """Test defaults, env loading and bounds."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ASSISTANT_DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.database_url is None
        assert settings.model_primary == "gpt-4o"
        assert settings.model_fallback == "gpt-4o-mini"
        assert settings.max_batch_size == MAX_BATCH_SIZE
        assert settings.audit_enabled is True

    def test_reads_prefixed_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASSISTANT_MAX_BATCH_SIZE", "3")
        monkeypatch.setenv("ASSISTANT_AUDIT_ENABLED", "false")
        settings = load_settings(_env_file=None)
        assert settings.max_batch_size == 3
        assert settings.audit_enabled is False

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASSISTANT_LOG_LEVEL", "ERROR")
        assert load_settings(log_level="DEBUG", _env_file=None).log_level == "DEBUG"

    def test_fresh_instance_each_call(self) -> None:
        assert load_settings(_env_file=None) is not load_settings(_env_file=None)

    @pytest.mark.parametrize("size", [0, 7])
    def test_batch_size_bounds(self, size: int) -> None:
        with pytest.raises(ValidationError):
            Settings(max_batch_size=size, _env_file=None)  # type: ignore[call-arg]

    def test_retired_keys_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASSISTANT_COST_BUDGET_WEEKLY", "0")
        monkeypatch.setenv("ASSISTANT_EMBEDDING_MODEL", "text-embedding-3-small")
        settings = load_settings(_env_file=None)
        assert not hasattr(settings, "cost_budget_weekly")
        assert not hasattr(settings, "embedding_model")
