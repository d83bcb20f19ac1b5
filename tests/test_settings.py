import pytest

from ledger_categorizer.core import settings
from ledger_categorizer.manager import CategorizerService


def test_read_config_file(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "# comment\n"
        "AIML_MODEL: gpt-4o-mini  # inline comment\n"
        "AIML_BASE_URL: \"http://localhost:11434/v1\"\n"
        "AI_BATCH_SIZE:\n"
        "not a setting\n",
        encoding="utf-8",
    )

    assert settings.read_config_file(str(path)) == {
        "AIML_MODEL": "gpt-4o-mini",
        "AIML_BASE_URL": "http://localhost:11434/v1",
    }
    assert settings.read_config_file(str(tmp_path / "missing.yaml")) == {}


def test_get_env_int_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AI_BATCH_SIZE", "abc")
    assert settings.get_ai_batch_size() == settings.DEFAULT_AI_BATCH_SIZE

    monkeypatch.setenv("AI_BATCH_SIZE", "0")
    assert settings.get_ai_batch_size() == settings.DEFAULT_AI_BATCH_SIZE

    monkeypatch.setenv("AI_BATCH_SIZE", "10")
    assert settings.get_ai_batch_size() == 10


def test_mask_env_value() -> None:
    assert settings._mask_env_value("AIML_API_KEY", "sk-abcdef") == "sk...ef"
    assert settings._mask_env_value("AIML_API_KEY", "abc") == "****"
    assert settings._mask_env_value("AIML_MODEL", "gpt-4") == "gpt-4"


def test_refresh_llm_follows_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AIML_API_KEY", raising=False)
    service = CategorizerService()
    assert not service.ai_enabled

    monkeypatch.setenv("AIML_API_KEY", "sk-test")
    monkeypatch.setenv("AIML_MODEL", "gpt-4o-mini")
    service.refresh_llm()
    assert service.ai_enabled
    assert service.llm.model == "gpt-4o-mini"
