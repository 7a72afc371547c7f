"""Unit tests for settings."""
import pytest

from ddx_assistant.infrastructure import config
from ddx_assistant.infrastructure.config import DEFAULT_CHAT_MODEL, DEFAULT_REASONER_MODEL, Settings


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr(config, "_HAS_STREAMLIT", False)
    for name in (
        "MISTRAL_API_KEY", "MISTRAL_API_KEY_REASONER", "MISTRAL_API_KEY_CHAT",
        "MISTRAL_REASONER_MODEL", "MISTRAL_CHAT_MODEL", "MODEL_TIMEOUT_MS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(env):
    settings = Settings()
    assert settings.mistral_api_key is None
    assert settings.reasoner_model == DEFAULT_REASONER_MODEL
    assert settings.chat_model == DEFAULT_CHAT_MODEL
    assert settings.timeout_ms == 60000


def test_shared_key_used_for_both_slots(env):
    env.setenv("MISTRAL_API_KEY", "shared")
    settings = Settings()
    assert settings.slot(True).api_key == "shared"
    assert settings.slot(False).api_key == "shared"


def test_per_slot_keys_and_models(env):
    env.setenv("MISTRAL_API_KEY", "shared")
    env.setenv("MISTRAL_API_KEY_REASONER", "r")
    env.setenv("MISTRAL_CHAT_MODEL", "my-chat")
    settings = Settings()
    assert settings.slot(True) == ("reasoner", DEFAULT_REASONER_MODEL, "r")
    assert settings.slot(False) == ("chat", "my-chat", "shared")


def test_bad_timeout_falls_back(env):
    env.setenv("MODEL_TIMEOUT_MS", "soon")
    assert Settings().timeout_ms == 60000
    env.setenv("MODEL_TIMEOUT_MS", "5000")
    assert Settings().timeout_ms == 5000
