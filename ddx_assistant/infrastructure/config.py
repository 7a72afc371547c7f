import os
import logging
from typing import NamedTuple

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


DEFAULT_REASONER_MODEL = "magistral-medium-latest"
DEFAULT_CHAT_MODEL = "mistral-small-latest"
DEFAULT_TIMEOUT_MS = 60000


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # No secrets.toml outside a Streamlit run
            pass
    return os.environ.get(name, default)


class ModelSlot(NamedTuple):
    name: str
    model: str
    api_key: str | None


class Settings:
    @property
    def mistral_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY")

    @property
    def reasoner_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY_REASONER") or self.mistral_api_key

    @property
    def chat_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY_CHAT") or self.mistral_api_key

    @property
    def reasoner_model(self) -> str:
        return get_secret("MISTRAL_REASONER_MODEL", DEFAULT_REASONER_MODEL) or DEFAULT_REASONER_MODEL

    @property
    def chat_model(self) -> str:
        return get_secret("MISTRAL_CHAT_MODEL", DEFAULT_CHAT_MODEL) or DEFAULT_CHAT_MODEL

    @property
    def timeout_ms(self) -> int:
        raw = get_secret("MODEL_TIMEOUT_MS")
        if not raw:
            return DEFAULT_TIMEOUT_MS
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer MODEL_TIMEOUT_MS=%r", raw)
            return DEFAULT_TIMEOUT_MS

    @property
    def log_level(self) -> str:
        return get_secret("LOG_LEVEL", "INFO") or "INFO"

    def slot(self, use_reasoning_model: bool) -> ModelSlot:
        if use_reasoning_model:
            return ModelSlot("reasoner", self.reasoner_model, self.reasoner_api_key)
        return ModelSlot("chat", self.chat_model, self.chat_api_key)
