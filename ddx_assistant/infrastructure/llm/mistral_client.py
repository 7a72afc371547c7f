import logging
from typing import Callable, List

from ddx_assistant.application.ports import ModelGatewayPort, ModelUnavailable
from ddx_assistant.infrastructure.config import ModelSlot, Settings


logger = logging.getLogger(__name__)


TEMPERATURE = 0.3
MAX_TOKENS = 2000
TOP_P = 0.9


def _default_client_factory(api_key: str, timeout_ms: int):
    from mistralai import Mistral
    return Mistral(api_key=api_key, timeout_ms=timeout_ms)


def _content_text(content) -> str:
    # Reasoning models reply with a list of chunks; only text chunks are the answer.
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for chunk in content:
        text = getattr(chunk, "text", None)
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


class MistralModelGateway(ModelGatewayPort):
    """
    Opens a client per call inside the running event loop.

    Callers may drive each call with a fresh asyncio.run(); a pooled client
    kept across calls would stay bound to the first, already closed, loop.
    """

    def __init__(self, settings: Settings | None = None, client_factory: Callable | None = None):
        self.settings = settings or Settings()
        self._client_factory = client_factory or _default_client_factory

    def _new_client(self, slot: ModelSlot):
        if not slot.api_key:
            logger.error("Mistral API key is missing for the %s model.", slot.name)
            raise ModelUnavailable(slot.name, "missing API key")
        try:
            return self._client_factory(slot.api_key, self.settings.timeout_ms)
        except Exception as e:
            logger.exception("Failed to initialize Mistral client: %s", e)
            raise ModelUnavailable(slot.name, "client initialization failed") from e

    async def complete(self, prompt: str, use_reasoning_model: bool = True) -> str:
        slot = self.settings.slot(use_reasoning_model)
        client = self._new_client(slot)
        try:
            async with client:
                response = await client.chat.complete_async(
                    model=slot.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=TEMPERATURE,
                    max_tokens=MAX_TOKENS,
                    top_p=TOP_P,
                )
        except Exception as e:
            logger.warning("Mistral %s call failed: %s", slot.name, e)
            raise ModelUnavailable(slot.name, str(e)) from e

        if response is None or not response.choices:
            return ""
        return _content_text(response.choices[0].message.content)
