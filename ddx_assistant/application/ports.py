from typing import Protocol


class ModelUnavailable(RuntimeError):
    """The remote completion call failed (network, auth, quota, timeout)."""

    def __init__(self, slot: str, message: str = ""):
        self.slot = slot
        super().__init__(f"{slot} model unavailable" + (f": {message}" if message else ""))


class ModelGatewayPort(Protocol):
    async def complete(self, prompt: str, use_reasoning_model: bool = True) -> str:
        """
        Sends a single user-role prompt and returns the raw reply text.
        Raises ModelUnavailable on any transport or provider failure.
        """
        ...
