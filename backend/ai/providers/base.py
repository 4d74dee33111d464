from abc import ABC, abstractmethod

import httpx


class UpstreamServiceError(RuntimeError):
    """Raised when an external collaborator (LLM, transcription, storage) fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AIProvider(ABC):
    """Abstract base class for text-generation providers."""

    DEFAULT_MODEL: str = ""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout_seconds: float = 60,
    ):
        self.api_key = api_key
        self._model = model
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        system: str = "",
    ) -> dict:
        """Send a non-streaming chat request to the provider.

        Args:
            messages: List of message dicts with role and content.
            model: Model identifier; defaults to ``get_model()``.
            system: Optional system instruction.

        Returns:
            dict with content (text of the first candidate), tokens_in,
            tokens_out and model.

        Raises:
            UpstreamServiceError if the provider fails or cannot be reached.
        """
        ...

    def get_model(self) -> str:
        return self._model or self.DEFAULT_MODEL

    async def _post_json(self, url: str, payload: dict, headers: dict, label: str) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise UpstreamServiceError(f"{label} API unreachable: {e}") from e
        if resp.status_code != 200:
            raise UpstreamServiceError(f"{label} API error: {resp.text}", status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamServiceError(f"{label} API returned invalid JSON") from e
