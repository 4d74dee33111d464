from ai.providers.base import AIProvider


class AnthropicProvider(AIProvider):
    """Anthropic / Claude text-generation provider."""

    BASE_URL = "https://api.anthropic.com/v1/messages"
    DEFAULT_MODEL = "claude-haiku-4-5-20251001"

    def __init__(self, api_key: str, model: str | None = None, timeout_seconds: float = 60):
        super().__init__(api_key, model, timeout_seconds)
        self._headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

    async def chat(self, messages: list[dict], model: str | None = None, system: str = "") -> dict:
        model = model or self.get_model()
        payload: dict = {
            "model": model,
            "max_tokens": 2048,
            "messages": messages,
        }
        if system:
            payload["system"] = system
        data = await self._post_json(self.BASE_URL, payload, self._headers, "Anthropic")

        content = ""
        for block in data.get("content", []):
            if block.get("type") == "text":
                content += block.get("text", "")

        usage = data.get("usage", {})
        return {
            "content": content,
            "tokens_in": usage.get("input_tokens", 0),
            "tokens_out": usage.get("output_tokens", 0),
            "model": data.get("model", model),
        }
