from typing import Any

from ai.providers.base import AIProvider


class OpenAIProvider(AIProvider):
    """OpenAI / GPT text-generation provider."""

    BASE_URL = "https://api.openai.com/v1/chat/completions"
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_MAX_COMPLETION_TOKENS = 2048

    def __init__(self, api_key: str, model: str | None = None, timeout_seconds: float = 60):
        super().__init__(api_key, model, timeout_seconds)
        self._headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def chat(self, messages: list[dict], model: str | None = None, system: str = "") -> dict:
        model = model or self.get_model()
        # Prepend system message if provided
        full_messages = list(messages)
        if system:
            full_messages.insert(0, {"role": "system", "content": system})

        payload: dict[str, Any] = {
            "model": model,
            "messages": full_messages,
        }
        payload.update(self._token_limit_field(model, self.DEFAULT_MAX_COMPLETION_TOKENS))
        data = await self._post_json(self.BASE_URL, payload, self._headers, "OpenAI")

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        usage = data.get("usage", {})
        return {
            "content": content if isinstance(content, str) else "",
            "tokens_in": usage.get("prompt_tokens", 0),
            "tokens_out": usage.get("completion_tokens", 0),
            "model": data.get("model", model),
        }

    def _token_limit_field(self, model: str, limit: int) -> dict[str, int]:
        m = (model or "").strip().lower()
        if m.startswith("o") or m.startswith("gpt-5") or m.startswith("gpt-4.1"):
            return {"max_completion_tokens": limit}
        return {"max_tokens": limit}
