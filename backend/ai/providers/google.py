from ai.providers.base import AIProvider


class GoogleProvider(AIProvider):
    """Google Gemini text-generation provider."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    DEFAULT_MODEL = "gemini-2.0-flash"

    def _endpoint(self, model: str) -> str:
        return f"{self.BASE_URL}/{model}:generateContent?key={self.api_key}"

    @staticmethod
    def _convert_messages(messages: list[dict]) -> list[dict]:
        """Convert OpenAI-style messages to Gemini format."""
        contents = []
        for msg in messages:
            role = msg["role"]
            # Gemini uses "user" and "model" roles
            if role == "assistant":
                role = "model"
            contents.append({
                "role": role,
                "parts": [{"text": str(msg.get("content", ""))}],
            })
        return contents

    async def chat(self, messages: list[dict], model: str | None = None, system: str = "") -> dict:
        model = model or self.get_model()
        payload: dict = {"contents": self._convert_messages(messages)}
        if system:
            payload["system_instruction"] = {"parts": [{"text": system}]}

        data = await self._post_json(
            self._endpoint(model),
            payload,
            {"Content-Type": "application/json"},
            "Google",
        )

        # Only the first candidate is used
        content = ""
        candidates = data.get("candidates", [])
        if candidates:
            for part in candidates[0].get("content", {}).get("parts", []):
                content += part.get("text", "")

        usage = data.get("usageMetadata", {})
        return {
            "content": content,
            "tokens_in": usage.get("promptTokenCount", 0),
            "tokens_out": usage.get("candidatesTokenCount", 0),
            "model": model,
        }
