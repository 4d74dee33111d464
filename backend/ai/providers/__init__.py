from ai.providers.base import AIProvider, UpstreamServiceError
from ai.providers.anthropic import AnthropicProvider
from ai.providers.openai_provider import OpenAIProvider
from ai.providers.google import GoogleProvider

from config import settings


def _looks_like_provider_model(provider_name: str, model_id: str | None) -> bool:
    if not model_id:
        return False
    m = model_id.strip().lower()
    if not m:
        return False
    if provider_name == "anthropic":
        return "claude" in m
    if provider_name == "openai":
        return m.startswith("gpt") or m.startswith("o") or "gpt" in m
    if provider_name == "google":
        return "gemini" in m
    return True


def get_provider(
    provider_name: str,
    api_key: str,
    model: str | None = None,
    timeout_seconds: float = 60,
) -> AIProvider:
    providers = {
        "anthropic": AnthropicProvider,
        "openai": OpenAIProvider,
        "google": GoogleProvider,
    }
    cls = providers.get(provider_name)
    if not cls:
        raise ValueError(f"Unknown provider: {provider_name}")

    safe_model = model if _looks_like_provider_model(provider_name, model) else None
    return cls(api_key=api_key, model=safe_model, timeout_seconds=timeout_seconds)


def get_configured_provider() -> AIProvider:
    """Provider built from settings; raises if text generation is not configured."""
    if not (settings.AI_API_KEY or "").strip():
        raise UpstreamServiceError("Text generation service is not configured")
    try:
        return get_provider(
            (settings.AI_PROVIDER or "").strip().lower(),
            settings.AI_API_KEY,
            model=settings.AI_MODEL,
            timeout_seconds=settings.AI_TIMEOUT_SECONDS,
        )
    except ValueError as e:
        raise UpstreamServiceError(str(e)) from e
