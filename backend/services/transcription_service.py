import logging

import httpx

from ai.providers.base import UpstreamServiceError
from config import settings

logger = logging.getLogger(__name__)


async def transcribe_audio(audio_url: str, *, language: str | None = None) -> dict:
    """Transcribe the audio at ``audio_url``.

    Returns ``{"text": ..., "language": ...}`` on success, or an error-shaped
    ``{"error": ..., "code": ...}`` dict when the service declines. Transport
    failures raise UpstreamServiceError.
    """
    if not (settings.TRANSCRIPTION_API_KEY or "").strip():
        return {"error": "Transcription service is not configured", "code": "NOT_CONFIGURED"}

    headers = {"Authorization": f"Bearer {settings.TRANSCRIPTION_API_KEY}"}
    form = {"model": settings.TRANSCRIPTION_MODEL, "response_format": "json"}
    if language:
        form["language"] = language

    try:
        async with httpx.AsyncClient(timeout=settings.TRANSCRIPTION_TIMEOUT_SECONDS) as client:
            audio = await client.get(audio_url)
            if audio.status_code != 200:
                return {"error": f"Audio not retrievable ({audio.status_code})", "code": "AUDIO_FETCH_FAILED"}
            resp = await client.post(
                settings.TRANSCRIPTION_API_URL,
                headers=headers,
                data=form,
                files={"file": ("audio.webm", audio.content, "audio/webm")},
            )
    except httpx.HTTPError as e:
        raise UpstreamServiceError(f"Transcription service unreachable: {e}") from e

    if resp.status_code != 200:
        logger.warning(f"Transcription service error {resp.status_code}: {resp.text}")
        return {"error": f"Transcription failed ({resp.status_code})", "code": "TRANSCRIPTION_FAILED"}

    try:
        data = resp.json()
    except ValueError:
        return {"error": "Transcription service returned invalid JSON", "code": "INVALID_RESPONSE"}
    text = data.get("text") if isinstance(data, dict) else None
    if not isinstance(text, str):
        return {"error": "Transcription unavailable", "code": "NO_TEXT"}
    return {"text": text, "language": data.get("language")}
