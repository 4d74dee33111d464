import uuid
from pathlib import Path

from ai.providers.base import UpstreamServiceError
from config import settings

MAX_AUDIO_SIZE = 16 * 1024 * 1024  # 16MB


def new_voice_key(user_id: int, extension: str = ".webm") -> str:
    return f"{user_id}/voice/{uuid.uuid4().hex}{extension}"


def _resolve_key(key: str) -> Path:
    root = settings.UPLOAD_DIR.resolve()
    path = (root / key).resolve()
    if root not in path.parents:
        raise ValueError(f"Storage key escapes upload directory: {key}")
    return path


def public_url(key: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/{key}"


def storage_put(key: str, data: bytes) -> dict:
    """Write ``data`` under ``key`` and return its durable retrieval URL."""
    path = _resolve_key(key)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise UpstreamServiceError(f"Blob storage write failed: {e}") from e
    return {"key": key, "url": public_url(key)}
