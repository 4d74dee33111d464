import base64
import binascii
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ai.providers.base import UpstreamServiceError
from api.patches import VoicePatch
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.record_store import record_to_dict, voice_recordings
from services.storage_service import MAX_AUDIO_SIZE, new_voice_key, storage_put
from services.transcription_service import transcribe_audio

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/voice", tags=["voice"])


class VoiceUploadRequest(BaseModel):
    audio_data: str = Field(min_length=1)  # base64
    recording_type: Optional[str] = Field(default=None, max_length=50)


def _decode_audio(encoded: str) -> bytes:
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=422, detail="audio_data is not valid base64")
    if not data:
        raise HTTPException(status_code=422, detail="audio_data is empty")
    if len(data) > MAX_AUDIO_SIZE:
        raise HTTPException(status_code=413, detail="Audio exceeds maximum upload size")
    return data


@router.post("/upload", status_code=201)
async def upload_recording(
    req: VoiceUploadRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Store the audio, record it, then try to attach a transcript.

    Transcription failures leave the recording unprocessed; the upload itself
    still succeeds.
    """
    audio = _decode_audio(req.audio_data)
    key = new_voice_key(user.id)
    stored = storage_put(key, audio)
    recording = voice_recordings.create(db, user.id, {
        "audio_url": stored["url"],
        "audio_key": stored["key"],
        "recording_type": req.recording_type,
    })
    payload = record_to_dict(recording)

    try:
        result = await transcribe_audio(stored["url"])
    except UpstreamServiceError as e:
        logger.warning(f"Transcription failed for recording {recording.id}: {e}")
        return payload

    text = result.get("text")
    if not isinstance(text, str):
        logger.info(f"No transcript for recording {recording.id}: {result.get('code')}")
        return payload

    voice_recordings.update(db, recording.id, user.id, VoicePatch(transcription=text, processed=True))
    payload.update({"transcription": text, "processed": True})
    return payload


@router.get("")
def list_recordings(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [record_to_dict(r) for r in voice_recordings.list(db, user.id)]
