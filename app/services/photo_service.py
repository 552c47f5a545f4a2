# app/services/photo_service.py
"""
Photo service: stores a visitor photo captured at the gate and returns its URL.

Backends:
  - Supabase Storage (when SUPABASE_URL + SUPABASE_SERVICE_KEY are set):
      POST {SUPABASE_URL}/storage/v1/object/{bucket}/{key}
      URL  {SUPABASE_URL}/storage/v1/object/public/{bucket}/{key}
  - Local directory (default): PHOTO_DIR/{key}, served by the API at /photos/{key}

Upload failures never raise: the caller registers the visitor without a photo.
"""

import httpx
import os
import time
from typing import Optional
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

PHOTO_URL_PREFIX = "/photos"

# Ensure folder exists on import
os.makedirs(settings.PHOTO_DIR, exist_ok=True)


def make_photo_key() -> str:
    return f"visitor-{int(time.time() * 1000)}.jpg"


def public_url(key: str) -> str:
    if settings.use_supabase_storage:
        base = settings.SUPABASE_URL.rstrip("/")
        return f"{base}/storage/v1/object/public/{settings.PHOTO_BUCKET}/{key}"
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{PHOTO_URL_PREFIX}/{key}"


async def _upload_to_supabase(key: str, data: bytes, content_type: str) -> bool:
    url = f"{settings.SUPABASE_URL.rstrip('/')}/storage/v1/object/{settings.PHOTO_BUCKET}/{key}"
    headers = {
        "Authorization": f"Bearer {settings.SUPABASE_SERVICE_KEY}",
        "apikey": settings.SUPABASE_SERVICE_KEY,
        "Content-Type": content_type,
    }
    async with httpx.AsyncClient(timeout=settings.EXPORT_TIMEOUT_SECONDS) as client:
        response = await client.post(url, content=data, headers=headers)
    if response.status_code not in (200, 201):
        logger.warning(f"[PHOTO] Storage returned HTTP {response.status_code}: {response.text[:200]}")
        return False
    return True


def _save_locally(key: str, data: bytes) -> bool:
    with open(os.path.join(settings.PHOTO_DIR, key), "wb") as f:
        f.write(data)
    return True


async def upload_photo(data: bytes, content_type: str = "image/jpeg") -> Optional[str]:
    """
    Store the photo and return its public URL, or None if it failed.
    """
    if not data:
        return None

    key = make_photo_key()
    try:
        if settings.use_supabase_storage:
            ok = await _upload_to_supabase(key, data, content_type)
        else:
            ok = _save_locally(key, data)
    except (httpx.HTTPError, OSError) as e:
        logger.error(f"[PHOTO] Upload failed for {key}: {e}")
        return None

    if not ok:
        return None
    logger.info(f"[PHOTO] Stored {key} ({len(data)} bytes)")
    return public_url(key)
