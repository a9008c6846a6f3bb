"""URL shortener: short code creation, resolution and click counting."""
import logging
import random
import re
import string
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from .config import MAX_CODE_ATTEMPTS, SHORT_CODE_LENGTH
from .database import Database
from .errors import CapacityError, ConflictError, InvalidInputError, NotFoundError
from .qr_generator import render_qr_png

logger = logging.getLogger(__name__)

SHORT_CODE_CHARS = string.ascii_uppercase + string.ascii_lowercase + string.digits
CUSTOM_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,32}$")


def generate_short_code(length: int = SHORT_CODE_LENGTH) -> str:
    """Generate a random short code from the 62 alphanumeric characters"""
    return ''.join(random.choices(SHORT_CODE_CHARS, k=length))


def validate_url(url: str) -> str:
    """Return the stripped URL if it is an absolute http(s) URL, else raise InvalidInputError"""
    url = (url or "").strip()
    if not url:
        raise InvalidInputError("Long URL is required")

    try:
        result = urlparse(url)
    except ValueError:
        raise InvalidInputError("Invalid URL format")

    if result.scheme not in ("http", "https") or not result.netloc:
        raise InvalidInputError("Invalid URL format")
    return url


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def _unused_code(db: Database) -> str:
    for attempt in range(MAX_CODE_ATTEMPTS):
        code = generate_short_code()
        if not await db.urls.find_one(shortCode=code):
            return code
        logger.info("[SHORTENER] Short code collision on attempt %d", attempt + 1)

    raise CapacityError("Could not generate a unique short code, please retry")


async def shorten(
    db: Database,
    long_url: str,
    base_url: str,
    custom_code: Optional[str] = None,
    created_by: str = "anonymous",
    expires_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Create a short URL record for ``long_url``.

    A custom code that is already taken is a conflict; it is never overwritten.
    """
    long_url = validate_url(long_url)

    if expires_at is not None:
        expires_at = _as_utc(expires_at)
        if expires_at <= datetime.now(timezone.utc):
            raise InvalidInputError("Expiration date cannot be in the past")

    if custom_code:
        if not CUSTOM_CODE_PATTERN.match(custom_code):
            raise InvalidInputError("Custom code may only contain letters, digits, '-' and '_' (max 32)")
        if await db.urls.find_one(shortCode=custom_code):
            raise ConflictError("Custom short code already exists")
        short_code = custom_code
    else:
        short_code = await _unused_code(db)

    record = await db.urls.create({
        "longUrl": long_url,
        "shortCode": short_code,
        "shortUrl": f"{base_url.rstrip('/')}/s/{short_code}",
        "clicks": 0,
        "createdBy": created_by or "anonymous",
        "expiresAt": expires_at,
        "isActive": True,
    })
    logger.info("[SHORTENER] Created %s -> %s", short_code, long_url)
    return record


async def _active_record(db: Database, short_code: str) -> Dict[str, Any]:
    record = await db.urls.find_one(shortCode=short_code, isActive=True)
    if not record:
        raise NotFoundError("Short URL not found")
    return record


async def resolve(db: Database, short_code: str) -> str:
    """Return the long URL for ``short_code`` and count the click."""
    record = await _active_record(db, short_code)

    expires_at = record.get("expiresAt")
    if expires_at and _as_utc(expires_at) <= datetime.now(timezone.utc):
        raise NotFoundError("Short URL has expired")

    try:
        await db.urls.update_counter_by_id(record["id"], "clicks", 1)
    except Exception as e:
        logger.warning("[SHORTENER] Failed to count click for %s: %s", short_code, e)

    return record["longUrl"]


async def get_stats(db: Database, short_code: str) -> Dict[str, Any]:
    record = await _active_record(db, short_code)
    return {
        "shortCode": record["shortCode"],
        "originalUrl": record["longUrl"],
        "shortUrl": record["shortUrl"],
        "clicks": record["clicks"],
        "createdAt": record["createdAt"],
        "createdBy": record["createdBy"],
        "expiresAt": record.get("expiresAt"),
    }


async def deactivate(db: Database, short_code: str) -> Dict[str, Any]:
    record = await _active_record(db, short_code)
    updated = await db.urls.update_by_id(record["id"], {"isActive": False})
    logger.info("[SHORTENER] Deactivated %s", short_code)
    return updated


async def qr_code(db: Database, short_code: str, size: str = "medium") -> bytes:
    """PNG QR code pointing at the short URL"""
    record = await _active_record(db, short_code)
    return render_qr_png(record["shortUrl"], size)
