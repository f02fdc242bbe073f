import logging
import re
import secrets
import string
from typing import Callable

from config import SHARE_BASE_URL
from tournament.errors import ShareConflictError, ValidationError

logger = logging.getLogger(__name__)

SHARE_ID_LENGTH = 9
SHARE_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
SHARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{9}$")


def generate_share_id() -> str:
    """Short, URL-safe public id from a cryptographically secure source."""
    return "".join(secrets.choice(SHARE_ID_ALPHABET) for _ in range(SHARE_ID_LENGTH))


def is_valid_share_id(share_id: str) -> bool:
    return bool(SHARE_ID_PATTERN.match(share_id or ""))


def share_url(share_id: str) -> str:
    return f"{SHARE_BASE_URL}/share/{share_id}"


async def share_tournament(
    snapshot: dict,
    store,
    id_factory: Callable[[], str] = generate_share_id,
) -> str:
    """Publish ``snapshot`` and return its share id.

    A snapshot that already carries a ``shareId`` overwrites the record at
    that id. A new record is stored with its own ``shareId`` filled in. A new
    id that collides is replaced once; a second collision raises
    ShareConflictError. Storage errors are never retried.
    """
    existing = snapshot.get("shareId")
    if existing:
        if not is_valid_share_id(existing):
            raise ValidationError("Invalid share ID format")
        await store.upsert(existing, snapshot)
        logger.info(f"[share] Updated {existing}")
        return existing

    share_id = id_factory()
    try:
        await store.insert(share_id, dict(snapshot, shareId=share_id))
    except ShareConflictError:
        logger.warning(f"[share] Share id {share_id} already taken, retrying once")
        share_id = id_factory()
        try:
            await store.insert(share_id, dict(snapshot, shareId=share_id))
        except ShareConflictError as e:
            logger.error(f"[share] Retry share id {share_id} collided as well")
            raise ShareConflictError("Failed to create share link", details=e.details) from e

    logger.info(f"[share] Published tournament {snapshot.get('id')} as {share_id}")
    return share_id
