import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import AsyncSessionLocal, SharedTournamentORM
from tournament.errors import ShareConflictError, StorageError

logger = logging.getLogger(__name__)


class SqlShareStore:
    """Published snapshots keyed by their public share id."""

    def __init__(self, session_factory=AsyncSessionLocal):
        self._sessions = session_factory

    async def insert(self, share_id: str, data: dict):
        """Raises ShareConflictError when ``share_id`` is taken."""
        try:
            async with self._sessions() as session:
                session.add(SharedTournamentORM(share_id=share_id, tournament_data=data))
                await session.commit()
        except IntegrityError as e:
            raise ShareConflictError("Share id already in use", details=str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error(f"[share] Insert error for {share_id}: {e}")
            raise StorageError("Failed to create share link", details=str(e)) from e

    async def upsert(self, share_id: str, data: dict):
        try:
            async with self._sessions() as session:
                await session.merge(SharedTournamentORM(share_id=share_id, tournament_data=data))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[share] Upsert error for {share_id}: {e}")
            raise StorageError("Failed to update share link", details=str(e)) from e

    async def get(self, share_id: str) -> Optional[dict]:
        try:
            async with self._sessions() as session:
                row = await session.get(SharedTournamentORM, share_id)
        except SQLAlchemyError as e:
            logger.error(f"[share] Fetch error for {share_id}: {e}")
            raise StorageError("Failed to fetch tournament", details=str(e)) from e
        return row.tournament_data if row else None
