import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from database import AsyncSessionLocal, TournamentORM
from tournament.errors import StorageError
from tournament.models import Tournament

logger = logging.getLogger(__name__)


class SqlTournamentStore:
    """Tournament snapshots stored whole as JSON documents, last writer wins."""

    def __init__(self, session_factory=AsyncSessionLocal):
        self._sessions = session_factory

    async def load(self, tournament_id: str) -> Optional[Tournament]:
        try:
            async with self._sessions() as session:
                row = await session.get(TournamentORM, tournament_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load tournament {tournament_id}: {e}")
            raise StorageError("Failed to load tournament", details=str(e)) from e
        return Tournament.from_dict(row.data) if row else None

    async def load_all(self) -> List[Tournament]:
        try:
            async with self._sessions() as session:
                result = await session.execute(select(TournamentORM).order_by(TournamentORM.created_at))
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list tournaments: {e}")
            raise StorageError("Failed to load tournaments", details=str(e)) from e
        return [Tournament.from_dict(row.data) for row in rows]

    async def save_all(self, tournaments: Iterable[Tournament]):
        try:
            async with self._sessions() as session:
                for t in tournaments:
                    await session.merge(TournamentORM(
                        id=t.id, name=t.name, team_type=t.team_type, data=t.to_dict(),
                    ))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save tournaments: {e}")
            raise StorageError("Failed to save tournament", details=str(e)) from e

    async def save(self, tournament: Tournament):
        await self.save_all([tournament])

    async def delete(self, tournament_id: str):
        try:
            async with self._sessions() as session:
                row = await session.get(TournamentORM, tournament_id)
                if row:
                    await session.delete(row)
                    await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete tournament {tournament_id}: {e}")
            raise StorageError("Failed to delete tournament", details=str(e)) from e
