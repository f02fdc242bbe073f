from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from asyncpg import Connection
from uuid import uuid4
from sqlalchemy import (
    JSON, Column, String,
    func, DateTime,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

from config import DATABASE_URL

class Base(DeclarativeBase): pass

# JSONB on Postgres, plain JSON elsewhere (sqlite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class FixedConnection(Connection):
    def _get_unique_id(self, prefix: str) -> str:
        return f'__asyncpg_{prefix}_{uuid4()}__'


def make_engine(url: str = DATABASE_URL, **kwargs):
    if url.startswith("postgresql+asyncpg"):
        # pgbouncer in transaction mode cannot keep prepared statements
        kwargs.setdefault("connect_args", {
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            "connection_class": FixedConnection,
        })
    return create_async_engine(url, echo=False, future=True, **kwargs)


def make_session_factory(bind) -> async_sessionmaker:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = make_engine()

# Session factory
AsyncSessionLocal = make_session_factory(engine)


async def create_tables(bind=engine):
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

#ORM

class TournamentORM(Base):
    __tablename__ = "tournaments"

    id            = Column(String, primary_key=True)
    name          = Column(String, nullable=False)
    team_type     = Column(String, nullable=False, default="standard")  # standard | mix | team | mexicano
    data          = Column(JSONDocument, nullable=False)                  # full camelCase snapshot
    created_at    = Column(DateTime(timezone=True), server_default=func.now())
    updated_at    = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class SharedTournamentORM(Base):
    __tablename__ = "shared_tournaments"

    share_id        = Column(String(9), primary_key=True)
    tournament_data = Column(JSONDocument, nullable=False)
    created_at      = Column(DateTime(timezone=True), server_default=func.now())
    updated_at      = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
