import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from database import create_tables, make_session_factory
from share.storage import SqlShareStore
from tournament.commands import EndTournament
from tournament.errors import ShareConflictError, StorageError
from tournament.lifecycle import apply
from tournament.storage import SqlTournamentStore


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessions(engine):
    return make_session_factory(engine)


class TestSqlTournamentStore:
    async def test_round_trip(self, sessions, mix_six):
        store = SqlTournamentStore(sessions)
        await store.save(mix_six)
        loaded = await store.load(mix_six.id)
        assert loaded == mix_six

    async def test_save_overwrites(self, sessions, four_player):
        store = SqlTournamentStore(sessions)
        await store.save(four_player)
        await store.save(apply(four_player, EndTournament()))
        loaded = await store.load(four_player.id)
        assert loaded.is_ended
        assert len(await store.load_all()) == 1

    async def test_load_all_and_delete(self, sessions, four_player, five_player):
        store = SqlTournamentStore(sessions)
        await store.save_all([four_player, five_player])
        assert {t.id for t in await store.load_all()} == {four_player.id, five_player.id}
        await store.delete(four_player.id)
        await store.delete(four_player.id)
        assert [t.id for t in await store.load_all()] == [five_player.id]

    async def test_missing(self, sessions):
        assert await SqlTournamentStore(sessions).load("nope") is None

    async def test_database_failure(self, four_player):
        broken = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        store = SqlTournamentStore(make_session_factory(broken))
        with pytest.raises(StorageError):
            await store.load(four_player.id)
        await broken.dispose()


class TestSqlShareStore:
    async def test_insert_and_get(self, sessions, four_player):
        store = SqlShareStore(sessions)
        await store.insert("abcdefghi", four_player.to_dict())
        assert await store.get("abcdefghi") == four_player.to_dict()
        assert await store.get("zzzzzzzzz") is None

    async def test_duplicate_insert(self, sessions, four_player):
        store = SqlShareStore(sessions)
        await store.insert("abcdefghi", four_player.to_dict())
        with pytest.raises(ShareConflictError):
            await store.insert("abcdefghi", {"other": True})

    async def test_upsert(self, sessions, four_player):
        store = SqlShareStore(sessions)
        await store.upsert("abcdefghi", {"name": "first"})
        await store.upsert("abcdefghi", four_player.to_dict())
        assert await store.get("abcdefghi") == four_player.to_dict()
