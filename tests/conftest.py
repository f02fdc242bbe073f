import os
import random

# keep the app away from a real database during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("CREATE_TABLES", "0")

import pytest

from tournament.commands import SetScore
from tournament.errors import ShareConflictError, StorageError
from tournament.lifecycle import apply, create_tournament
from tournament.models import Tournament

PLAYERS_4 = ["A", "B", "C", "D"]
PLAYERS_5 = ["Ann", "Ben", "Cleo", "Dan", "Eve"]
MIX_6 = {"Tom": "male", "Sam": "male", "Leo": "male", "Mia": "female", "Zoe": "female", "Ivy": "female"}


class InMemoryTournamentStore:
    """Keeps wire snapshots, so every load hands out a fresh object."""

    def __init__(self):
        self.data = {}

    async def load(self, tournament_id):
        raw = self.data.get(tournament_id)
        return Tournament.from_dict(raw) if raw else None

    async def load_all(self):
        return [Tournament.from_dict(raw) for raw in self.data.values()]

    async def save_all(self, tournaments):
        for t in tournaments:
            self.data[t.id] = t.to_dict()

    async def save(self, tournament):
        await self.save_all([tournament])

    async def delete(self, tournament_id):
        self.data.pop(tournament_id, None)


class InMemoryShareStore:
    def __init__(self, fail_with=None):
        self.records = {}
        self.inserts = []
        self.upserts = []
        self.fail_with = fail_with

    async def insert(self, share_id, data):
        self.inserts.append(share_id)
        if self.fail_with:
            raise self.fail_with
        if share_id in self.records:
            raise ShareConflictError("Share id already in use")
        self.records[share_id] = data

    async def upsert(self, share_id, data):
        self.upserts.append(share_id)
        if self.fail_with:
            raise self.fail_with
        self.records[share_id] = data

    async def get(self, share_id):
        return self.records.get(share_id)


def score_all(tournament, value=15):
    """Score team A with ``value`` in every round and return the new snapshot."""
    for rnd in tournament.rounds:
        for match in rnd.matches:
            tournament = apply(tournament, SetScore(rnd.round_number, match.id, "A", value))
    return tournament


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def four_player(rng):
    return create_tournament("Friday Night", "standard", "21", PLAYERS_4, rng=rng)


@pytest.fixture
def five_player(rng):
    return create_tournament("Five", "standard", "21", PLAYERS_5, rng=rng)


@pytest.fixture
def mix_six(rng):
    return create_tournament("Mixed", "mix", "16", list(MIX_6), genders=dict(MIX_6), rng=rng)


@pytest.fixture
def mexicano(rng):
    return create_tournament("Mex", "mexicano", "best5", PLAYERS_5, rng=rng)


@pytest.fixture
def tournament_store():
    return InMemoryTournamentStore()


@pytest.fixture
def share_store():
    return InMemoryShareStore()


@pytest.fixture
def failing_share_store():
    return InMemoryShareStore(fail_with=StorageError("Failed to create share link"))


@pytest.fixture
def client(tournament_store, share_store):
    from fastapi.testclient import TestClient

    from main import app
    from share.router import get_share_store
    from tournament.router import get_tournament_store

    app.dependency_overrides[get_tournament_store] = lambda: tournament_store
    app.dependency_overrides[get_share_store] = lambda: share_store
    yield TestClient(app)
    app.dependency_overrides.clear()
