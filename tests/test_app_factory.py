"""
End-to-end wiring of ClubStore over both media.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the clubstore package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clubstore import ClubStore  # noqa: E402
from clubstore.core import config as core_config  # noqa: E402
from clubstore.repositories.json_storage import JsonFileStore  # noqa: E402
from clubstore.repositories.sql_storage import SQLKeyedStore  # noqa: E402


@pytest.fixture()
def env(tmp_path, monkeypatch):
    monkeypatch.setenv("CLUBSTORE_DATA_FILE", str(tmp_path / "data.json"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("CLUBSTORE_LOG_LEVEL", "WARNING")
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


def test_settings_defaults_and_overrides(env):
    env.setenv("CLUBSTORE_MAX_TEAM_SIZE", "not-a-number")
    env.setenv("CLUBSTORE_OPTIMISTIC_WRITES", "yes")
    core_config.get_settings.cache_clear()
    settings = core_config.get_settings()
    assert settings.backend == "json"
    assert settings.max_team_size == 16
    assert settings.optimistic_writes is True
    assert settings.seed_on_start is True
    assert settings.recent_announcements == 3


@pytest.mark.parametrize("backend,store_type", [("json", JsonFileStore), ("sql", SQLKeyedStore)])
async def test_start_seeds_and_serves_every_component(env, backend, store_type):
    env.setenv("CLUBSTORE_BACKEND", backend)
    core_config.get_settings.cache_clear()
    async with ClubStore.from_settings() as club:
        assert isinstance(club.store, store_type)
        assert len(await club.teams.list()) == 4
        assert len(await club.players.list_summaries()) == 4
        assert await club.events.list()
        assert len(await club.announcements.recent()) == 3
        admin = await club.auth.login("admin", "admin123")
        assert (await club.auth.get_current_user()) == admin

    # a second launch keeps data and the session
    async with ClubStore.from_settings() as club:
        assert len(await club.teams.list()) == 4
        assert club.auth.session is not None
        assert club.auth.session.user_id == admin.id


async def test_seeding_can_be_disabled(env):
    env.setenv("CLUBSTORE_SEED_ON_START", "0")
    core_config.get_settings.cache_clear()
    async with ClubStore.from_settings() as club:
        assert await club.teams.list() == []


async def test_unknown_backend_is_rejected(env):
    env.setenv("CLUBSTORE_BACKEND", "redis")
    core_config.get_settings.cache_clear()
    with pytest.raises(RuntimeError):
        ClubStore.from_settings()


async def test_optimistic_writes_flow_through_repositories(env):
    env.setenv("CLUBSTORE_OPTIMISTIC_WRITES", "true")
    core_config.get_settings.cache_clear()
    async with ClubStore.from_settings() as club:
        repositories = (club.teams, club.players, club.events, club.announcements, club.users, club.auth.users)
        assert all(repo.optimistic for repo in repositories)
        # sequential updates each read the current revision, so none is stale
        await club.teams.update("team-1", {"name": "Renamed"})
        await club.teams.update("team-1", {"division": "Premier"})
        team = await club.teams.get_by_id("team-1")
        assert (team.name, team.division) == ("Renamed", "Premier")
