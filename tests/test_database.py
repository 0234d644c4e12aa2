import asyncpg
import json
import pytest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from database.connection import DatabasePool
from database.converters import (
    course_from_row,
    course_ref_from_row,
    course_updates_to_columns,
    round_from_row,
    round_to_row,
)
from database.db_manager import DatabaseManager
from database.exceptions import DuplicateError, IntegrityError, StoreError
from database.repositories.course_repo import CourseRepositoryDB
from database.repositories.profile_repo import ProfileRepositoryDB
from database.repositories.round_repo import RoundRepositoryDB
from models import (
    CourseInput,
    CourseSnapshot,
    GolfValidationError,
    LegacyCourseName,
    Location,
    MissingFieldsError,
    PlayerScore,
    PlayerStats,
    Round,
    UserProfile,
)


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _profile_row(uid="u1", name="Ada", **stats):
    row = {
        "uid": uid, "name": name, "photo_url": None, "home_course": None,
        "handicap": None, "wins": 0, "birdies": 0, "best_score": 999,
        "average_score": 0, "rounds_played": 0, "created_at": NOW,
    }
    row.update(stats)
    return row


def _course_row(course_id=None, **overrides):
    row = {
        "id": course_id or uuid4(), "name": "Pebble Beach", "address": "Monterey, CA",
        "lat": 36.5, "lng": -121.9, "holes": 18, "par": 72, "rating": 0,
        "slope": 0, "amenities": [], "phone": None, "website": None,
        "created_at": NOW, "updated_at": NOW, "created_by": "u1", "is_public": False,
    }
    row.update(overrides)
    return row


def _round_row(round_id=None, *, kind="legacy", **overrides):
    row = {
        "id": round_id or uuid4(), "course_kind": kind, "course_id": None,
        "course_name": "Pine Valley", "course_holes": None, "course_par": None,
        "course_address": None, "round_date": date(2024, 5, 4),
        "players": ["a", "b"],
        "scores": json.dumps([{"uid": "a", "holes": [4] * 9}, {"uid": "b", "holes": [5] * 9}]),
        "winner": "a", "hole_count": 9, "par": None, "created_at": NOW,
    }
    row.update(overrides)
    return row


def _round(course=None):
    return Round(
        course=course or LegacyCourseName(name="Pine Valley"),
        date=date(2024, 5, 4),
        players=["a", "b"],
        scores=[PlayerScore(uid="a", holes=[4] * 9), PlayerScore(uid="b", holes=[5] * 9)],
        winner="a",
        hole_count=9,
    )


def _course_payload(**overrides):
    data = dict(name="Pebble Beach", location=Location(address="Monterey, CA"), holes=18, par=72)
    data.update(overrides)
    return CourseInput(**data)


# ================================================================
# converters.py: pure functions, no mocks needed
# ================================================================

def test_course_converter_maps_location():
    cid = uuid4()
    c = course_from_row(_course_row(cid, amenities=["Pro Shop"]))
    assert c.id == str(cid)
    assert c.location.address == "Monterey, CA"
    assert c.location.is_geocoded()
    assert c.amenities == ["Pro Shop"]


def test_course_ref_legacy_and_snapshot():
    legacy = course_ref_from_row(_round_row())
    assert isinstance(legacy, LegacyCourseName)
    assert legacy.name == "Pine Valley"

    cid = uuid4()
    snap = course_ref_from_row(_round_row(
        kind="snapshot", course_id=cid, course_holes=9, course_par=36, course_address="NJ",
    ))
    assert isinstance(snap, CourseSnapshot)
    assert snap.course_id == str(cid)
    assert snap.par == 36


def test_course_ref_unknown_kind():
    with pytest.raises(ValueError):
        course_ref_from_row(_round_row(kind="guess"))


def test_round_converter_reads_jsonb_string_or_list():
    r = round_from_row(_round_row())
    assert r.players == ["a", "b"]
    assert r.player_score("b").holes == [5] * 9

    decoded = _round_row(scores=[{"uid": "a", "holes": [4] * 9}, {"uid": "b", "holes": [4] * 9}])
    assert round_from_row(decoded).player_score("b").holes == [4] * 9


def test_round_to_row_tags_course_variant():
    legacy = round_to_row(_round())
    assert legacy["course_kind"] == "legacy"
    assert legacy["course_holes"] is None
    assert json.loads(legacy["scores"])[0] == {"uid": "a", "holes": [4] * 9}

    cid = str(uuid4())
    snap = round_to_row(_round(CourseSnapshot(course_id=cid, name="Nine", holes=9, par=36)))
    assert snap["course_kind"] == "snapshot"
    assert str(snap["course_id"]) == cid
    assert snap["course_par"] == 36


def test_course_updates_flatten_location():
    cols = course_updates_to_columns({
        "location": Location(address="NY", lat=1.0, lng=2.0),
        "rating": None,
        "amenities": None,
    })
    assert cols == {"address": "NY", "lat": 1.0, "lng": 2.0, "rating": 0, "amenities": []}


# ================================================================
# ProfileRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_profile_repo_list_ordered_by_name(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetch.return_value = [_profile_row("a", "Ada"), _profile_row("b", "Bo")]

    profiles = await repo.list_profiles()
    assert [p.uid for p in profiles] == ["a", "b"]
    assert "ORDER BY name, uid" in conn.fetch.call_args[0][0]


@pytest.mark.asyncio
async def test_profile_repo_create_zeroes_stats(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetchrow.return_value = _profile_row()

    profile = UserProfile(uid="u1", name="Ada", stats=PlayerStats(wins=2, rounds_played=4))
    await repo.create_profile(profile)

    args = conn.fetchrow.call_args[0]
    assert args[6:11] == (0, 0, 999, 0.0, 0)


@pytest.mark.asyncio
async def test_profile_repo_create_duplicate(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

    with pytest.raises(DuplicateError):
        await repo.create_profile(UserProfile(uid="u1", name="Ada"))


@pytest.mark.asyncio
async def test_profile_repo_ensure_profile_existing(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetchrow.return_value = _profile_row(name="Ada L")

    profile = await repo.ensure_profile("u1", "Ada")
    assert profile.name == "Ada L"
    assert conn.fetchrow.call_count == 1      # no insert


@pytest.mark.asyncio
async def test_profile_repo_ensure_profile_creates(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetchrow.side_effect = [None, _profile_row()]

    profile = await repo.ensure_profile("u1", "Ada")
    assert profile.uid == "u1"
    assert "INSERT INTO profiles" in conn.fetchrow.call_args[0][0]


@pytest.mark.asyncio
async def test_profile_repo_update_ignores_unknown_fields(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetchrow.return_value = _profile_row(home_course="Oakmont")

    await repo.update_profile("u1", home_course="Oakmont", wins=50)
    sql = conn.fetchrow.call_args[0][0]
    assert "home_course = $2" in sql
    assert "wins" not in sql


@pytest.mark.asyncio
async def test_profile_repo_update_stats_check_violation(mock_pool):
    pool, conn = mock_pool
    repo = ProfileRepositoryDB(pool)
    conn.fetchrow.side_effect = asyncpg.CheckViolationError("check")

    with pytest.raises(IntegrityError):
        await repo.update_stats("u1", PlayerStats())


# ================================================================
# CourseRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_course_repo_get_course_not_found(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_course(str(uuid4())) is None


@pytest.mark.asyncio
async def test_course_repo_list_public(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetch.return_value = [_course_row(is_public=True)]

    courses = await repo.list_courses()
    sql, *values = conn.fetch.call_args[0]
    assert "WHERE is_public" in sql
    assert "ORDER BY name" in sql
    assert "LIMIT" not in sql
    assert values == []
    assert len(courses) == 1


@pytest.mark.asyncio
async def test_course_repo_list_mine_with_prefix_and_limit(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetch.return_value = []

    await repo.list_courses(user_id="u1", search_term="Pine", limit=10)
    sql, *values = conn.fetch.call_args[0]
    assert "created_by = $1" in sql
    assert "is_public" not in sql
    assert 'name COLLATE "C" >= $2 AND name COLLATE "C" < $3' in sql
    assert "LIMIT $4" in sql
    assert values == ["u1", "Pine", "Pine", 10]


@pytest.mark.asyncio
async def test_course_repo_create_missing_fields_does_not_write(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    with pytest.raises(MissingFieldsError) as exc:
        await repo.create_course(CourseInput(name="Only a name"), user_id="u1")

    assert exc.value.fields == ["location", "holes", "par"]
    pool.acquire.assert_not_called()
    conn.fetchrow.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_create_requires_user(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    with pytest.raises(GolfValidationError):
        await repo.create_course(_course_payload(), user_id="")
    pool.acquire.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_create_defaults(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.return_value = _course_row()

    saved = await repo.create_course({
        "name": "Pebble Beach",
        "location": {"address": "Monterey, CA", "lat": 36.5, "lng": -121.9},
        "holes": 18,
        "par": 72,
    }, user_id="u1")

    sql, *values = conn.fetchrow.call_args[0]
    assert "NOW(), NOW()" in sql
    assert values[6:9] == [0, 0, []]            # rating, slope, amenities
    assert values[11:13] == ["u1", False]       # created_by, is_public
    assert saved.created_by == "u1"


@pytest.mark.asyncio
async def test_course_repo_create_store_failure(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.side_effect = asyncpg.PostgresError("connection lost")

    with pytest.raises(StoreError, match="Failed to create course"):
        await repo.create_course(_course_payload(), user_id="u1")


@pytest.mark.asyncio
async def test_course_repo_update_refreshes_timestamp(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid, name="Renamed")

    updated = await repo.update_course(str(cid), name="Renamed", created_by="someone-else")
    sql = conn.fetchrow.call_args[0][0]
    assert "name = $2" in sql
    assert "updated_at = NOW()" in sql
    assert "created_by" not in sql
    assert updated.name == "Renamed"


@pytest.mark.asyncio
async def test_course_repo_update_blank_name(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    with pytest.raises(GolfValidationError):
        await repo.update_course(str(uuid4()), name="  ")
    conn.fetchrow.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_update_rejects_bad_values(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    with pytest.raises(GolfValidationError, match="rating 200"):
        await repo.update_course(str(uuid4()), rating=200)
    with pytest.raises(GolfValidationError, match="holes, par"):
        await repo.update_course(str(uuid4()), holes=None, par=None)
    conn.fetchrow.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_delete(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.execute.return_value = "DELETE 1"
    assert await repo.delete_course(str(uuid4())) is True

    conn.execute.return_value = "DELETE 0"
    assert await repo.delete_course(str(uuid4())) is False


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_round_repo_list_for_player(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetch.return_value = [_round_row()]

    rounds = await repo.list_for_player("a")
    sql, uid = conn.fetch.call_args[0]
    assert "$1 = ANY(players)" in sql
    assert "ORDER BY round_date DESC" in sql
    assert uid == "a"
    assert rounds[0].winner == "a"


@pytest.mark.asyncio
async def test_round_repo_list_recent_limit(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetch.return_value = []

    await repo.list_recent(5)
    sql, limit = conn.fetch.call_args[0]
    assert "LIMIT $1" in sql
    assert limit == 5


@pytest.mark.asyncio
async def test_round_repo_create_single_insert(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = _round_row()

    saved = await repo.create_round(_round())

    assert conn.fetchrow.call_count == 1
    sql, *values = conn.fetchrow.call_args[0]
    assert sql.strip().startswith("INSERT INTO rounds")
    assert values[0] == "legacy"
    assert values[7] == ["a", "b"]
    assert saved.id is not None


@pytest.mark.asyncio
async def test_round_repo_create_store_failure(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.side_effect = asyncpg.PostgresError("timeout")

    with pytest.raises(StoreError, match="Failed to save round"):
        await repo.create_round(_round())


@pytest.mark.asyncio
async def test_round_repo_get_round_not_found(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = None
    assert await repo.get_round(str(uuid4())) is None


# ================================================================
# DatabaseManager
# ================================================================

@pytest.mark.asyncio
async def test_manager_applies_schema(mock_pool):
    pool, conn = mock_pool
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = AsyncMock()

    manager = DatabaseManager(pool)
    await manager.initialize_schema()

    sql = conn.execute.call_args[0][0]
    assert "CREATE TABLE IF NOT EXISTS rounds" in sql
    assert isinstance(manager.rounds, RoundRepositoryDB)


@pytest.mark.asyncio
async def test_round_repo_update_replaces_whole_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    rid = uuid4()
    conn.fetchrow.return_value = _round_row(rid)

    updated = await repo.update_round(str(rid), _round())

    sql, *values = conn.fetchrow.call_args[0]
    assert sql.startswith("UPDATE rounds SET course_kind = $2")
    assert "scores = $10" in sql
    assert values[0] == rid
    assert updated.id == str(rid)


# ================================================================
# DatabasePool
# ================================================================

@pytest.mark.asyncio
async def test_pool_rejects_min_above_max():
    pool = DatabasePool()
    with pytest.raises(ValueError):
        await pool.initialize("postgresql://localhost/golf", min_size=5, max_size=2)
    assert not pool.is_initialized


@pytest.mark.asyncio
async def test_pool_health_check_before_initialize():
    pool = DatabasePool()
    assert await pool.health_check() is False
    with pytest.raises(RuntimeError):
        pool.pool
