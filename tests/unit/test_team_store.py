import asyncio
import pytest
import pytest_asyncio
from sqlalchemy import event
from pokedex_api.db.models import PokemonTeam
from pokedex_api.db.team_store import StoreError, TeamStore


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'teams.db'}"

@pytest_asyncio.fixture
async def team_store(database_url):
    """Provides a TeamStore backed by a throwaway SQLite file."""
    store = TeamStore(database_url)
    yield store
    await store.close()

@pytest.fixture
def ddl_counter():
    """Counts CREATE TABLE statements issued for the team table."""
    calls = []

    def record(target, connection, **kw):
        calls.append(target.name)

    event.listen(PokemonTeam.__table__, "after_create", record)
    yield calls
    event.remove(PokemonTeam.__table__, "after_create", record)


@pytest.mark.asyncio
async def test_ensure_schema_is_idempotent(team_store, ddl_counter):
    assert await team_store.ensure_schema() is True
    assert await team_store.ensure_schema() is False

    assert ddl_counter == ["pokemon_team"]


@pytest.mark.asyncio
async def test_ensure_schema_checks_existing_table(team_store, database_url, ddl_counter):
    """A second store on the same database finds the table and issues no DDL."""
    await team_store.ensure_schema()

    other = TeamStore(database_url)
    try:
        assert await other.ensure_schema() is False
    finally:
        await other.close()

    assert len(ddl_counter) == 1


@pytest.mark.asyncio
async def test_list_on_empty_table(team_store):
    await team_store.ensure_schema()

    assert await team_store.list_all_teams() == []


@pytest.mark.asyncio
async def test_insert_then_list(team_store):
    await team_store.ensure_schema()

    team_id = await team_store.insert_team("Pikachu", "Sparky", '{"hp":35}', "Static", None)
    teams = await team_store.list_all_teams()

    assert isinstance(team_id, int) and team_id > 0
    assert len(teams) == 1
    record = teams[0]
    assert record.id == team_id
    assert record.name == "Pikachu"
    assert record.nickname == "Sparky"
    assert record.stats == '{"hp":35}'
    assert record.held_item is None
    assert record.created_at is not None
    assert record.updated_at is None


@pytest.mark.asyncio
async def test_ids_are_unique_and_listed_in_order(team_store):
    await team_store.ensure_schema()

    first = await team_store.insert_team("Bulbasaur", "Bulby", "{}", "Overgrow")
    second = await team_store.insert_team("Charmander", "Char", "{}", "Blaze", held_item="Charcoal")
    teams = await team_store.list_all_teams()

    assert first != second
    assert [t.id for t in teams] == [first, second]
    assert teams[1].held_item == "Charcoal"


@pytest.mark.asyncio
async def test_insert_without_table_raises_store_error(team_store):
    with pytest.raises(StoreError) as excinfo:
        await team_store.insert_team("Pikachu", "Sparky", "{}", "Static")

    assert excinfo.value.code == "db_insert_error"


@pytest.mark.asyncio
async def test_insert_missing_required_column_raises_store_error(team_store):
    """NOT NULL columns are enforced by the database, reported as StoreError."""
    await team_store.ensure_schema()

    with pytest.raises(StoreError):
        await team_store.insert_team("Pikachu", None, "{}", "Static")


@pytest.mark.asyncio
async def test_concurrent_first_calls_create_the_table_once(team_store, ddl_counter):
    results = await asyncio.gather(*(team_store.ensure_schema() for _ in range(5)))

    assert sorted(results) == [False, False, False, False, True]
    assert ddl_counter == ["pokemon_team"]
