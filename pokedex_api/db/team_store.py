import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from pokedex_api.db.models import PokemonTeam
from pokedex_api.models import TeamRecord

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A database operation on the team table failed."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def _create_team_table_if_absent(sync_conn) -> bool:
    if inspect(sync_conn).has_table(PokemonTeam.__tablename__):
        return False
    PokemonTeam.__table__.create(sync_conn)
    return True


class TeamStore:
    """
    Owns the ``pokemon_team`` table.
    Usage:
        store = TeamStore("sqlite+aiosqlite:///./pokedex.db")
        await store.ensure_schema()
        team_id = await store.insert_team(...)
        await store.close()
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self._engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        self._sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
            autoflush=False,
        )
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provides an AsyncSession with safe commit/rollback semantics.
        """
        session: AsyncSession = self._sessionmaker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def ensure_schema(self) -> bool:
        """
        Create the team table if it does not exist yet.

        The existence check always precedes the DDL, and once the table is
        known to exist this instance stops checking.

        Returns:
            bool: True if CREATE TABLE was issued by this call.

        Raises:
            StoreError: code ``db_schema_error``.
        """
        if self._schema_ready:
            return False

        # Concurrent first requests must not both run the check-then-create
        async with self._schema_lock:
            if self._schema_ready:
                return False

            try:
                async with self._engine.begin() as conn:
                    created = await conn.run_sync(_create_team_table_if_absent)
            except SQLAlchemyError as e:
                logger.error(f"Failed to prepare the {PokemonTeam.__tablename__} table: {e}")
                raise StoreError("db_schema_error", "Failed to create the Pokémon team table") from e

            if created:
                logger.info(f"Created table {PokemonTeam.__tablename__}")
            self._schema_ready = True
            return created

    async def insert_team(
        self,
        name: str,
        nickname: str,
        stats: str,
        ability: str,
        held_item: Optional[str] = None,
    ) -> int:
        """
        Insert a team row and return its generated id.

        ``created_at`` is set to the current naive UTC time, ``updated_at``
        stays NULL.

        Raises:
            StoreError: code ``db_insert_error``.
        """
        team = PokemonTeam(
            name=name,
            nickname=nickname,
            stats=stats,
            ability=ability,
            held_item=held_item,
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        )

        try:
            async with self.session() as s:
                s.add(team)
                await s.flush()
                team_id = team.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert team {name!r}: {e}")
            raise StoreError("db_insert_error", "Failed to insert Pokémon team into the database") from e

        logger.info(f"Inserted team {team_id} ({name})")
        return team_id

    async def list_all_teams(self) -> list[TeamRecord]:
        """All team rows ordered by id; empty list when there are none."""
        try:
            async with self.session() as s:
                rows = (await s.execute(select(PokemonTeam).order_by(PokemonTeam.id.asc()))).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list teams: {e}")
            raise StoreError("db_query_error", "Failed to read Pokémon teams from the database") from e

        return [TeamRecord.model_validate(r) for r in rows]

    async def close(self) -> None:
        await self._engine.dispose()
