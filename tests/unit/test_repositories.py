"""
Unit Tests for Repositories and DatabaseManager
===============================================

Runs the SQLAlchemy models against in-memory SQLite (aiosqlite).
"""

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lekhapal.db.connection import DatabaseManager
from lekhapal.db.models import Base, TableData
from lekhapal.db.repositories import ShgDocumentsRepository, TableDataRepository
from lekhapal.utils.errors import NotFoundError, PersistenceError


@pytest_asyncio.fixture
async def session():
    """Session bound to a fresh in-memory database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


class TestTableDataRepository:
    """Tests for TableDataRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, session, members_table):
        repository = TableDataRepository(session)

        created = await repository.create(members_table)
        loaded = await repository.get(created.id)

        assert created.id > 0
        assert loaded.to_table() == members_table
        assert loaded.created_at is not None

    @pytest.mark.asyncio
    async def test_ids_increase(self, session, members_table):
        repository = TableDataRepository(session)

        first = await repository.create(members_table)
        second = await repository.create(members_table)

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_get_missing(self, session):
        with pytest.raises(NotFoundError) as exc_info:
            await TableDataRepository(session).get(999)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_partial(self, session, members_table):
        repository = TableDataRepository(session)
        created = await repository.create(members_table)

        updated = await repository.update(created.id, title="Renamed")

        assert updated.title == "Renamed"
        assert updated.rows == members_table.rows

    @pytest.mark.asyncio
    async def test_update_normalizes(self, session, members_table):
        repository = TableDataRepository(session)
        created = await repository.create(members_table)

        updated = await repository.update(
            created.id,
            columns=["S.NO.", "NAME", "SAVINGS", "REMARKS"],
            rows=[[1, "Lalita", 100.0], ["2", "Meena", "250", "ok", "extra"]],
        )

        assert updated.rows == [["1", "Lalita", "100", ""], ["2", "Meena", "250", "ok"]]

    @pytest.mark.asyncio
    async def test_update_missing(self, session):
        with pytest.raises(NotFoundError):
            await TableDataRepository(session).update(404, title="x")

    @pytest.mark.asyncio
    async def test_reads_renormalize_stored_rows(self, session):
        record = TableData(title="Legacy", columns=["a", "b"], rows=[[1, None], ["x"]])
        session.add(record)
        await session.flush()

        loaded = await TableDataRepository(session).get(record.id)

        assert loaded.rows == [["1", ""], ["x", ""]]

    @pytest.mark.asyncio
    async def test_database_error_wrapped(self, session, members_table):
        await session.run_sync(lambda sync_session: Base.metadata.drop_all(sync_session.connection()))

        with pytest.raises(PersistenceError):
            await TableDataRepository(session).create(members_table)


class TestShgDocumentsRepository:
    """Tests for ShgDocumentsRepository."""

    @pytest.mark.asyncio
    async def test_upsert_creates_then_replaces(self, session, members_table):
        repository = ShgDocumentsRepository(session)

        created = await repository.upsert("shg-1", "Savings", [members_table.to_payload()])
        replaced = await repository.upsert(
            "shg-1", "Savings", {"tables": [{"title": "New", "rows": [["x"]]}]}
        )

        assert replaced.id == created.id
        assert [t.title for t in replaced.contents] == ["New"]
        assert len(await repository.list_for_shg("shg-1")) == 1

    @pytest.mark.asyncio
    async def test_get(self, session, shg_profile_payload):
        repository = ShgDocumentsRepository(session)
        await repository.upsert("shg-1", "SHG Profile", shg_profile_payload)

        document = await repository.get("shg-1", "SHG Profile")

        assert document.doc_type == "SHG Profile"
        assert [t.title for t in document.contents] == [
            "SHG PROFILE",
            "DETAILS OF MEMBERS",
            "BALANCE SHEET",
        ]

    @pytest.mark.asyncio
    async def test_get_missing(self, session):
        with pytest.raises(NotFoundError):
            await ShgDocumentsRepository(session).get("shg-1", "Savings")

    @pytest.mark.asyncio
    async def test_list_scoped_and_ordered(self, session, members_table):
        repository = ShgDocumentsRepository(session)
        await repository.upsert("shg-1", "Savings", [members_table.to_payload()])
        await repository.upsert("shg-1", "Receipts by SHG", [])
        await repository.upsert("shg-2", "Savings", [])

        documents = await repository.list_for_shg("shg-1")

        assert [d.doc_type for d in documents] == ["Receipts by SHG", "Savings"]

    @pytest.mark.asyncio
    async def test_delete(self, session):
        repository = ShgDocumentsRepository(session)
        await repository.upsert("shg-1", "Savings", [])

        await repository.delete("shg-1", "Savings")

        with pytest.raises(NotFoundError):
            await repository.get("shg-1", "Savings")

    @pytest.mark.asyncio
    async def test_delete_missing(self, session):
        with pytest.raises(NotFoundError):
            await ShgDocumentsRepository(session).delete("shg-1", "Savings")


class TestDatabaseManager:
    """Tests for connection lifecycle."""

    @pytest.mark.asyncio
    async def test_initialize_session_and_health(self, settings, members_table):
        configured = settings.model_copy(update={"db_create_tables": True})
        await DatabaseManager.initialize(configured)
        try:
            async with DatabaseManager.get_session() as db_session:
                created = await TableDataRepository(db_session).create(members_table)

            async with DatabaseManager.get_session() as db_session:
                loaded = await TableDataRepository(db_session).get(created.id)

            assert loaded.to_table() == members_table

            health = await DatabaseManager.health_check()
            assert health["status"] == "healthy"
        finally:
            await DatabaseManager.close()

    @pytest.mark.asyncio
    async def test_session_rolls_back_on_error(self, settings, members_table):
        await DatabaseManager.initialize(settings.model_copy(update={"db_create_tables": True}))
        try:
            with pytest.raises(NotFoundError):
                async with DatabaseManager.get_session() as db_session:
                    await TableDataRepository(db_session).create(members_table)
                    raise NotFoundError(message="abort")

            async with DatabaseManager.get_session() as db_session:
                with pytest.raises(NotFoundError):
                    await TableDataRepository(db_session).get(1)
        finally:
            await DatabaseManager.close()

    @pytest.mark.asyncio
    async def test_session_requires_initialization(self):
        with pytest.raises(PersistenceError):
            async with DatabaseManager.get_session():
                pass

    @pytest.mark.asyncio
    async def test_health_when_not_initialized(self):
        assert (await DatabaseManager.health_check())["status"] == "not_initialized"

    @pytest.mark.asyncio
    async def test_initialize_failure_wrapped(self, settings):
        broken = settings.model_copy(
            update={
                "database_url": "sqlite+aiosqlite:////nonexistent-dir/lekhapal.db",
                "db_create_tables": True,
            }
        )

        with pytest.raises(PersistenceError) as exc_info:
            await DatabaseManager.initialize(broken)

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert (await DatabaseManager.health_check())["status"] == "not_initialized"
