"""Initial migration stays in step with the ORM models."""
import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import UniqueConstraint, inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from app.models import Base

_REVISION = Path(__file__).parent.parent / "alembic" / "versions" / "001_initial_schema.py"


def _load_revision():
    spec = importlib.util.spec_from_file_location("initial_schema", _REVISION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _apply(sync_conn, step):
    with Operations.context(MigrationContext.configure(sync_conn)):
        step()


def _snapshot(sync_conn) -> dict[str, dict]:
    insp = inspect(sync_conn)
    return {
        table: {
            "columns": {c["name"] for c in insp.get_columns(table)},
            "indexes": {i["name"] for i in insp.get_indexes(table)},
            "unique": {u["name"] for u in insp.get_unique_constraints(table) if u["name"]},
        }
        for table in insp.get_table_names()
    }


def _expected() -> dict[str, dict]:
    return {
        name: {
            "columns": {c.name for c in table.columns},
            "indexes": {i.name for i in table.indexes},
            "unique": {c.name for c in table.constraints if isinstance(c, UniqueConstraint) and c.name},
        }
        for name, table in Base.metadata.tables.items()
    }


@pytest.fixture
async def scratch_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'migrate.db'}", poolclass=NullPool)
    yield engine
    await engine.dispose()


async def test_upgrade_matches_models(scratch_engine):
    revision = _load_revision()
    async with scratch_engine.begin() as conn:
        await conn.run_sync(_apply, revision.upgrade)
        snapshot = await conn.run_sync(_snapshot)

    assert snapshot == _expected()


async def test_downgrade_drops_everything(scratch_engine):
    revision = _load_revision()
    async with scratch_engine.begin() as conn:
        await conn.run_sync(_apply, revision.upgrade)
        await conn.run_sync(_apply, revision.downgrade)
        tables = await conn.run_sync(lambda c: inspect(c).get_table_names())

    assert tables == []


def test_revision_is_root():
    revision = _load_revision()
    assert revision.revision == "001"
    assert revision.down_revision is None
