"""Test Alembic migrations against a scratch SQLite database."""

import os

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

import erpforms.db.models  # noqa: F401
from erpforms.db.base import Base


ALEMBIC_INI = os.path.join(os.path.dirname(__file__), "..", "..", "alembic.ini")


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'migrations.db'}"


@pytest.fixture
def alembic_cfg(database_url):
    cfg = Config(ALEMBIC_INI)
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def _tables(database_url):
    engine = create_engine(database_url)
    try:
        inspector = inspect(engine)
        return {
            table: {column["name"] for column in inspector.get_columns(table)}
            for table in inspector.get_table_names()
            if table != "alembic_version"
        }
    finally:
        engine.dispose()


def test_upgrade_matches_models(alembic_cfg, database_url):
    command.upgrade(alembic_cfg, "head")

    tables = _tables(database_url)

    assert set(tables) == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        assert tables[name] == {column.name for column in table.columns}, name


def test_downgrade_drops_everything(alembic_cfg, database_url):
    command.upgrade(alembic_cfg, "head")
    command.downgrade(alembic_cfg, "base")

    assert _tables(database_url) == {}
