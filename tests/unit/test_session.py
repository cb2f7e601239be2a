"""Unit tests for engine construction and the startup database check"""

import pytest
from sqlalchemy import inspect
from finance_api.domain.exceptions import StorageError
from finance_api.infrastructure.database.session import create_db_engine, init_database, verify_connection


def test_verify_connection_ok(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'ok.db'}")
    verify_connection(engine)


def test_verify_connection_unreachable_raises_storage_error(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}")

    with pytest.raises(StorageError):
        verify_connection(engine)


def test_init_database_creates_tables(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'schema.db'}")
    init_database(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"users", "transactions", "envelopes", "accounts", "custom_categories"} <= tables
