import pytest
from services.db_implementations.db_interface import DatabaseInterface
from services.db_implementations.sqlite_implementation import SQLiteDBService


def test_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        DatabaseInterface()


def test_sqlite_implements_every_abstract_method():
    assert not getattr(SQLiteDBService, "__abstractmethods__", set())
    assert issubclass(SQLiteDBService, DatabaseInterface)
