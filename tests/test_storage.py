"""
Tests for storage backends and transaction support
"""

import pytest
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from rwa_core.storage import (
    InMemoryStorage, SQLiteStorage, StorageRecord, create_storage
)


# Test data
test_data = {
    "id": "test_001",
    "name": "Test Record",
    "amount": 100,
    "created_at": datetime.now(timezone.utc).isoformat(),
    "updated_at": datetime.now(timezone.utc).isoformat()
}


class TestStorageInterface:
    """Test base storage interface functionality"""

    def test_in_memory_storage_basic_operations(self):
        """Test basic CRUD operations with InMemoryStorage"""
        storage = InMemoryStorage()

        storage.save("test_table", "record_1", test_data)
        loaded = storage.load("test_table", "record_1")
        assert loaded == test_data

        assert storage.exists("test_table", "record_1")
        assert not storage.exists("test_table", "non_existent")
        assert storage.load("test_table", "non_existent") is None

        storage.save("test_table", "record_2", {"id": "record_2", "data": "test"})
        assert len(storage.load_all("test_table")) == 2

        results = storage.find("test_table", {"id": "test_001"})
        assert len(results) == 1
        assert results[0]["id"] == "test_001"

        assert storage.count("test_table") == 2

        storage.clear_table("test_table")
        assert storage.count("test_table") == 0

        storage.close()

    def test_in_memory_storage_returns_copies(self):
        """Mutating a loaded record must not change the stored one"""
        storage = InMemoryStorage()
        storage.save("test_table", "record_1", {"id": "record_1", "balance": 10})

        loaded = storage.load("test_table", "record_1")
        loaded["balance"] = 999

        assert storage.load("test_table", "record_1")["balance"] == 10

    def test_sqlite_storage_basic_operations(self):
        """Test basic CRUD operations with SQLiteStorage"""
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "test.db"
            storage = SQLiteStorage(db_path)

            storage.save("test_table", "record_1", test_data)
            loaded = storage.load("test_table", "record_1")
            assert loaded == test_data

            assert storage.exists("test_table", "record_1")
            assert not storage.exists("test_table", "non_existent")

            storage.save("test_table", "record_2", {"id": "record_2", "data": "test"})
            all_records = storage.load_all("test_table")
            assert [record["id"] for record in all_records] == ["test_001", "record_2"]

            results = storage.find("test_table", {"data": "test"})
            assert len(results) == 1
            assert results[0]["id"] == "record_2"

            assert storage.count("test_table") == 2

            storage.clear_table("test_table")
            assert storage.count("test_table") == 0

            storage.close()

    def test_sqlite_storage_persists_across_connections(self):
        """Records survive closing and reopening the database"""
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "test.db"
            storage = SQLiteStorage(db_path)
            storage.save("test_table", "record_1", test_data)
            storage.close()

            reopened = SQLiteStorage(db_path)
            assert reopened.load("test_table", "record_1") == test_data
            reopened.close()


class TestTransactionSupport:
    """Test atomic transaction support"""

    def test_in_memory_atomic_commit(self):
        storage = InMemoryStorage()

        with storage.atomic():
            storage.save("test_table", "record_1", test_data)
            storage.save("test_table", "record_2", {"id": "record_2", "data": "test"})

        assert storage.count("test_table") == 2
        assert not storage.in_transaction

    def test_in_memory_atomic_rollback(self):
        """A failure inside atomic() restores every table"""
        storage = InMemoryStorage()
        storage.save("test_table", "record_1", {"id": "record_1", "balance": 10})

        with pytest.raises(ValueError, match="Simulated error"):
            with storage.atomic():
                storage.save("test_table", "record_1", {"id": "record_1", "balance": 0})
                storage.save("other_table", "record_2", {"id": "record_2"})
                raise ValueError("Simulated error")

        assert storage.load("test_table", "record_1")["balance"] == 10
        assert not storage.exists("other_table", "record_2")
        assert not storage.in_transaction

    def test_in_memory_nested_atomic_joins_outer(self):
        """An inner block that committed is still undone by the outer rollback"""
        storage = InMemoryStorage()

        with pytest.raises(RuntimeError):
            with storage.atomic():
                with storage.atomic():
                    storage.save("test_table", "inner", {"id": "inner"})
                assert storage.in_transaction
                raise RuntimeError("outer failure")

        assert not storage.exists("test_table", "inner")

    def test_sqlite_atomic_commit(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = SQLiteStorage(Path(temp_dir) / "test.db")

            with storage.atomic():
                storage.save("test_table", "record_1", test_data)
                storage.save("test_table", "record_2", {"id": "record_2", "data": "test"})

            assert storage.count("test_table") == 2
            storage.close()

    def test_sqlite_atomic_rollback(self):
        """A failure inside atomic() discards all writes of the block"""
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = SQLiteStorage(Path(temp_dir) / "test.db")
            storage.save("test_table", "record_1", {"id": "record_1", "balance": 10})

            with pytest.raises(ValueError):
                with storage.atomic():
                    storage.save("test_table", "record_1", {"id": "record_1", "balance": 0})
                    storage.save("test_table", "record_2", {"id": "record_2"})
                    raise ValueError("Simulated error")

            assert storage.load("test_table", "record_1")["balance"] == 10
            assert not storage.exists("test_table", "record_2")
            assert storage.count("test_table") == 1
            storage.close()


class TestCreateStorage:
    """Test storage construction from database URLs"""

    def test_memory_url(self):
        assert isinstance(create_storage("memory://"), InMemoryStorage)

    def test_sqlite_url(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = create_storage(f"sqlite:///{temp_dir}/rwa.db")
            assert isinstance(storage, SQLiteStorage)
            assert storage.db_path == f"{temp_dir}/rwa.db"
            storage.close()

    def test_unsupported_url(self):
        with pytest.raises(ValueError, match="Unsupported database URL"):
            create_storage("postgresql://localhost/rwa")


class TestStorageRecord:
    """Test StorageRecord serialization"""

    def test_round_trip(self):
        now = datetime.now(timezone.utc)
        record = StorageRecord(id="rec_1", created_at=now, updated_at=now)

        data = record.to_dict()
        assert data["created_at"] == now.isoformat()

        restored = StorageRecord.from_dict(data)
        assert restored == record
