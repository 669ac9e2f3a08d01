"""Tests for database models and service."""

import logging
import logging.handlers

import pytest
from sqlalchemy import inspect, text

from content_vault.database import (
    AssetRecord,
    ContentTypeModel,
    DatabaseService,
    EntryType,
    FieldDescriptor,
    Link,
    ModelRegistry,
    SyncInfo,
    upsert_replace,
)
from content_vault.utils.logging_config import setup_logging
from tests.factories import MODELS

INITIAL_REVISION = "3f1c2a9d7b10"


class TestDatabaseModels:
    """Test database models."""

    def test_sync_info_repr(self):
        """Test SyncInfo string representation."""
        info = SyncInfo(token="tok1", locale="en-US")
        assert repr(info) == "<SyncInfo(token='tok1', locale='en-US')>"

    def test_link_model_creation(self):
        """Test Link model creation."""
        link = Link(parent="c1", field="image", child="a1", is_asset=True)
        assert link.is_asset is True
        assert "child='a1'" in repr(link)

    def test_asset_and_entry_type_repr(self):
        """Test AssetRecord and EntryType representations."""
        assert "a1" in repr(AssetRecord(remote_id="a1", title="Cat"))
        assert "type_id='cat'" in repr(EntryType(remote_id="c1", type_id="cat"))


class TestDatabaseService:
    """Test database service operations."""

    def test_init_db(self, db_service):
        """Test a new store gets fixed and content type tables."""
        assert db_service.db_path.exists()
        assert db_service.is_initialized()

        tables = set(inspect(db_service.engine).get_table_names())
        assert {"assets", "entry_types", "links", "sync_info"} <= tables
        assert {"cats", "dogs"} <= tables

    def test_statistics_empty(self, db_service):
        """Test statistics of an empty store."""
        stats = db_service.get_statistics()

        assert stats["assets"] == 0
        assert stats["entries"] == 0
        assert stats["entries_by_table"] == {"cats": 0, "dogs": 0}
        assert stats["links"] == 0
        assert stats["database_path"] == str(db_service.db_path)

    def test_reopen_with_new_content_type(self, db_service):
        """Test content types added later get their table on reopen."""
        db_service.close()
        registry = ModelRegistry.from_dict(MODELS)
        registry.register(
            ContentTypeModel(
                id="bird", table_name="birds", fields=[FieldDescriptor(id="name")]
            )
        )

        reopened = DatabaseService(db_service.db_path, registry)
        try:
            assert "birds" in inspect(reopened.engine).get_table_names()
        finally:
            reopened.close()

    def test_sync_state(self, db_service):
        """Test saving the sync state replaces the previous one."""
        assert db_service.get_sync_state() == (None, None)

        with db_service.get_session() as session, session.begin():
            db_service.save_sync_info(session, "tok1", "en-US")
        with db_service.get_session() as session, session.begin():
            db_service.save_sync_info(session, "tok2", None)

        assert db_service.get_sync_state() == ("tok2", None)

    def test_upsert_replace(self, db_service):
        """Test upsert-replace overwrites the whole row."""
        table = db_service.get_table("assets")
        with db_service.get_session() as session, session.begin():
            upsert_replace(session, table, {"remote_id": "a1", "title": "Cat"})
            upsert_replace(session, table, {"remote_id": "a1", "url": "http://x"})

        row = db_service.get_row("assets", "a1")
        assert row["title"] is None
        assert row["url"] == "http://x"

    def test_get_rows_and_links(self, db_service):
        """Test row and edge queries."""
        with db_service.get_session() as session, session.begin():
            for remote_id in ("c2", "c1"):
                upsert_replace(
                    session,
                    db_service.get_table("cats"),
                    {"remote_id": remote_id, "name": remote_id.upper()},
                )
            for field, child in (("image", "a1"), ("friends", "c2")):
                row = {"parent": "c1", "field": field, "child": child}
                row["is_asset"] = child.startswith("a")
                upsert_replace(session, db_service.get_table("links"), row)

        assert [row["name"] for row in db_service.get_rows("cats")] == ["C1", "C2"]
        assert db_service.get_links(parent="c1", field="image") == [
            ("c1", "image", "a1", True)
        ]
        assert db_service.get_links(parent="c2") == []
        assert db_service.get_statistics()["links"] == 2

    def test_get_table_unknown(self, db_service):
        """Test unknown tables raise KeyError."""
        with pytest.raises(KeyError):
            db_service.get_table("unicorns")

    def test_reset(self, db_service):
        """Test reset clears content and sync state."""
        with db_service.get_session() as session, session.begin():
            for table_name, remote_id in (("assets", "a1"), ("dogs", "d1")):
                table = db_service.get_table(table_name)
                upsert_replace(session, table, {"remote_id": remote_id})
            db_service.save_sync_info(session, "tok1", None)

        db_service.reset()

        stats = db_service.get_statistics()
        assert stats["assets"] == 0
        assert stats["entries"] == 0
        assert db_service.get_sync_state() == (None, None)

    def test_keeps_empty_registry(self, tmp_path):
        """Test a registry without content types is used as given."""
        registry = ModelRegistry()
        db = DatabaseService(tmp_path / "empty.db", registry)
        try:
            assert db.registry is registry
            assert db.get_statistics()["entries_by_table"] == {}
        finally:
            db.close()


class TestMigrations:
    """Test Alembic revision tracking."""

    @staticmethod
    def _revision(db):
        with db.engine.connect() as conn:
            query = text("SELECT version_num FROM alembic_version")
            return conn.execute(query).scalar()

    def test_new_store_stamped(self, db_service):
        """Test a new store is marked as current."""
        assert self._revision(db_service) == INITIAL_REVISION

    def test_existing_store_upgraded(self, tmp_path):
        """Test an existing store without tables is migrated on open."""
        db_path = tmp_path / "old.db"
        db_path.touch()

        db = DatabaseService(db_path, ModelRegistry.from_dict(MODELS))
        try:
            assert db.is_initialized()
            assert self._revision(db) == INITIAL_REVISION
            assert {"cats", "dogs"} <= set(inspect(db.engine).get_table_names())
        finally:
            db.close()

    def test_reopen_keeps_revision(self, db_service):
        """Test reopening a current store leaves it at head."""
        db_service.close()

        reopened = DatabaseService(db_service.db_path, db_service.registry)
        try:
            assert self._revision(reopened) == INITIAL_REVISION
        finally:
            reopened.close()

    def test_logging_setup_survives_migrations(self, tmp_path):
        """Test creating a store does not replace the configured handlers."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        log_file = tmp_path / "logs" / "vault.log"
        try:
            setup_logging("DEBUG", log_file, console_output=False)
            handlers = root.handlers[:]

            DatabaseService(tmp_path / "new.db").close()
            DatabaseService(tmp_path / "new.db").close()

            assert root.handlers == handlers
            assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
            assert root.level == logging.DEBUG

            logging.getLogger("content_vault").info("store ready")
            handlers[0].flush()
            assert "store ready" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
