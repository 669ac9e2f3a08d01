"""Database service for the local content store."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Table, create_engine, delete, func, insert, inspect, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import ColumnElement

from alembic import command  # type: ignore[attr-defined]
from alembic.config import Config as AlembicConfig  # type: ignore[import-not-found]

from .models import AssetRecord, Base, EntryType, Link, SyncInfo
from .registry import ModelRegistry

logger = logging.getLogger(__name__)

# Fixed tables, in the order they are cleared
FIXED_TABLES: Tuple[Table, ...] = (
    AssetRecord.__table__,  # type: ignore[assignment]
    EntryType.__table__,  # type: ignore[assignment]
    Link.__table__,  # type: ignore[assignment]
    SyncInfo.__table__,  # type: ignore[assignment]
)


def upsert_replace(session: Session, table: Table, row: Dict[str, Any]) -> None:
    """Insert ``row``, replacing any existing row with the same key wholesale."""
    session.execute(insert(table).prefix_with("OR REPLACE").values(row))


def delete_where(session: Session, table: Table, *criteria: ColumnElement) -> int:
    """Delete rows of ``table`` matching all criteria.

    Returns:
        Number of deleted rows
    """
    stmt = delete(table)
    if criteria:
        stmt = stmt.where(*criteria)
    result = session.execute(stmt)
    return result.rowcount or 0  # type: ignore[attr-defined]


class DatabaseService:
    """Service for store access and transaction management."""

    def __init__(
        self,
        db_path: Optional[Path] = None,
        registry: Optional[ModelRegistry] = None,
    ) -> None:
        """Initialize database service.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses default ~/.content-vault/vault.db
            registry: Locally modeled content types. Their tables are created
                    if missing.
        """
        if db_path is None:
            db_path = Path.home() / ".content-vault" / "vault.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.registry = registry if registry is not None else ModelRegistry()

        # Check if database exists before creating engine
        db_exists = self.db_path.exists()

        db_url = f"sqlite:///{self.db_path}"
        self.engine = create_engine(db_url, echo=False)

        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

        logger.info("Database initialized at: %s", self.db_path)

        if not db_exists:
            logger.info("New database detected, initializing schema...")
            self.init_db()
        else:
            self.run_migrations()
            # Content types may have been added since the store was created
            self.registry.metadata.create_all(bind=self.engine)

    def init_db(self) -> None:
        """Initialize database schema.

        Creates the fixed tables and one table per registered content type,
        then stamps Alembic to mark the database as current.
        """
        Base.metadata.create_all(bind=self.engine)
        self.registry.metadata.create_all(bind=self.engine)
        logger.info("Database schema created successfully")

        self._stamp_migrations()

    def _alembic_config(self) -> Optional[AlembicConfig]:
        # alembic.ini and alembic/ live in the project root
        package_dir = Path(__file__).parent.parent.parent.parent
        alembic_ini = package_dir / "alembic.ini"
        alembic_dir = package_dir / "alembic"

        if not alembic_ini.exists() or not alembic_dir.exists():
            logger.warning("Alembic not found at %s, skipping", package_dir)
            return None

        alembic_cfg = AlembicConfig(str(alembic_ini))
        alembic_cfg.set_main_option("script_location", str(alembic_dir))
        alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
        # env.py leaves logging to the caller
        alembic_cfg.attributes["configure_logger"] = False
        return alembic_cfg

    def _stamp_migrations(self) -> None:
        """Stamp database as being at the latest migration version."""
        try:
            alembic_cfg = self._alembic_config()
            if alembic_cfg is None:
                return
            command.stamp(alembic_cfg, "head")
            logger.info("Database stamped with latest migration version")
        except Exception as e:
            logger.error("Failed to stamp migrations: %s", e)
            logger.warning("Database may need manual migration")

    def run_migrations(self) -> None:
        """Run Alembic migrations to upgrade database to latest version."""
        try:
            alembic_cfg = self._alembic_config()
            if alembic_cfg is None:
                return
            command.upgrade(alembic_cfg, "head")
            logger.info("Database migrations applied successfully")
        except Exception as e:
            logger.error("Failed to run migrations: %s", e)
            logger.warning("Continuing with base schema only")

    def get_session(self) -> Session:
        """Get a new database session.

        Returns:
            SQLAlchemy Session object

        Note:
            Caller is responsible for closing the session
        """
        return self.SessionLocal()

    def is_initialized(self) -> bool:
        """Check if the fixed tables exist and a session can be opened."""
        try:
            inspector = inspect(self.engine)
            missing = [t.name for t in FIXED_TABLES if not inspector.has_table(t.name)]
            if missing:
                logger.debug("Required tables missing: %s", missing)
                return False

            with self.SessionLocal() as session:
                session.execute(select(1))
            return True
        except Exception as e:
            logger.debug("Database initialization check failed: %s", e)
            return False

    def get_table(self, table_name: str) -> Table:
        """Resolve a fixed or content type table by name.

        Raises:
            KeyError: If the table is unknown
        """
        if table_name in Base.metadata.tables:
            return Base.metadata.tables[table_name]
        return self.registry.get_table(table_name)

    # =========================================================================
    # Sync State
    # =========================================================================

    @staticmethod
    def read_sync_info(session: Session) -> Optional[SyncInfo]:
        """Read the stored sync state inside an open session."""
        return session.scalar(select(SyncInfo).limit(1))

    @staticmethod
    def save_sync_info(
        session: Session, token: Optional[str], locale: Optional[str]
    ) -> None:
        """Replace the stored sync state wholesale."""
        delete_where(session, SyncInfo.__table__)  # type: ignore[arg-type]
        session.execute(insert(SyncInfo).values(token=token, locale=locale))

    def get_sync_state(self) -> Tuple[Optional[str], Optional[str]]:
        """Get the stored (token, locale) pair.

        Returns:
            Tuple of token and locale, both None when never synced
        """
        with self.get_session() as session:
            info = self.read_sync_info(session)
            if info is None:
                return None, None
            return info.token, info.locale

    # =========================================================================
    # Store Maintenance
    # =========================================================================

    def clear_records(self, session: Session) -> None:
        """Stage deletion of every cached resource, edge and the sync state."""
        for table in self.registry.tables:
            delete_where(session, table)
        for table in FIXED_TABLES:
            delete_where(session, table)
        logger.info("Cleared all local records")

    def reset(self) -> None:
        """Clear the whole store in its own transaction."""
        with self.get_session() as session, session.begin():
            self.clear_records(session)

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def fetch_entry_type(session: Session, remote_id: str) -> Optional[str]:
        """Get the content type id an entry was stored under."""
        stmt = select(EntryType.type_id).where(EntryType.remote_id == remote_id)
        return session.scalar(stmt)

    def get_entry_type(self, remote_id: str) -> Optional[str]:
        with self.get_session() as session:
            return self.fetch_entry_type(session, remote_id)

    def get_row(self, table_name: str, remote_id: str) -> Optional[Dict[str, Any]]:
        """Get one cached resource row as a dictionary.

        Args:
            table_name: Resource table name ("assets" or a content type table)
            remote_id: Remote id of the resource

        Returns:
            Row mapping or None if not cached
        """
        table = self.get_table(table_name)
        with self.get_session() as session:
            row = (
                session.execute(select(table).where(table.c.remote_id == remote_id))
                .mappings()
                .first()
            )
            return dict(row) if row else None

    def get_rows(self, table_name: str) -> List[Dict[str, Any]]:
        """Get all rows of a resource table ordered by remote id."""
        table = self.get_table(table_name)
        with self.get_session() as session:
            rows = session.execute(select(table).order_by(table.c.remote_id))
            return [dict(row) for row in rows.mappings()]

    def get_links(
        self, parent: Optional[str] = None, field: Optional[str] = None
    ) -> List[Tuple[str, str, str, bool]]:
        """Get link edges, optionally filtered by parent and field.

        Returns:
            List of (parent, field, child, is_asset) tuples
        """
        stmt = select(Link.parent, Link.field, Link.child, Link.is_asset)
        if parent is not None:
            stmt = stmt.where(Link.parent == parent)
        if field is not None:
            stmt = stmt.where(Link.field == field)
        stmt = stmt.order_by(Link.parent, Link.field, Link.child)
        with self.get_session() as session:
            return [tuple(row) for row in session.execute(stmt)]  # type: ignore[misc]

    def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with row counts per table
        """
        with self.get_session() as session:
            entries = {
                table.name: session.scalar(select(func.count()).select_from(table))
                for table in self.registry.tables
            }
            return {
                "assets": session.scalar(select(func.count(AssetRecord.remote_id))),
                "entries": sum(entries.values()),
                "entries_by_table": entries,
                "links": session.scalar(select(func.count()).select_from(Link)),
                "database_path": str(self.db_path),
            }

    def close(self) -> None:
        """Close database connection."""
        if hasattr(self, "engine"):
            self.engine.dispose()
            logger.info("Database connection closed")
