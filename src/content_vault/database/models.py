"""SQLAlchemy database models for the fixed part of the local store."""

from typing import Optional

from sqlalchemy import Boolean, Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Columns every cached resource row carries
REMOTE_ID = "remote_id"
CREATED_AT = "created_at"
UPDATED_AT = "updated_at"


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class SyncInfo(Base):
    """Singleton row holding the continuation token of the last sync."""

    __tablename__ = "sync_info"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # NULL token means the next cycle has to run a full sync
    token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    locale: Mapped[Optional[str]] = mapped_column(String(35), nullable=True)

    def __repr__(self) -> str:
        """String representation of SyncInfo."""
        return f"<SyncInfo(token='{self.token}', locale='{self.locale}')>"


class EntryType(Base):
    """Maps an entry's remote id to the content type that produced it.

    Deletions arrive as bare ids, this index is how their table is found.
    """

    __tablename__ = "entry_types"

    remote_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    type_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation of EntryType."""
        return f"<EntryType(remote_id='{self.remote_id}', type_id='{self.type_id}')>"


class Link(Base):
    """One outgoing reference from an entry field to another resource."""

    __tablename__ = "links"

    parent: Mapped[str] = mapped_column(String(255), primary_key=True)
    field: Mapped[str] = mapped_column(String(255), primary_key=True)
    child: Mapped[str] = mapped_column(String(255), primary_key=True)
    is_asset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("idx_links_child", "child"),)

    def __repr__(self) -> str:
        """String representation of Link."""
        return (
            f"<Link(parent='{self.parent}', field='{self.field}', "
            f"child='{self.child}', is_asset={self.is_asset})>"
        )


class AssetRecord(Base):
    """Locally cached asset."""

    __tablename__ = "assets"

    remote_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file: Mapped[Optional[bytes]] = mapped_column(
        LargeBinary, nullable=True
    )  # JSON encoded file map (url, size, dimensions...)

    def __repr__(self) -> str:
        """String representation of AssetRecord."""
        return f"<AssetRecord(remote_id='{self.remote_id}', title='{self.title}')>"
