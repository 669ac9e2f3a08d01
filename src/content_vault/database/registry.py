"""Registry of locally modeled content types.

Maps remote content type ids to the table and column descriptors used to
store their entries. Each registered type gets its own SQLAlchemy ``Table``
on the registry's metadata.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import (
    Column,
    Float,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.types import TypeEngine

from .models import CREATED_AT, REMOTE_ID, UPDATED_AT, Base

logger = logging.getLogger(__name__)

SQL_TYPES: Dict[str, type] = {
    "TEXT": Text,
    "INT": Integer,
    "REAL": Float,
    "BOOL": Text,  # stored as "1" / "0"
    "BLOB": LargeBinary,
}

ARRAY_OF_SYMBOLS = "Symbol"
ARRAY_OF_LINKS = "Link"


class FieldDescriptor(BaseModel):
    """Describes how one content type field maps to local storage."""

    id: str
    name: str = ""
    sql_type: str = "TEXT"
    link_type: Optional[str] = None
    array_type: Optional[str] = None

    @field_validator("sql_type")
    @classmethod
    def validate_sql_type(cls, v: str) -> str:
        """Normalize and check the declared column type."""
        v = v.upper()
        if v not in SQL_TYPES:
            raise ValueError(f"Unsupported sql_type: {v}")
        return v

    def model_post_init(self, __context: object) -> None:
        """Default the column name to the field id."""
        if not self.name:
            self.name = self.id

    @property
    def is_link(self) -> bool:
        return self.link_type is not None and self.array_type is None

    @property
    def is_array(self) -> bool:
        return self.array_type is not None

    @property
    def is_array_of_symbols(self) -> bool:
        return self.array_type == ARRAY_OF_SYMBOLS

    @property
    def is_array_of_links(self) -> bool:
        return self.array_type == ARRAY_OF_LINKS

    @property
    def has_column(self) -> bool:
        """Links live in the links table, not in the entry row."""
        return not (self.is_link or self.is_array_of_links)

    def column_type(self) -> TypeEngine:
        if self.is_array:
            return LargeBinary()
        return SQL_TYPES[self.sql_type]()


class ContentTypeModel(BaseModel):
    """A content type with its local table and fields."""

    id: str
    table_name: str
    fields: List[FieldDescriptor] = Field(default_factory=list)


class RegistryDocument(BaseModel):
    """On-disk representation of a registry."""

    content_types: List[ContentTypeModel] = Field(default_factory=list)


class ModelRegistry:
    """Resolves content type ids to table names and field descriptors."""

    def __init__(self, models: Iterable[ContentTypeModel] = ()) -> None:
        """Initialize registry.

        Args:
            models: Content type models to register
        """
        self.metadata = MetaData()
        self._models: Dict[str, ContentTypeModel] = {}
        self._tables: Dict[str, Table] = {}
        for model in models:
            self.register(model)

    @classmethod
    def from_dict(cls, data: Dict) -> "ModelRegistry":
        document = RegistryDocument.model_validate(data)
        return cls(document.content_types)

    @classmethod
    def from_file(cls, path: Path) -> "ModelRegistry":
        """Load a registry from a JSON document.

        Args:
            path: Path to a file shaped like ``{"content_types": [...]}``

        Returns:
            Populated ModelRegistry
        """
        with open(path, encoding="utf-8") as f:
            registry = cls.from_dict(json.load(f))
        logger.info("Loaded %d content types from %s", len(registry), path)
        return registry

    def register(self, model: ContentTypeModel) -> Table:
        """Register a content type and build its table.

        Raises:
            ValueError: If the id or table name is already in use
        """
        if model.id in self._models:
            raise ValueError(f"Content type already registered: {model.id}")
        reserved = Base.metadata.tables
        if model.table_name in self._tables or model.table_name in reserved:
            raise ValueError(f"Table name already in use: {model.table_name}")

        columns = [
            Column(REMOTE_ID, String(255), primary_key=True),
            Column(CREATED_AT, String(64), nullable=True),
            Column(UPDATED_AT, String(64), nullable=True),
        ]
        for descriptor in model.fields:
            if descriptor.has_column:
                columns.append(
                    Column(descriptor.name, descriptor.column_type(), nullable=True)
                )

        table = Table(model.table_name, self.metadata, *columns)
        self._models[model.id] = model
        self._tables[model.table_name] = table
        logger.debug("Registered content type %s -> %s", model.id, model.table_name)
        return table

    def resolve_table(self, content_type_id: Optional[str]) -> Optional[str]:
        """Return the table name for a content type, None if not modeled."""
        model = self._models.get(content_type_id) if content_type_id else None
        return model.table_name if model else None

    def resolve_fields(
        self, content_type_id: Optional[str]
    ) -> Optional[List[FieldDescriptor]]:
        """Return the field descriptors for a content type, None if not modeled."""
        model = self._models.get(content_type_id) if content_type_id else None
        return list(model.fields) if model else None

    def get_table(self, table_name: str) -> Table:
        """Get the table of a registered content type.

        Raises:
            KeyError: If no registered content type uses that table
        """
        return self._tables[table_name]

    @property
    def tables(self) -> List[Table]:
        return list(self._tables.values())

    @property
    def content_type_ids(self) -> List[str]:
        return list(self._models)

    def __len__(self) -> int:
        return len(self._models)
