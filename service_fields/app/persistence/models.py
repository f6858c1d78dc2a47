"""
Table definitions and record types for the Field Management store.
"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)

from ..identity import NAME_MAX_LENGTH

metadata = MetaData()

# Upper bound of the 32-bit Integer id columns.
MAX_ROW_ID = 2**31 - 1

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(320), nullable=False),
    UniqueConstraint("email", name="uq_users_email"),
)

fields = Table(
    "fields",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("owner_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Index("ix_fields_owner_id", "owner_id"),
)

devices = Table(
    "devices",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("owner_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Index("ix_devices_owner_id", "owner_id"),
)


class ResourceKind(str, Enum):
    """Owner-scoped resource kinds."""
    FIELD = "field"
    DEVICE = "device"

    @property
    def table(self) -> Table:
        return _TABLES[self]

    @property
    def label(self) -> str:
        """Human label used in messages ("Field", "Device")."""
        return self.value.title()


_TABLES = {
    ResourceKind.FIELD: fields,
    ResourceKind.DEVICE: devices,
}


@dataclass
class User:
    """Registered identity."""
    id: int
    email: str


@dataclass
class OwnedResource:
    """A field or device row, always tied to exactly one owner."""
    id: int
    name: str
    owner_id: int


def is_storable_id(value: int) -> bool:
    """True when ``value`` fits the id columns; anything else names no row."""
    return 1 <= value <= MAX_ROW_ID
