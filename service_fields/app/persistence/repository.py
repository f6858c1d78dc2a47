"""
Owner-scoped query helpers.

Every statement on a field or device table carries the owner predicate
(``users.email = :owner_email``) inside the SQL itself. A row owned by
someone else is therefore indistinguishable from a row that does not exist.
"""

from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from .models import OwnedResource, ResourceKind, User, users


class UserRepository:
    """Query helpers for registered identities."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(users.c.id, users.c.email).where(users.c.email == email)
        row = (await self._conn.execute(stmt)).first()
        return User(id=row.id, email=row.email) if row else None

    async def add(self, email: str) -> User:
        """Insert a user. A duplicate email raises the store's IntegrityError."""
        result = await self._conn.execute(insert(users).values(email=email))
        return User(id=result.inserted_primary_key[0], email=email)


class ScopedRepository:
    """Owner-scoped CRUD for one resource kind."""

    def __init__(self, conn: AsyncConnection, kind: ResourceKind):
        self._conn = conn
        self.kind = kind
        self.table = kind.table

    def _owned_by(self, owner_email: str):
        return (
            select(self.table.c.id, self.table.c.name, self.table.c.owner_id)
            .join(users, users.c.id == self.table.c.owner_id)
            .where(users.c.email == owner_email)
        )

    def _owner_ids(self, owner_email: str):
        return select(users.c.id).where(users.c.email == owner_email)

    @staticmethod
    def _row_to_resource(row) -> OwnedResource:
        return OwnedResource(id=row.id, name=row.name, owner_id=row.owner_id)

    async def list(self, owner_email: str) -> List[OwnedResource]:
        stmt = self._owned_by(owner_email).order_by(self.table.c.id)
        rows = (await self._conn.execute(stmt)).all()
        return [self._row_to_resource(row) for row in rows]

    async def get(self, owner_email: str, resource_id: int) -> Optional[OwnedResource]:
        stmt = self._owned_by(owner_email).where(self.table.c.id == resource_id)
        row = (await self._conn.execute(stmt)).first()
        return self._row_to_resource(row) if row else None

    async def add(self, owner_id: int, name: str) -> OwnedResource:
        result = await self._conn.execute(
            insert(self.table).values(name=name, owner_id=owner_id)
        )
        return OwnedResource(id=result.inserted_primary_key[0], name=name, owner_id=owner_id)

    async def rename(self, owner_email: str, resource_id: int, name: str) -> bool:
        stmt = (
            update(self.table)
            .where(self.table.c.id == resource_id)
            .where(self.table.c.owner_id.in_(self._owner_ids(owner_email)))
            .values(name=name)
        )
        result = await self._conn.execute(stmt)
        return result.rowcount == 1

    async def remove(self, owner_email: str, resource_id: int) -> bool:
        stmt = (
            delete(self.table)
            .where(self.table.c.id == resource_id)
            .where(self.table.c.owner_id.in_(self._owner_ids(owner_email)))
        )
        result = await self._conn.execute(stmt)
        return result.rowcount == 1
