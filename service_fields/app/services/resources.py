"""
Owner-scoped resource services (fields and devices).
"""

from typing import List, Optional

from shared.errors import NotFoundError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..identity import normalize_email, validate_name_or_raise
from ..persistence.database import Database
from ..persistence.models import OwnedResource, ResourceKind, is_storable_id
from ..persistence.repository import ScopedRepository, UserRepository


class ResourceService:
    """CRUD for one resource kind, always scoped to the caller's email.

    The owner email is an explicit argument on every call; nothing about
    the caller is remembered between calls.
    """

    def __init__(self, database: Database, kind: ResourceKind,
                 metrics: Optional[MetricsCollector] = None):
        self.database = database
        self.kind = kind
        self.metrics = metrics
        self.name_label = f"{kind.label} name"
        self.logger = get_logger(f"fields.services.{kind.value}")

    async def list(self, owner_email: str) -> List[OwnedResource]:
        owner_email = normalize_email(owner_email)
        async with self.database.transaction() as conn:
            return await ScopedRepository(conn, self.kind).list(owner_email)

    async def get_by_id(self, owner_email: str, resource_id: int) -> Optional[OwnedResource]:
        owner_email = normalize_email(owner_email)
        if not is_storable_id(resource_id):
            self._record_miss("get")
            return None

        async with self.database.transaction() as conn:
            resource = await ScopedRepository(conn, self.kind).get(owner_email, resource_id)

        if resource is None:
            self._record_miss("get")
        return resource

    async def create(self, owner_email: str, name: Optional[str]) -> OwnedResource:
        owner_email = normalize_email(owner_email)
        name = validate_name_or_raise(name, self.name_label)

        async with self.database.transaction() as conn:
            owner = await UserRepository(conn).get_by_email(owner_email)
            if owner is None:
                raise NotFoundError(f"User '{owner_email}' not found. Create via POST /api/users.")

            resource = await ScopedRepository(conn, self.kind).add(owner.id, name)

        self.logger.info(
            f"{self.kind.label} created",
            resource_id=resource.id,
            user_email=owner_email
        )
        self._record_event("created")
        return resource

    async def update(self, owner_email: str, resource_id: int, new_name: Optional[str]) -> bool:
        owner_email = normalize_email(owner_email)
        name = validate_name_or_raise(new_name, self.name_label)
        if not is_storable_id(resource_id):
            self._record_miss("update")
            return False

        async with self.database.transaction() as conn:
            updated = await ScopedRepository(conn, self.kind).rename(owner_email, resource_id, name)

        if not updated:
            self._record_miss("update")
            return False

        self.logger.info(
            f"{self.kind.label} updated",
            resource_id=resource_id,
            user_email=owner_email
        )
        self._record_event("updated")
        return True

    async def delete(self, owner_email: str, resource_id: int) -> bool:
        owner_email = normalize_email(owner_email)
        if not is_storable_id(resource_id):
            self._record_miss("delete")
            return False

        async with self.database.transaction() as conn:
            deleted = await ScopedRepository(conn, self.kind).remove(owner_email, resource_id)

        if not deleted:
            self._record_miss("delete")
            return False

        self.logger.info(
            f"{self.kind.label} deleted",
            resource_id=resource_id,
            user_email=owner_email
        )
        self._record_event("deleted")
        return True

    def _record_miss(self, operation: str):
        if self.metrics:
            self.metrics.record_scoped_miss(self.kind.value, operation)

    def _record_event(self, action: str):
        if self.metrics:
            self.metrics.record_business_event(f"{self.kind.value}_{action}")


class FieldService(ResourceService):
    """Fields owned by users."""

    def __init__(self, database: Database, metrics: Optional[MetricsCollector] = None):
        super().__init__(database, ResourceKind.FIELD, metrics)


class DeviceService(ResourceService):
    """Controller devices owned by users."""

    def __init__(self, database: Database, metrics: Optional[MetricsCollector] = None):
        super().__init__(database, ResourceKind.DEVICE, metrics)
