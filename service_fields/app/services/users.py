"""
User registration and lookup.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from shared.errors import ConflictError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..identity import normalize_email, validate_email_or_raise
from ..persistence.database import Database
from ..persistence.models import User
from ..persistence.repository import UserRepository


USER_EXISTS_MESSAGE = "User already exists."


class UserService:
    """Registers identities; the user row *is* the identity, so no scoping."""

    def __init__(self, database: Database, metrics: Optional[MetricsCollector] = None):
        self.database = database
        self.metrics = metrics
        self.logger = get_logger("fields.services.users")

    async def create(self, email: Optional[str]) -> User:
        """Register a new user.

        The existence check only saves a round trip on the common duplicate
        case; the unique constraint on ``users.email`` decides concurrent
        creations, and its violation is reported as the same conflict.
        """
        email = validate_email_or_raise(email)

        try:
            async with self.database.transaction() as conn:
                repo = UserRepository(conn)
                if await repo.get_by_email(email) is not None:
                    raise ConflictError(USER_EXISTS_MESSAGE)
                user = await repo.add(email)
        except IntegrityError as e:
            self.logger.warning("Concurrent user creation rejected by store", user_email=email)
            raise ConflictError(USER_EXISTS_MESSAGE) from e

        self.logger.info("User created", user_id=user.id, user_email=email)
        if self.metrics:
            self.metrics.record_business_event("user_created")
        return user

    async def get_by_email(self, email: Optional[str]) -> Optional[User]:
        email = normalize_email(email)
        async with self.database.transaction() as conn:
            return await UserRepository(conn).get_by_email(email)
