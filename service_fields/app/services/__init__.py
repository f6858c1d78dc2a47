"""
Service layer.

- users: registration (uniqueness enforced by the store) and lookup.
- resources: one owner-scoped service shape, instantiated for fields and
  devices.
"""

from .resources import DeviceService, FieldService, ResourceService
from .users import UserService

__all__ = ["DeviceService", "FieldService", "ResourceService", "UserService"]
