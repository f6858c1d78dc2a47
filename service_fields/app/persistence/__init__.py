"""
Persistence package.

- models: SQLAlchemy Core tables plus the plain record types handed to
  services (User, OwnedResource).
- database: Async engine lifecycle and per-unit-of-work transactions.
- repository: User lookups and the owner-scoped repository shared by
  fields and devices.
"""
