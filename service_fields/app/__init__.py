"""
Field Management service package.

Users identify themselves with the X-User-Email header and own fields and
devices. No user can see or change another user's rows.

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.identity: Email normalization/validation and name guards.
- app.gate: Identity gate middleware and the route exemption predicate.
- app.services: Users service and the owner-scoped resource services.
- app.persistence: Tables, engine lifecycle, and scoped repositories.

Guidelines:
- The service is stateless; identity is re-derived on every request.
- Pass the caller's email explicitly into every service call.
- Report another owner's rows as "not found", never as "forbidden".
"""
