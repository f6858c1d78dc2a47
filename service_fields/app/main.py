"""
Field Management service.
"""

from typing import Dict, List, Optional

from fastapi import Depends, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import NotFoundError

from .gate import UserEmailGate, current_user_email
from .persistence.database import Database
from .services import DeviceService, FieldService, ResourceService, UserService
from .schemas import CreateUserRequest, ResourceNameRequest, ResourceResponse, UserResponse


class FieldsService(BaseService):
    """Users, and the fields and devices they own."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("fields", 8020, config)

        self.database = Database(
            self.config.database_url,
            echo=self.config.database_echo,
            pool_size=self.config.database_pool_size
        )
        self.users = UserService(self.database, self.metrics)
        self.fields = FieldService(self.database, self.metrics)
        self.devices = DeviceService(self.database, self.metrics)

        self._setup_user_routes()
        self._setup_resource_routes("/api/fields", self.fields)
        self._setup_resource_routes("/api/devices", self.devices)

    def _setup_service_middleware(self):
        self.gate = UserEmailGate(self.metrics)
        self.app.add_middleware(BaseHTTPMiddleware, dispatch=self.gate.dispatch)

    async def _on_startup(self):
        await self.database.start()

    async def _on_shutdown(self):
        await self.database.stop()

    async def _check_dependencies(self) -> Dict[str, str]:
        healthy = await self.database.health_check()
        return {"database": "ok" if healthy else "error"}

    def _setup_user_routes(self):
        """Set up user registration and lookup routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "fields",
                "message": "Field Management Service",
                "version": "1.0.0",
                "resources": ["users", "fields", "devices"]
            }

        @self.app.post("/api/users", status_code=201, response_model=UserResponse)
        async def create_user(body: CreateUserRequest, response: Response):
            """Register a user. Callable without an identity header."""
            user = await self.users.create(body.email)
            response.headers["Location"] = "/api/users/me"
            return UserResponse(id=user.id, email=user.email)

        @self.app.get("/api/users/me", response_model=UserResponse)
        async def get_me(email: str = Depends(current_user_email)):
            """Return the user behind the identity header."""
            user = await self.users.get_by_email(email)
            if user is None:
                raise NotFoundError("User not found. Create via POST /api/users.")
            return UserResponse(id=user.id, email=user.email)

    def _setup_resource_routes(self, prefix: str, service: ResourceService):
        """Set up the owner-scoped CRUD routes for one resource kind."""
        label = service.kind.label
        not_found = f"{label} not found."

        @self.app.get(prefix, response_model=List[ResourceResponse], name=f"list_{service.kind.value}s")
        async def list_resources(email: str = Depends(current_user_email)):
            resources = await service.list(email)
            return [ResourceResponse(id=r.id, name=r.name) for r in resources]

        @self.app.get(f"{prefix}/{{resource_id}}", response_model=ResourceResponse,
                      name=f"get_{service.kind.value}")
        async def get_resource(resource_id: int, email: str = Depends(current_user_email)):
            resource = await service.get_by_id(email, resource_id)
            if resource is None:
                raise NotFoundError(not_found)
            return ResourceResponse(id=resource.id, name=resource.name)

        @self.app.post(prefix, status_code=201, response_model=ResourceResponse,
                       name=f"create_{service.kind.value}")
        async def create_resource(body: ResourceNameRequest, response: Response,
                                  email: str = Depends(current_user_email)):
            resource = await service.create(email, body.name)
            response.headers["Location"] = f"{prefix}/{resource.id}"
            return ResourceResponse(id=resource.id, name=resource.name)

        @self.app.put(f"{prefix}/{{resource_id}}", status_code=204, name=f"update_{service.kind.value}")
        async def update_resource(resource_id: int, body: ResourceNameRequest,
                                  email: str = Depends(current_user_email)):
            if not await service.update(email, resource_id, body.name):
                raise NotFoundError(not_found)
            return Response(status_code=204)

        @self.app.delete(f"{prefix}/{{resource_id}}", status_code=204, name=f"delete_{service.kind.value}")
        async def delete_resource(resource_id: int, email: str = Depends(current_user_email)):
            if not await service.delete(email, resource_id):
                raise NotFoundError(f"{label} not found or you don't have permission.")
            return Response(status_code=204)


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = FieldsService(config)
    return service.app


if __name__ == "__main__":
    service = FieldsService()
    service.run()
