"""
Request and response models for the Field Management API.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    """Request model for registering a user."""
    email: Optional[str] = Field(None, description="Email address; stored trimmed and lowercased")


class UserResponse(BaseModel):
    """Response model for a user."""
    id: int
    email: str


class ResourceNameRequest(BaseModel):
    """Request model for creating or renaming a field or device."""
    name: Optional[str] = Field(None, description="Name, 1-100 characters after trimming")


class ResourceResponse(BaseModel):
    """Response model for a field or device."""
    id: int
    name: str
