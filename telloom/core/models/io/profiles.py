"""
Profile and role I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from telloom.core.models.domain.enums import Role


class ProfileSummary(BaseModel):
    """Compact profile shown next to connections, requests and invitations."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileRead(BaseModel):
    """Schema for reading a profile from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_admin: bool = False
    address_street: Optional[str] = None
    address_unit: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zipcode: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileCreate(BaseModel):
    """Schema for creating the caller's profile. Id and email come from the session."""

    first_name: Optional[str] = Field(default=None, max_length=128)
    last_name: Optional[str] = Field(default=None, max_length=128)
    username: Optional[str] = Field(default=None, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    avatar_url: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Schema for partially updating the caller's profile."""

    first_name: Optional[str] = Field(default=None, max_length=128)
    last_name: Optional[str] = Field(default=None, max_length=128)
    username: Optional[str] = Field(default=None, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    avatar_url: Optional[str] = None
    address_street: Optional[str] = Field(default=None, max_length=256)
    address_unit: Optional[str] = Field(default=None, max_length=64)
    address_city: Optional[str] = Field(default=None, max_length=128)
    address_state: Optional[str] = Field(default=None, max_length=2)
    address_zipcode: Optional[str] = Field(default=None, max_length=16)


class AuthUserRead(BaseModel):
    """The signed-in user with their profile and roles."""

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    profile: Optional[ProfileRead] = None
    roles: List[Role] = Field(default_factory=list)


class RoleRequest(BaseModel):
    """Body naming a role, used for enrolment and selection."""

    role: Role


class MyRolesResponse(BaseModel):
    roles: List[Role]
    active_role: Optional[Role] = None
    sharer_id: Optional[str] = Field(default=None, description="ProfileSharer id when the caller is a sharer")


class RoleSelectResponse(BaseModel):
    role: Role
    redirect_to: str
