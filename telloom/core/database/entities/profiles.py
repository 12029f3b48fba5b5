"""
Profile entity models.

A profile is the application-side record of an authenticated user; its id is
the auth provider's user id. Role membership and the sharer/listener/executor
relationships hang off it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlmodel import Field

from telloom.core.models.domain.enums import Role

from ..base import Base, UTCDateTime, new_id, utc_now


class Profile(Base, table=True):
    """Entity for a user profile.

    Table: profiles
    """

    __tablename__ = "profiles"

    id: str = Field(primary_key=True, max_length=36)
    email: Optional[str] = Field(default=None, max_length=320, index=True)
    first_name: Optional[str] = Field(default=None, max_length=128)
    last_name: Optional[str] = Field(default=None, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=256)
    username: Optional[str] = Field(default=None, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    avatar_url: Optional[str] = Field(default=None)
    is_admin: bool = Field(default=False)

    address_street: Optional[str] = Field(default=None, max_length=256)
    address_unit: Optional[str] = Field(default=None, max_length=64)
    address_city: Optional[str] = Field(default=None, max_length=128)
    address_state: Optional[str] = Field(default=None, max_length=2)
    address_zipcode: Optional[str] = Field(default=None, max_length=16)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    @property
    def display_name(self) -> str:
        """Name shown to other users, falling back to the email address."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.full_name or self.email or "Someone"

    def __repr__(self) -> str:
        return f"Profile(id={self.id}, email={self.email})"


class ProfileRole(Base, table=True):
    """Entity recording that a profile holds a role.

    Table: profile_roles
    """

    __tablename__ = "profile_roles"
    __table_args__ = (UniqueConstraint("profile_id", "role", name="uq_profile_roles_profile_role"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    role: Role = Field(sa_type=String(16))
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"ProfileRole(profile_id={self.profile_id}, role={self.role})"


class ProfileSharer(Base, table=True):
    """Entity for the sharer side of a profile. One per sharer profile.

    Table: profile_sharers
    """

    __tablename__ = "profile_sharers"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", max_length=36, unique=True, index=True)
    subscription_status: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"ProfileSharer(id={self.id}, profile_id={self.profile_id})"


class ProfileListener(Base, table=True):
    """Entity linking a listener profile to a sharer they follow.

    Table: profile_listeners
    """

    __tablename__ = "profile_listeners"
    __table_args__ = (UniqueConstraint("listener_id", "sharer_id", name="uq_profile_listeners_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    listener_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    shared_since: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    has_access: bool = Field(default=True)
    last_viewed: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    notifications: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class ProfileExecutor(Base, table=True):
    """Entity linking an executor profile to the sharer they act for.

    Table: profile_executors
    """

    __tablename__ = "profile_executors"
    __table_args__ = (UniqueConstraint("sharer_id", "executor_id", name="uq_profile_executors_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    executor_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})
