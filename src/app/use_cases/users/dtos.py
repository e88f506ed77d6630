"""
User Use Case DTOs (Data Transfer Objects)

Commands carry caller intent into the use cases; responses are the
derived Profile view (Identity + Membership) returned to callers.
Profiles are assembled at read time and never persisted.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from src.domain.entities import Identity, Membership


# ============================================================================
# Command DTOs
# ============================================================================


class CreateUserCommand(BaseModel):
    """Join an identity (found or created by email) to a tenant"""

    email: str
    tenant_id: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class UpdateUserCommand(BaseModel):
    """
    Partial update - empty or missing fields are left unchanged.

    There is no way to clear a field.
    """

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    avatar_url: str = ""
    roles: Optional[List[str]] = None


# ============================================================================
# Response DTOs
# ============================================================================


class IdentityInfo(BaseModel):
    """Global part of a profile"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MembershipInfo(BaseModel):
    """Tenant-scoped part of a profile"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    identity_id: str
    tenant_id: str
    roles: List[str]
    first_name: str
    last_name: str
    is_active: bool
    joined_at: datetime


class UserProfile(BaseModel):
    """
    Identity paired with one of its memberships.

    Both is_active flags are exposed as-is; callers decide how to combine them.
    """

    identity: IdentityInfo
    membership: MembershipInfo

    @classmethod
    def from_entities(cls, identity: Identity, membership: Membership) -> "UserProfile":
        return cls(
            identity=IdentityInfo.model_validate(identity),
            membership=MembershipInfo.model_validate(membership),
        )


class UserListResponse(BaseModel):
    """Page of profiles with the total number of matches"""

    users: List[UserProfile]
    total: int
    page: int
    page_size: int


class DeleteUserResponse(BaseModel):
    """Response for delete user use case"""

    status: str
