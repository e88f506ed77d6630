"""
Membership Entity

Links an Identity to a tenant with tenant-local name, roles and activation.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Index, JSON, Relationship, SQLModel

from src.domain.base import generate_object_id, utcnow

if TYPE_CHECKING:
    from .identity import Identity

DEFAULT_ROLES = ["user"]


class Membership(SQLModel, table=True):
    """
    Membership entity - binds one Identity to one tenant.

    Business Rules:
    - (identity_id, tenant_id) must be unique
    - The same person may present a different name in each tenant
    - is_active=False is a soft delete: the row is kept but hidden from reads
    - Every query on memberships is scoped by tenant_id
    """

    __tablename__ = "memberships"

    id: str = Field(default_factory=generate_object_id, primary_key=True, max_length=24)

    identity_id: str = Field(foreign_key="identities.id", nullable=False, max_length=24)
    tenant_id: str = Field(nullable=False, index=True, max_length=128)

    # Stored as a JSON list, treated as a set of role names
    roles: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ROLES),
        sa_column=Column(JSON, nullable=False),
    )

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)

    is_active: bool = Field(default=True)

    # Set once when the identity joins the tenant
    joined_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    identity: "Identity" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_membership_identity_tenant", "identity_id", "tenant_id", unique=True),
        Index("idx_membership_name_search", "tenant_id", "last_name", "first_name"),
    )
