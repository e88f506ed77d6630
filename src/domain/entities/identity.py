"""
Identity Entity

Global user record, one per email address, independent of any tenant.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from src.domain.base import generate_object_id, utcnow

if TYPE_CHECKING:
    from .membership import Membership


class Identity(SQLModel, table=True):
    """
    Identity entity - a person known to the platform, shared across tenants.

    Business Rules:
    - Email is unique across all identities (exact string match)
    - Created on the first membership request for an email, reused afterwards
    - Never physically deleted; only phone, avatar_url and is_active change
    """

    __tablename__ = "identities"

    id: str = Field(default_factory=generate_object_id, primary_key=True, max_length=24)
    email: str = Field(unique=True, index=True, max_length=255)

    phone: Optional[str] = Field(default=None, max_length=32)
    avatar_url: Optional[str] = Field(default=None, max_length=2048)

    # Global deactivation, independent from tenant-local Membership.is_active
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="identity")
