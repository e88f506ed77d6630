from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from src.domain.entities import Identity, Membership


class IMembershipRepository(ABC):
    """
    Membership repository interface - application layer

    Every method takes the tenant explicitly; there is no lookup of a
    membership by its own ID alone.
    """

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        """Create a new membership, DuplicateKeyError if the pair exists"""
        pass

    @abstractmethod
    async def get_by_identity_and_tenant(
        self, identity_id: str, tenant_id: str
    ) -> Optional[Membership]:
        """Get membership by identity and tenant, active or not"""
        pass

    @abstractmethod
    async def get_profile(
        self, identity_id: str, tenant_id: str
    ) -> Optional[Tuple[Identity, Membership]]:
        """Get identity and its active membership in this tenant"""
        pass

    @abstractmethod
    async def list_by_tenant(
        self, tenant_id: str, page: int, page_size: int
    ) -> Tuple[List[Tuple[Identity, Membership]], int]:
        """Page of active memberships with their identities, newest first"""
        pass

    @abstractmethod
    async def search_by_tenant(
        self, tenant_id: str, query: str, page: int, page_size: int
    ) -> Tuple[List[Tuple[Identity, Membership]], int]:
        """Page of active memberships matching the query, best match first"""
        pass

    @abstractmethod
    async def update(
        self, identity_id: str, tenant_id: str, changes: Dict[str, Any]
    ) -> Membership:
        """Write only the given fields of the membership"""
        pass

    @abstractmethod
    async def deactivate(self, identity_id: str, tenant_id: str) -> bool:
        """Soft delete: set is_active=False. Returns False if nothing matched"""
        pass
