from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from src.domain.entities import Identity


class IIdentityRepository(ABC):
    """Identity repository interface - application layer"""

    @abstractmethod
    async def upsert_by_email(
        self, email: str, phone: Optional[str] = None, avatar_url: Optional[str] = None
    ) -> Identity:
        """
        Insert an identity for this email or return the existing one.

        Single storage-level statement; an existing identity is left
        unchanged apart from updated_at.
        """
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by exact email"""
        pass

    @abstractmethod
    async def get_by_id(self, identity_id: str) -> Optional[Identity]:
        """Get identity by ID"""
        pass

    @abstractmethod
    async def update(self, identity_id: str, changes: Dict[str, Any]) -> Identity:
        """Write only the given fields and refresh updated_at"""
        pass
