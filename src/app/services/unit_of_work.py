from abc import ABC, abstractmethod

from src.app.repositories.identity_repository import IIdentityRepository
from src.app.repositories.membership_repository import IMembershipRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    identities: IIdentityRepository
    memberships: IMembershipRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
