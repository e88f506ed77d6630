from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.identity_repository import IdentityRepository
from src.adapter.repositories.membership_repository import MembershipRepository
from src.adapter.repositories.storage_errors import storage_errors
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.identities = IdentityRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # No-op after a successful commit
        await self.rollback()

    async def commit(self):
        with storage_errors("transaction", "commit"):
            await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
