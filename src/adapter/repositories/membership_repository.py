from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.storage_errors import storage_errors
from src.app.repositories.errors import StorageError
from src.app.repositories.membership_repository import IMembershipRepository
from src.domain.entities import Identity, Membership

# Weights of the search rank, per term and per field
EXACT_MATCH_RANK = 3
PREFIX_MATCH_RANK = 2
SUBSTRING_MATCH_RANK = 1


def _key(identity_id: str, tenant_id: str) -> str:
    return f"{identity_id}:{tenant_id}"


def _active_in_tenant(tenant_id: str) -> list:
    return [
        Membership.tenant_id == tenant_id,
        Membership.is_active == True,  # noqa: E712
    ]


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        with storage_errors("membership", _key(membership.identity_id, membership.tenant_id)):
            self.session.add(membership)
            await self.session.flush()
            await self.session.refresh(membership)
        return membership

    async def get_by_identity_and_tenant(
        self, identity_id: str, tenant_id: str
    ) -> Optional[Membership]:
        """Get membership by identity and tenant"""
        stmt = (
            select(Membership)
            .where(
                Membership.identity_id == identity_id,
                Membership.tenant_id == tenant_id,
            )
            .execution_options(populate_existing=True)
        )
        with storage_errors("membership", _key(identity_id, tenant_id)):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_profile(
        self, identity_id: str, tenant_id: str
    ) -> Optional[Tuple[Identity, Membership]]:
        """
        Two lookups rather than a join: the identity is keyed independently
        of the tenant, the membership decides visibility.
        """
        key = _key(identity_id, tenant_id)
        with storage_errors("membership", key):
            result = await self.session.execute(
                select(Membership)
                .where(Membership.identity_id == identity_id, *_active_in_tenant(tenant_id))
                .execution_options(populate_existing=True)
            )
            membership = result.scalar_one_or_none()
        if membership is None:
            return None

        with storage_errors("identity", identity_id):
            result = await self.session.execute(
                select(Identity)
                .where(Identity.id == identity_id)
                .execution_options(populate_existing=True)
            )
            identity = result.scalar_one_or_none()
        if identity is None:
            return None

        return identity, membership

    async def list_by_tenant(
        self, tenant_id: str, page: int, page_size: int
    ) -> Tuple[List[Tuple[Identity, Membership]], int]:
        """Active memberships joined with their identity, newest first"""
        conditions = _active_in_tenant(tenant_id)
        stmt = (
            select(Membership, Identity)
            .join(Identity, Identity.id == Membership.identity_id)
            .where(*conditions)
            .order_by(Membership.joined_at.desc(), Membership.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return await self._page(tenant_id, stmt, conditions)

    async def search_by_tenant(
        self, tenant_id: str, query: str, page: int, page_size: int
    ) -> Tuple[List[Tuple[Identity, Membership]], int]:
        """
        Match any query term against first name, last name and email.

        Matching is a case-insensitive substring test with LIKE wildcards
        escaped. Rows are ordered by a rank summed over terms and fields
        (exact 3, prefix 2, substring 1), then newest first.
        """
        terms = list(dict.fromkeys(query.lower().split()))
        if not terms:
            return [], 0
        fields = (Membership.first_name, Membership.last_name, Identity.email)

        matches = []
        rank = None
        for term in terms:
            for field in fields:
                matches.append(field.icontains(term, autoescape=True))
                score = case(
                    (func.lower(field) == term, EXACT_MATCH_RANK),
                    (field.istartswith(term, autoescape=True), PREFIX_MATCH_RANK),
                    (field.icontains(term, autoescape=True), SUBSTRING_MATCH_RANK),
                    else_=0,
                )
                rank = score if rank is None else rank + score

        conditions = _active_in_tenant(tenant_id) + [or_(*matches)]
        stmt = (
            select(Membership, Identity)
            .join(Identity, Identity.id == Membership.identity_id)
            .where(*conditions)
            .order_by(rank.desc(), Membership.joined_at.desc(), Membership.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return await self._page(tenant_id, stmt, conditions)

    async def update(
        self, identity_id: str, tenant_id: str, changes: Dict[str, Any]
    ) -> Membership:
        """Write only the changed fields, scoped to the tenant"""
        stmt = (
            update(Membership)
            .where(
                Membership.identity_id == identity_id,
                Membership.tenant_id == tenant_id,
            )
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("membership", _key(identity_id, tenant_id)):
            await self.session.execute(stmt)

        membership = await self.get_by_identity_and_tenant(identity_id, tenant_id)
        if membership is None:
            raise StorageError("membership", _key(identity_id, tenant_id), "updated row not found")
        return membership

    async def deactivate(self, identity_id: str, tenant_id: str) -> bool:
        """Soft delete the membership"""
        stmt = (
            update(Membership)
            .where(
                Membership.identity_id == identity_id,
                Membership.tenant_id == tenant_id,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("membership", _key(identity_id, tenant_id)):
            result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def _page(
        self, tenant_id: str, stmt, conditions: list
    ) -> Tuple[List[Tuple[Identity, Membership]], int]:
        count_stmt = (
            select(func.count())
            .select_from(Membership)
            .join(Identity, Identity.id == Membership.identity_id)
            .where(*conditions)
        )
        with storage_errors("membership", tenant_id):
            total = (await self.session.execute(count_stmt)).scalar_one()
            result = await self.session.execute(stmt)
            rows = [(identity, membership) for membership, identity in result.all()]
        return rows, total
