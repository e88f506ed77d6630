from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.storage_errors import storage_errors
from src.app.repositories.errors import StorageError
from src.app.repositories.identity_repository import IIdentityRepository
from src.domain.base import generate_object_id, utcnow
from src.domain.entities import Identity

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class IdentityRepository(IIdentityRepository):
    """Identity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise StorageError("identity", dialect, "upsert is not supported by this dialect")
        return insert

    async def upsert_by_email(
        self, email: str, phone: Optional[str] = None, avatar_url: Optional[str] = None
    ) -> Identity:
        """
        Insert-or-touch in one INSERT ... ON CONFLICT (email) DO UPDATE.

        Two concurrent calls for a new email converge on the same row
        instead of one of them failing on the unique index.
        """
        now = utcnow()
        insert = self._insert()
        stmt = (
            insert(Identity.__table__)
            .values(
                id=generate_object_id(),
                email=email,
                phone=phone or None,
                avatar_url=avatar_url or None,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=[Identity.__table__.c.email],
                set_={"updated_at": now},
            )
        )
        with storage_errors("identity", email):
            await self.session.execute(stmt)
            identity = await self._fetch_by_email(email)

        if identity is None:
            raise StorageError("identity", email, "upserted row not found")
        return identity

    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by exact email"""
        with storage_errors("identity", email):
            return await self._fetch_by_email(email)

    async def get_by_id(self, identity_id: str) -> Optional[Identity]:
        """Get identity by ID"""
        stmt = (
            select(Identity)
            .where(Identity.id == identity_id)
            .execution_options(populate_existing=True)
        )
        with storage_errors("identity", identity_id):
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def update(self, identity_id: str, changes: Dict[str, Any]) -> Identity:
        """Write only the changed fields, always refreshing updated_at"""
        values = dict(changes)
        values["updated_at"] = utcnow()
        stmt = (
            update(Identity)
            .where(Identity.id == identity_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("identity", identity_id):
            await self.session.execute(stmt)

        identity = await self.get_by_id(identity_id)
        if identity is None:
            raise StorageError("identity", identity_id, "updated row not found")
        return identity

    async def _fetch_by_email(self, email: str) -> Optional[Identity]:
        # populate_existing: the upsert bypasses the identity map
        stmt = (
            select(Identity)
            .where(Identity.email == email)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()
