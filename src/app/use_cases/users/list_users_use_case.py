"""
List Users Use Case

Pages through the active members of a tenant.
"""

from libs.result import Result, Return
from src.app.repositories.errors import StorageError
from src.app.validation.validators import validate_pagination, validate_tenant_id

from .base import UserUseCase
from .dtos import UserListResponse, UserProfile


class ListUsersUseCase(UserUseCase):
    """
    Use case for listing tenant members.

    Business Rules:
    - Only active memberships of the requested tenant are listed
    - Newest members first
    - Pagination is clamped, never rejected (page >= 1, 1 <= page_size <= 100)
    """

    action = "list users"

    async def execute(
        self, tenant_id: str, page: int = 1, page_size: int = 20
    ) -> Result[UserListResponse]:
        tenant_id_result = validate_tenant_id(tenant_id)
        if tenant_id_result.is_err():
            return Return.err(tenant_id_result.error)
        tenant_id = tenant_id_result.value
        page, page_size = validate_pagination(page, page_size)

        try:
            async with self.deadline():
                async with self.uow:
                    rows, total = await self.uow.memberships.list_by_tenant(
                        tenant_id, page, page_size
                    )
                    users = [UserProfile.from_entities(i, m) for i, m in rows]
        except (StorageError, TimeoutError) as exc:
            return self.internal_error(exc, tenant_id=tenant_id, page=page)

        return Return.ok(
            UserListResponse(users=users, total=total, page=page, page_size=page_size)
        )
