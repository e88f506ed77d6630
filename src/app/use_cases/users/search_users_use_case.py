"""
Search Users Use Case

Full-text style search over member names and emails within a tenant.
"""

from libs.result import Result, Return
from src.app.repositories.errors import StorageError
from src.app.validation.validators import (
    sanitize_string,
    validate_pagination,
    validate_search_query,
    validate_tenant_id,
)

from .base import UserUseCase
from .dtos import UserListResponse, UserProfile


class SearchUsersUseCase(UserUseCase):
    """
    Use case for searching tenant members.

    Business Rules:
    - Query must be 2-100 characters after trimming; too short is rejected,
      never widened
    - Matches first name, last name and email of active members only
    - Best matches first
    """

    action = "search users"

    async def execute(
        self, tenant_id: str, query: str, page: int = 1, page_size: int = 20
    ) -> Result[UserListResponse]:
        tenant_id_result = validate_tenant_id(tenant_id)
        if tenant_id_result.is_err():
            return Return.err(tenant_id_result.error)
        # Sanitized first so control characters do not count towards the length
        query_result = validate_search_query(sanitize_string(query or ""))
        if query_result.is_err():
            return Return.err(query_result.error)

        tenant_id = tenant_id_result.value
        query = query_result.value
        page, page_size = validate_pagination(page, page_size)

        try:
            async with self.deadline():
                async with self.uow:
                    rows, total = await self.uow.memberships.search_by_tenant(
                        tenant_id, query, page, page_size
                    )
                    users = [UserProfile.from_entities(i, m) for i, m in rows]
        except (StorageError, TimeoutError) as exc:
            return self.internal_error(exc, tenant_id=tenant_id, query=query)

        return Return.ok(
            UserListResponse(users=users, total=total, page=page, page_size=page_size)
        )
