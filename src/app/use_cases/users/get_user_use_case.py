"""
Get User Use Case

Loads one user's profile within a tenant.
"""

from libs.result import Error, Result, Return
from src.app.repositories.errors import StorageError
from src.app.validation.validators import validate_object_id, validate_tenant_id

from .base import UserUseCase
from .dtos import UserProfile


class GetUserUseCase(UserUseCase):
    """
    Use case for reading a user profile.

    Business Rules:
    - The user must have an active membership in the requested tenant
    - An identity that only belongs to other tenants is reported as not found
    """

    action = "get user"

    async def execute(self, user_id: str, tenant_id: str) -> Result[UserProfile]:
        """
        Execute get user use case.

        Args:
            user_id: Identity ID (24 hex characters)
            tenant_id: Tenant the caller is acting in

        Returns:
            Result with UserProfile, or Error
        """
        user_id_result = validate_object_id(user_id)
        if user_id_result.is_err():
            return Return.err(user_id_result.error)
        tenant_id_result = validate_tenant_id(tenant_id)
        if tenant_id_result.is_err():
            return Return.err(tenant_id_result.error)
        user_id, tenant_id = user_id_result.value, tenant_id_result.value

        try:
            async with self.deadline():
                async with self.uow:
                    profile = await self.uow.memberships.get_profile(user_id, tenant_id)
                    if profile is None:
                        return Return.err(
                            Error("USER_NOT_FOUND", "User not found in this tenant")
                        )
                    # Built before the unit of work closes and expires the rows
                    return Return.ok(UserProfile.from_entities(*profile))
        except (StorageError, TimeoutError) as exc:
            return self.internal_error(exc, user_id=user_id, tenant_id=tenant_id)
