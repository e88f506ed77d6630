"""
Delete User Use Case

Soft deletes a user's membership in one tenant.
"""

from libs.result import Error, Result, Return
from src.app.repositories.errors import StorageError
from src.app.validation.validators import validate_object_id, validate_tenant_id

from .base import UserUseCase
from .dtos import DeleteUserResponse


class DeleteUserUseCase(UserUseCase):
    """
    Use case for removing a user from a tenant.

    Business Rules:
    - Soft delete: Membership.is_active=False, data retained
    - The identity and memberships in other tenants are untouched
    - Deleting an already deleted membership reports USER_NOT_FOUND
    """

    action = "delete user"

    async def execute(self, user_id: str, tenant_id: str) -> Result[DeleteUserResponse]:
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

                    await self.uow.memberships.deactivate(user_id, tenant_id)
                    await self.uow.commit()
        except (StorageError, TimeoutError) as exc:
            return self.internal_error(exc, user_id=user_id, tenant_id=tenant_id)

        self.logger.info(f"User deactivated: identity_id={user_id} tenant_id={tenant_id}")
        return Return.ok(DeleteUserResponse(status="deleted"))
