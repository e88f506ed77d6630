"""
Update User Use Case

Applies a partial update to a user's identity and/or tenant membership.
"""

from typing import Any, Dict

from libs.result import Error, Result, Return
from src.app.repositories.errors import StorageError
from src.app.validation.validators import (
    sanitize_name,
    validate_avatar_url,
    validate_name,
    validate_object_id,
    validate_phone,
    validate_roles,
    validate_tenant_id,
)

from .base import UserUseCase
from .dtos import UpdateUserCommand, UserProfile


class UpdateUserUseCase(UserUseCase):
    """
    Use case for updating a user within a tenant.

    Business Rules:
    - Empty, blank or missing fields mean "leave unchanged"
    - phone and avatar_url live on the identity (shared by all tenants)
    - first_name, last_name and roles live on the tenant's membership
    - Each side is written only when one of its values actually changes;
      a request that changes nothing writes nothing
    - Concurrent updates are last-write-wins per field
    """

    action = "update user"

    def _validate(self, command: UpdateUserCommand) -> Result[UpdateUserCommand]:
        """Validate only the fields that were provided"""
        values: Dict[str, Any] = {}

        for field in ("first_name", "last_name"):
            value = (getattr(command, field) or "").strip()
            if value:
                name = validate_name(value, field)
                if name.is_err():
                    return Return.err(name.error)
                values[field] = sanitize_name(name.value)

        phone = validate_phone(command.phone)
        if phone.is_err():
            return Return.err(phone.error)
        values["phone"] = phone.value

        avatar_url = validate_avatar_url(command.avatar_url)
        if avatar_url.is_err():
            return Return.err(avatar_url.error)
        values["avatar_url"] = avatar_url.value

        if command.roles:
            roles = validate_roles(command.roles)
            if roles.is_err():
                return Return.err(roles.error)
            values["roles"] = roles.value

        return Return.ok(UpdateUserCommand(**values))

    async def execute(
        self, user_id: str, tenant_id: str, command: UpdateUserCommand
    ) -> Result[UserProfile]:
        """
        Execute update user use case.

        Args:
            user_id: Identity ID (24 hex characters)
            tenant_id: Tenant the caller is acting in
            command: UpdateUserCommand, empty fields are ignored

        Returns:
            Result with the updated UserProfile, or Error
        """
        user_id_result = validate_object_id(user_id)
        if user_id_result.is_err():
            return Return.err(user_id_result.error)
        tenant_id_result = validate_tenant_id(tenant_id)
        if tenant_id_result.is_err():
            return Return.err(tenant_id_result.error)
        validated = self._validate(command)
        if validated.is_err():
            return Return.err(validated.error)

        user_id, tenant_id = user_id_result.value, tenant_id_result.value
        command = validated.value

        try:
            async with self.deadline():
                return await self._update(user_id, tenant_id, command)
        except (StorageError, TimeoutError) as exc:
            return self.internal_error(exc, user_id=user_id, tenant_id=tenant_id)

    async def _update(
        self, user_id: str, tenant_id: str, command: UpdateUserCommand
    ) -> Result[UserProfile]:
        async with self.uow:
            profile = await self.uow.memberships.get_profile(user_id, tenant_id)
            if profile is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found in this tenant"))
            identity, membership = profile

            identity_changes = {
                field: value
                for field, value in (
                    ("phone", command.phone),
                    ("avatar_url", command.avatar_url),
                )
                if value and value != getattr(identity, field)
            }

            membership_changes: Dict[str, Any] = {
                field: value
                for field, value in (
                    ("first_name", command.first_name),
                    ("last_name", command.last_name),
                )
                if value and value != getattr(membership, field)
            }
            if command.roles and set(command.roles) != set(membership.roles):
                membership_changes["roles"] = command.roles

            if identity_changes:
                identity = await self.uow.identities.update(identity.id, identity_changes)
            if membership_changes:
                membership = await self.uow.memberships.update(
                    user_id, tenant_id, membership_changes
                )

            if identity_changes or membership_changes:
                await self.uow.commit()
                self.logger.info(
                    f"User updated: identity_id={user_id} tenant_id={tenant_id} "
                    f"fields={sorted(identity_changes) + sorted(membership_changes)}"
                )

            return Return.ok(UserProfile.from_entities(identity, membership))
