"""
Create User Use Case

Creates a global identity on first sight of an email and links it to the
requested tenant through a new membership.
"""

from libs.result import Error, Result, Return
from src.app.repositories.errors import DuplicateKeyError, StorageError
from src.app.validation.validators import (
    sanitize_name,
    validate_email,
    validate_name,
    validate_phone,
    validate_tenant_id,
)
from src.domain.entities import DEFAULT_ROLES, Membership

from .base import UserUseCase
from .dtos import CreateUserCommand, UserProfile


class CreateUserUseCase(UserUseCase):
    """
    Use case for adding a user to a tenant.

    Business Rules:
    - One identity per email across all tenants: the same email joining a
      second tenant reuses its identity and gets a second membership
    - One membership per (identity, tenant): joining twice fails with
      ALREADY_MEMBER, nothing is merged
    - A soft-deleted membership is reactivated instead of duplicated
    - New memberships start with roles ["user"] and is_active=True
    - Identity upsert and membership insert are committed together
    """

    action = "create user"

    def _validate(self, command: CreateUserCommand) -> Result[CreateUserCommand]:
        """
        Validate and normalize every field, failing on the first violation.

        Names are optional; when given they are validated then sanitized.
        """
        email = validate_email(command.email)
        if email.is_err():
            return Return.err(email.error)

        tenant_id = validate_tenant_id(command.tenant_id)
        if tenant_id.is_err():
            return Return.err(tenant_id.error)

        names = {}
        for field in ("first_name", "last_name"):
            value = (getattr(command, field) or "").strip()
            if not value:
                names[field] = ""
                continue
            name = validate_name(value, field)
            if name.is_err():
                return Return.err(name.error)
            names[field] = sanitize_name(name.value)

        phone = validate_phone(command.phone)
        if phone.is_err():
            return Return.err(phone.error)

        return Return.ok(
            CreateUserCommand(
                email=email.value,
                tenant_id=tenant_id.value,
                phone=phone.value,
                **names,
            )
        )

    async def execute(self, command: CreateUserCommand) -> Result[UserProfile]:
        """
        Execute create user use case.

        Args:
            command: CreateUserCommand with raw caller input

        Returns:
            Result with the new UserProfile, or Error
            (INVALID_INPUT, ALREADY_MEMBER, INTERNAL_ERROR)
        """
        validated = self._validate(command)
        if validated.is_err():
            return Return.err(validated.error)
        command = validated.value

        try:
            async with self.deadline():
                return await self._create(command)
        except (StorageError, TimeoutError) as exc:
            return self.internal_error(exc, email=command.email, tenant_id=command.tenant_id)

    async def _create(self, command: CreateUserCommand) -> Result[UserProfile]:
        async with self.uow:
            # Reject (or revive) an existing membership before writing anything
            identity = await self.uow.identities.get_by_email(command.email)
            if identity is not None:
                existing = await self.uow.memberships.get_by_identity_and_tenant(
                    identity.id, command.tenant_id
                )
                if existing is not None and existing.is_active:
                    return Return.err(
                        Error("ALREADY_MEMBER", "User already exists in this tenant")
                    )
                if existing is not None:
                    return await self._reactivate(command, identity)

            # Creates the identity on first sight of this email, reuses it otherwise
            identity = await self.uow.identities.upsert_by_email(
                command.email, phone=command.phone or None
            )

            membership = Membership(
                identity_id=identity.id,
                tenant_id=command.tenant_id,
                roles=list(DEFAULT_ROLES),
                first_name=command.first_name,
                last_name=command.last_name,
                is_active=True,
            )
            try:
                membership = await self.uow.memberships.create(membership)
            except DuplicateKeyError:
                # Lost a race against a concurrent join of the same pair
                return Return.err(
                    Error("ALREADY_MEMBER", "User already exists in this tenant")
                )

            await self.uow.commit()

            self.logger.info(
                f"User created/linked: identity_id={identity.id} "
                f"tenant_id={command.tenant_id} membership_id={membership.id}"
            )
            return Return.ok(UserProfile.from_entities(identity, membership))

    async def _reactivate(self, command: CreateUserCommand, identity) -> Result[UserProfile]:
        # Touches updated_at like a first join does
        identity = await self.uow.identities.upsert_by_email(
            command.email, phone=command.phone or None
        )
        membership = await self.uow.memberships.update(
            identity.id,
            command.tenant_id,
            {
                "is_active": True,
                "first_name": command.first_name,
                "last_name": command.last_name,
                "roles": list(DEFAULT_ROLES),
            },
        )
        await self.uow.commit()

        self.logger.info(
            f"User re-joined tenant: identity_id={identity.id} tenant_id={command.tenant_id}"
        )
        return Return.ok(UserProfile.from_entities(identity, membership))
