import asyncio

import pytest

from src.app.repositories.errors import DuplicateKeyError, StorageError
from src.app.use_cases.users import CreateUserCommand, CreateUserUseCase
from src.domain.entities import Membership


def make_command(**overrides) -> CreateUserCommand:
    fields = {
        "email": "jane@example.com",
        "tenant_id": "acme-corp",
        "first_name": "Jane",
        "last_name": "Doe",
        "phone": "+14155550100",
    }
    fields.update(overrides)
    return CreateUserCommand(**fields)


@pytest.mark.asyncio
async def test_create_user_with_new_email(mock_uow, identity):
    """First sight of an email creates the identity and a default membership"""
    # Arrange
    mock_uow.identities.upsert_by_email.return_value = identity

    # Act
    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command())

    # Assert
    assert result.is_ok()
    profile = result.value
    assert profile.identity.id == identity.id
    assert profile.identity.email == "jane@example.com"
    assert profile.membership.identity_id == identity.id
    assert profile.membership.tenant_id == "acme-corp"
    assert profile.membership.roles == ["user"]
    assert profile.membership.is_active is True
    assert profile.membership.first_name == "Jane"

    mock_uow.identities.upsert_by_email.assert_called_once_with(
        "jane@example.com", phone="+14155550100"
    )
    mock_uow.memberships.create.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_create_user_links_existing_identity_to_new_tenant(mock_uow, identity):
    """Same email in another tenant reuses the identity"""
    # Arrange - identity exists, no membership in this tenant
    mock_uow.identities.get_by_email.return_value = identity
    mock_uow.memberships.get_by_identity_and_tenant.return_value = None
    mock_uow.identities.upsert_by_email.return_value = identity

    # Act
    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command(tenant_id="globex"))

    # Assert
    assert result.is_ok()
    assert result.value.identity.id == identity.id
    assert result.value.membership.tenant_id == "globex"
    mock_uow.memberships.get_by_identity_and_tenant.assert_called_once_with(
        identity.id, "globex"
    )
    created = mock_uow.memberships.create.call_args.args[0]
    assert created.identity_id == identity.id


@pytest.mark.asyncio
async def test_create_user_already_member(mock_uow, identity, membership):
    """Joining the same tenant twice is rejected, nothing is written"""
    mock_uow.identities.get_by_email.return_value = identity
    mock_uow.memberships.get_by_identity_and_tenant.return_value = membership

    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command())

    assert result.is_err()
    assert result.error.code == "ALREADY_MEMBER"
    mock_uow.identities.upsert_by_email.assert_not_called()
    mock_uow.memberships.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_concurrent_duplicate_is_already_member(mock_uow, identity):
    """Losing the insert race on the unique pair surfaces as ALREADY_MEMBER"""
    mock_uow.identities.upsert_by_email.return_value = identity
    mock_uow.memberships.create.side_effect = DuplicateKeyError(
        "membership", f"{identity.id}:acme-corp"
    )

    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command())

    assert result.is_err()
    assert result.error.code == "ALREADY_MEMBER"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_reactivates_deleted_membership(mock_uow, identity, membership):
    """A soft-deleted membership is revived rather than duplicated"""
    membership.is_active = False
    mock_uow.identities.get_by_email.return_value = identity
    mock_uow.memberships.get_by_identity_and_tenant.return_value = membership
    revived = Membership(
        id=membership.id,
        identity_id=identity.id,
        tenant_id="acme-corp",
        roles=["user"],
        first_name="Janet",
        last_name="Doe",
        is_active=True,
    )
    mock_uow.memberships.update.return_value = revived
    mock_uow.identities.upsert_by_email.return_value = identity

    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command(first_name="Janet"))

    assert result.is_ok()
    assert result.value.membership.id == membership.id
    assert result.value.membership.is_active is True
    mock_uow.memberships.update.assert_called_once_with(
        identity.id,
        "acme-corp",
        {"is_active": True, "first_name": "Janet", "last_name": "Doe", "roles": ["user"]},
    )
    mock_uow.memberships.create.assert_not_called()
    mock_uow.commit.assert_called_once()
    # The identity is touched just like on a first join
    mock_uow.identities.upsert_by_email.assert_called_once_with(
        "jane@example.com", phone="+14155550100"
    )


@pytest.mark.asyncio
async def test_create_user_invalid_email_fails_before_storage(mock_uow):
    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command(email="user@"))

    assert result.is_err()
    assert result.error.code == "INVALID_INPUT"
    mock_uow.__aenter__.assert_not_called()
    mock_uow.identities.get_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_rejects_invalid_fields(mock_uow):
    use_case = CreateUserUseCase(mock_uow)

    for overrides in (
        {"tenant_id": "x"},
        {"first_name": "J4ne"},
        {"last_name": "Doe!"},
        {"phone": "12"},
    ):
        result = await use_case.execute(make_command(**overrides))
        assert result.is_err(), overrides
        assert result.error.code == "INVALID_INPUT"

    mock_uow.identities.upsert_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_sanitizes_names_and_allows_missing_ones(mock_uow, identity):
    mock_uow.identities.upsert_by_email.return_value = identity

    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(
        make_command(first_name="  Mary    Jane ", last_name="", phone="")
    )

    assert result.is_ok()
    created = mock_uow.memberships.create.call_args.args[0]
    assert created.first_name == "Mary Jane"
    assert created.last_name == ""
    mock_uow.identities.upsert_by_email.assert_called_once_with(
        "jane@example.com", phone=None
    )


@pytest.mark.asyncio
async def test_create_user_storage_failure_is_internal_error(mock_uow):
    mock_uow.identities.upsert_by_email.side_effect = StorageError(
        "identity", "jane@example.com"
    )

    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command())

    assert result.is_err()
    assert result.error.code == "INTERNAL_ERROR"
    assert "jane@example.com" not in result.error.message
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_deadline_exceeded_is_internal_error(mock_uow):
    async def slow_lookup(email):
        await asyncio.sleep(1)

    mock_uow.identities.get_by_email = slow_lookup

    use_case = CreateUserUseCase(mock_uow, timeout=0.01)
    result = await use_case.execute(make_command())

    assert result.is_err()
    assert result.error.code == "INTERNAL_ERROR"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_blank_names_are_treated_as_missing(mock_uow, identity):
    mock_uow.identities.upsert_by_email.return_value = identity

    use_case = CreateUserUseCase(mock_uow)
    result = await use_case.execute(make_command(first_name="   ", last_name="\t"))

    assert result.is_ok()
    created = mock_uow.memberships.create.call_args.args[0]
    assert created.first_name == ""
    assert created.last_name == ""
