import pytest

from src.app.repositories.errors import StorageError
from src.app.use_cases.users import DeleteUserUseCase


@pytest.mark.asyncio
async def test_delete_user_deactivates_membership(mock_uow, identity, membership):
    mock_uow.memberships.get_profile.return_value = (identity, membership)

    use_case = DeleteUserUseCase(mock_uow)
    result = await use_case.execute(identity.id, "acme-corp")

    assert result.is_ok()
    assert result.value.status == "deleted"
    mock_uow.memberships.deactivate.assert_called_once_with(identity.id, "acme-corp")
    mock_uow.commit.assert_called_once()

    # Identity is never touched by a delete
    mock_uow.identities.update.assert_not_called()


@pytest.mark.asyncio
async def test_delete_user_not_found(mock_uow, identity):
    mock_uow.memberships.get_profile.return_value = None

    use_case = DeleteUserUseCase(mock_uow)
    result = await use_case.execute(identity.id, "acme-corp")

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.memberships.deactivate.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_delete_user_invalid_id(mock_uow):
    use_case = DeleteUserUseCase(mock_uow)
    result = await use_case.execute("123", "acme-corp")

    assert result.is_err()
    assert result.error.code == "INVALID_INPUT"
    mock_uow.memberships.get_profile.assert_not_called()


@pytest.mark.asyncio
async def test_delete_user_storage_failure(mock_uow, identity, membership):
    mock_uow.memberships.get_profile.return_value = (identity, membership)
    mock_uow.memberships.deactivate.side_effect = StorageError("membership", identity.id)

    use_case = DeleteUserUseCase(mock_uow)
    result = await use_case.execute(identity.id, "acme-corp")

    assert result.is_err()
    assert result.error.code == "INTERNAL_ERROR"
    mock_uow.commit.assert_not_called()
