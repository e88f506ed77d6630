import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.entities import Identity, Membership

IDENTITY_ID = "65a1b2c3d4e5f60718293a4b"
TENANT_ID = "acme-corp"


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with both repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.identities = MagicMock()
    uow.identities.upsert_by_email = AsyncMock()
    uow.identities.get_by_email = AsyncMock(return_value=None)
    uow.identities.get_by_id = AsyncMock()
    uow.identities.update = AsyncMock()

    uow.memberships = MagicMock()
    uow.memberships.create = AsyncMock(side_effect=lambda membership: membership)
    uow.memberships.get_by_identity_and_tenant = AsyncMock(return_value=None)
    uow.memberships.get_profile = AsyncMock(return_value=None)
    uow.memberships.list_by_tenant = AsyncMock(return_value=([], 0))
    uow.memberships.search_by_tenant = AsyncMock(return_value=([], 0))
    uow.memberships.update = AsyncMock()
    uow.memberships.deactivate = AsyncMock(return_value=True)

    return uow


@pytest.fixture
def identity():
    return Identity(
        id=IDENTITY_ID,
        email="jane@example.com",
        phone="+14155550100",
        is_active=True,
    )


@pytest.fixture
def membership():
    return Membership(
        identity_id=IDENTITY_ID,
        tenant_id=TENANT_ID,
        roles=["user"],
        first_name="Jane",
        last_name="Doe",
        is_active=True,
    )
