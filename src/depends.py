from typing import Optional

from fastapi import Header, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError

TENANT_ID_HEADER = "X-Tenant-ID"

engine = create_async_engine(ApplicationConfig.DB_URI, echo=ApplicationConfig.DB_ECHO, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_tenant_id(
    x_tenant_id: Optional[str] = Header(None, alias=TENANT_ID_HEADER),
) -> str:
    """
    Dependency to extract the tenant from the X-Tenant-ID header.

    The caller is trusted to have authenticated the tenant; only presence
    and length are checked here, the use cases re-validate the format.

    Raises:
        ClientError: 400 TENANT_ID_REQUIRED if the header is missing,
            400 INVALID_TENANT_ID if it is not 3-128 characters long
    """
    if not x_tenant_id:
        raise ClientError(
            Error(
                "TENANT_ID_REQUIRED",
                f"{TENANT_ID_HEADER} header is required for all tenant operations",
            ),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if not 3 <= len(x_tenant_id) <= 128:
        raise ClientError(
            Error(
                "INVALID_TENANT_ID",
                f"{TENANT_ID_HEADER} must be between 3 and 128 characters",
            ),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return x_tenant_id


def get_engine():
    return engine
