"""
User API Routes

Tenant-scoped user management. The tenant always comes from the
X-Tenant-ID header, never from the body or path.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import to_http_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    CreateUserCommand,
    CreateUserUseCase,
    DeleteUserResponse,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    SearchUsersUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
    UserListResponse,
    UserProfile,
)
from src.depends import get_tenant_id, get_unit_of_work

router = APIRouter(prefix="/users", tags=["User"])


class CreateUserRequest(BaseModel):
    """
    Create user HTTP request payload

    Field formats are checked by the use case, which answers with
    INVALID_INPUT rather than a schema error.
    """

    email: str = Field(..., description="User email address")
    first_name: str = Field("", description="Display name in this tenant")
    last_name: str = Field("", description="Display name in this tenant")
    phone: str = Field("", description="Phone number in E.164 format")


class UpdateUserRequest(BaseModel):
    """Update user HTTP request payload - empty fields are left unchanged"""

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    avatar_url: str = ""
    roles: Optional[List[str]] = None


def _timeout() -> float:
    return ApplicationConfig.OPERATION_TIMEOUT_SECONDS


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserProfile)
async def create_user(
    request: CreateUserRequest,
    tenant_id: str = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create User

    Creates the identity on first use of the email and adds it to the
    tenant from X-Tenant-ID.

    Raises:
        - 400 Bad Request: INVALID_INPUT, missing/invalid X-Tenant-ID
        - 409 Conflict: ALREADY_MEMBER
        - 500 Internal Server Error: Server error
    """
    command = CreateUserCommand(tenant_id=tenant_id, **request.model_dump())

    use_case = CreateUserUseCase(uow, timeout=_timeout())
    result = await use_case.execute(command)

    if result.is_err():
        raise to_http_error(result.error)
    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=UserListResponse)
async def list_users(
    tenant_id: str = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    page: int = Query(1, description="Page number, values below 1 mean 1"),
    page_size: int = Query(20, description="Page size, clamped to 1-100"),
):
    """
    List Users

    Returns the active members of the tenant, newest first.
    """
    use_case = ListUsersUseCase(uow, timeout=_timeout())
    result = await use_case.execute(tenant_id, page, page_size)

    if result.is_err():
        raise to_http_error(result.error)
    return result.value


@router.get("/search", status_code=status.HTTP_200_OK, response_model=UserListResponse)
async def search_users(
    tenant_id: str = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    q: str = Query("", description="Search terms (2-100 characters)"),
    page: int = Query(1),
    page_size: int = Query(20),
):
    """
    Search Users

    Matches names and emails of the tenant's active members, best match first.

    Raises:
        - 400 Bad Request: INVALID_INPUT (query missing, too short or too long)
    """
    use_case = SearchUsersUseCase(uow, timeout=_timeout())
    result = await use_case.execute(tenant_id, q, page, page_size)

    if result.is_err():
        raise to_http_error(result.error)
    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def get_user(
    user_id: str,
    tenant_id: str = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get User

    Raises:
        - 400 Bad Request: INVALID_INPUT (malformed user ID)
        - 404 Not Found: USER_NOT_FOUND (not an active member of this tenant)
    """
    use_case = GetUserUseCase(uow, timeout=_timeout())
    result = await use_case.execute(user_id, tenant_id)

    if result.is_err():
        raise to_http_error(result.error)
    return result.value


@router.put("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    tenant_id: str = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update User

    phone and avatar_url are shared by every tenant of the user;
    names and roles only change in this tenant.

    Raises:
        - 400 Bad Request: INVALID_INPUT
        - 404 Not Found: USER_NOT_FOUND
    """
    command = UpdateUserCommand(**request.model_dump())

    use_case = UpdateUserUseCase(uow, timeout=_timeout())
    result = await use_case.execute(user_id, tenant_id, command)

    if result.is_err():
        raise to_http_error(result.error)
    return result.value


@router.delete(
    "/{user_id}", status_code=status.HTTP_200_OK, response_model=DeleteUserResponse
)
async def delete_user(
    user_id: str,
    tenant_id: str = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete User

    Deactivates the membership in this tenant. The identity and other
    tenants' memberships are kept.

    Raises:
        - 400 Bad Request: INVALID_INPUT
        - 404 Not Found: USER_NOT_FOUND
    """
    use_case = DeleteUserUseCase(uow, timeout=_timeout())
    result = await use_case.execute(user_id, tenant_id)

    if result.is_err():
        raise to_http_error(result.error)
    return result.value
