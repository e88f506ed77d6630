"""
User Management Use Cases

Identity + membership operations, all scoped by tenant.
"""

from .create_user_use_case import CreateUserUseCase
from .delete_user_use_case import DeleteUserUseCase
from .dtos import (
    CreateUserCommand,
    DeleteUserResponse,
    IdentityInfo,
    MembershipInfo,
    UpdateUserCommand,
    UserListResponse,
    UserProfile,
)
from .get_user_use_case import GetUserUseCase
from .list_users_use_case import ListUsersUseCase
from .search_users_use_case import SearchUsersUseCase
from .update_user_use_case import UpdateUserUseCase

__all__ = [
    # Use cases
    "CreateUserUseCase",
    "GetUserUseCase",
    "ListUsersUseCase",
    "SearchUsersUseCase",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    # DTOs
    "CreateUserCommand",
    "UpdateUserCommand",
    "IdentityInfo",
    "MembershipInfo",
    "UserProfile",
    "UserListResponse",
    "DeleteUserResponse",
]
