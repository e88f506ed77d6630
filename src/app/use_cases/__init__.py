"""
Use Cases

Organized by domain folder:
- users/: Identity and tenant membership management
"""

from .users import (
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

__all__ = [
    "CreateUserUseCase",
    "GetUserUseCase",
    "ListUsersUseCase",
    "SearchUsersUseCase",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    "CreateUserCommand",
    "UpdateUserCommand",
    "UserProfile",
    "UserListResponse",
    "DeleteUserResponse",
]
