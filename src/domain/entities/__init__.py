"""
User Service Domain Entities

Identity is global, Membership is tenant-scoped.
Each entity in its own file.
"""

from .identity import Identity
from .membership import DEFAULT_ROLES, Membership

__all__ = [
    "DEFAULT_ROLES",
    "Identity",
    "Membership",
]
