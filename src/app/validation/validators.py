"""
Field Validators

Pure validation and sanitization helpers used by the user use cases.
No I/O and no shared state: every validator returns a Result holding either
the normalized value or an INVALID_INPUT error describing the violation.
"""

import re
import unicodedata
from typing import List, Tuple
from urllib.parse import urlparse

from libs.result import Error, Result, Return

INVALID_INPUT = "INVALID_INPUT"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps (page - 1) * page_size within a 64-bit OFFSET
MAX_PAGE = 1_000_000

EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100
TENANT_ID_MIN_LENGTH = 3
TENANT_ID_MAX_LENGTH = 128
SEARCH_QUERY_MIN_LENGTH = 2
SEARCH_QUERY_MAX_LENGTH = 100
AVATAR_URL_MAX_LENGTH = 2048
ROLE_MAX_LENGTH = 64

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
# E.164: optional +, first digit 1-9, 6-14 digits in total
_PHONE_RE = re.compile(r"^\+?[1-9]\d{5,13}$")
_TENANT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")
_ROLE_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_WHITESPACE_RE = re.compile(r"\s+")


def _invalid(message: str) -> Result:
    return Return.err(Error(INVALID_INPUT, message))


def validate_email(email: str) -> Result[str]:
    """
    Validate email format.

    Only surrounding whitespace is removed; the address is otherwise kept
    as given (no case folding).
    """
    email = (email or "").strip()
    if not email:
        return _invalid("email is required")
    if len(email) > EMAIL_MAX_LENGTH:
        return _invalid(f"email is too long (max {EMAIL_MAX_LENGTH} characters)")
    if not _EMAIL_RE.match(email):
        return _invalid("invalid email format")
    return Return.ok(email)


def validate_name(name: str, field: str) -> Result[str]:
    """
    Validate a first or last name.

    Allows unicode letters, spaces, hyphens and apostrophes.
    """
    name = (name or "").strip()
    if not name:
        return _invalid(f"{field} is required")
    if len(name) > NAME_MAX_LENGTH:
        return _invalid(f"{field} must be between 1 and {NAME_MAX_LENGTH} characters")

    for char in name:
        if not (char.isalpha() or char.isspace() or char in ("-", "'")):
            return _invalid(f"{field} contains invalid characters")

    return Return.ok(name)


def validate_phone(phone: str) -> Result[str]:
    """Validate phone number in E.164 format. Empty means no phone."""
    if not phone:
        return Return.ok("")

    phone = phone.strip()
    if not _PHONE_RE.match(phone):
        return _invalid(
            "invalid phone number format (E.164 format required, e.g., +1234567890)"
        )
    return Return.ok(phone)


def validate_tenant_id(tenant_id: str) -> Result[str]:
    tenant_id = (tenant_id or "").strip()
    if not tenant_id:
        return _invalid("tenant_id is required")
    if not TENANT_ID_MIN_LENGTH <= len(tenant_id) <= TENANT_ID_MAX_LENGTH:
        return _invalid(
            f"tenant_id must be between {TENANT_ID_MIN_LENGTH} and "
            f"{TENANT_ID_MAX_LENGTH} characters"
        )
    if not _TENANT_ID_RE.match(tenant_id):
        return _invalid("tenant_id contains invalid characters")
    return Return.ok(tenant_id)


def validate_object_id(object_id: str) -> Result[str]:
    """Validate a 24 character hex identifier, returned lowercased"""
    if not object_id:
        return _invalid("id is required")
    if not _OBJECT_ID_RE.match(object_id):
        return _invalid("invalid id format")
    return Return.ok(object_id.lower())


def validate_pagination(page: int, page_size: int) -> Tuple[int, int]:
    """
    Clamp pagination parameters. Never fails.

    - page below 1 becomes 1
    - page_size below 1 falls back to the default (20)
    - page above 1,000,000 is capped at 1,000,000
    - page_size above 100 is capped at 100
    """
    if page < 1:
        page = 1
    if page > MAX_PAGE:
        page = MAX_PAGE
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    if page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE
    return page, page_size


def validate_search_query(query: str) -> Result[str]:
    query = (query or "").strip()
    if not query:
        return _invalid("search query is required")
    if len(query) < SEARCH_QUERY_MIN_LENGTH:
        return _invalid(
            f"search query must be at least {SEARCH_QUERY_MIN_LENGTH} characters"
        )
    if len(query) > SEARCH_QUERY_MAX_LENGTH:
        return _invalid(
            f"search query is too long (max {SEARCH_QUERY_MAX_LENGTH} characters)"
        )
    return Return.ok(query)


def validate_avatar_url(avatar_url: str) -> Result[str]:
    """Validate an absolute http(s) URL. Empty means no avatar."""
    if not avatar_url:
        return Return.ok("")

    avatar_url = avatar_url.strip()
    if len(avatar_url) > AVATAR_URL_MAX_LENGTH:
        return _invalid(f"avatar_url is too long (max {AVATAR_URL_MAX_LENGTH} characters)")

    parsed = urlparse(avatar_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return _invalid("avatar_url must be an absolute http or https URL")
    return Return.ok(avatar_url)


def validate_roles(roles: List[str]) -> Result[List[str]]:
    """
    Validate a list of role names.

    Roles behave as a set: duplicates are dropped, first occurrence wins.
    """
    if not roles:
        return _invalid("roles must contain at least one role")

    unique_roles: List[str] = []
    for role in roles:
        role = (role or "").strip()
        if not role or len(role) > ROLE_MAX_LENGTH or not _ROLE_RE.match(role):
            return _invalid(f"invalid role name: {role!r}")
        if role not in unique_roles:
            unique_roles.append(role)
    return Return.ok(unique_roles)


def sanitize_string(value: str) -> str:
    """Remove control characters, trim, and collapse whitespace runs"""
    cleaned = "".join(
        char for char in value if unicodedata.category(char) != "Cc"
    )
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def sanitize_name(name: str) -> str:
    return sanitize_string(name)
