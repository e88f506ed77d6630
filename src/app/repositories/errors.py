"""
Storage Errors

Raised by repository implementations; use cases translate them into
INTERNAL_ERROR / ALREADY_MEMBER results.
"""


class StorageError(Exception):
    """Storage fault wrapped with the entity and key it concerned"""

    def __init__(self, entity: str, key: str, message: str = "storage operation failed"):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity}[{key}]: {message}")


class DuplicateKeyError(StorageError):
    """A unique constraint rejected the write"""

    def __init__(self, entity: str, key: str):
        super().__init__(entity, key, "duplicate key")
