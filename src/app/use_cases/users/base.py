import asyncio
import logging
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork


class UserUseCase:
    """
    Shared plumbing of the user use cases.

    timeout is the caller's deadline in seconds for the storage part of the
    operation (None: no deadline). On expiry the in-flight call is abandoned
    and the unit of work rolls back whatever was not committed.
    """

    action = "process user"

    def __init__(self, uow: UnitOfWork, timeout: Optional[float] = None):
        self.uow = uow
        self.timeout = timeout
        self.logger = logging.getLogger(type(self).__module__)

    def deadline(self):
        return asyncio.timeout(self.timeout)

    def internal_error(self, exc: Exception, **context) -> Result:
        """Log a storage fault or deadline expiry and hide it behind INTERNAL_ERROR"""
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        self.logger.error(f"Failed to {self.action} ({details}): {exc!r}", exc_info=exc)
        return Return.err(Error("INTERNAL_ERROR", f"Failed to {self.action}"))
