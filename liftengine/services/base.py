from collections.abc import Awaitable
from typing import TypeVar

from liftengine.core.exceptions import DomainError, PersistenceError
from liftengine.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class BaseService:
    def __init__(self, store):
        self._store = store

    async def _call_store(self, operation: str, call: Awaitable[T], **context) -> T:
        """Await a store call, normalising non-domain failures into ``PersistenceError``."""
        try:
            return await call
        except DomainError:
            raise
        except Exception as e:
            logger.error("store_call_failed", operation=operation, error=str(e), **context)
            raise PersistenceError(operation, f"{operation} failed: {e}", context) from e
