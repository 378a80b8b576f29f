"""Transaction runner: retries one unit of work after optimistic-lock conflicts."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import ConcurrentWriteConflictException
from app.shared.telemetry.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class TransactionRunner:
    """Runs an operation inside a SAVEPOINT of the request transaction.

    On ConcurrentWriteConflictException the savepoint is rolled back, cached
    rows are expired so the next attempt re-reads them, and the whole
    operation (load, authorize, diff, write, audit) runs again, up to
    max_retries extra attempts. Other exceptions propagate unchanged.
    """

    def __init__(self, session: AsyncSession, max_retries: int = 3) -> None:
        self.session = session
        self.max_retries = max_retries

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                async with self.session.begin_nested():
                    return await operation()
            except ConcurrentWriteConflictException as exc:
                if attempt >= self.max_retries:
                    logger.warning(
                        "Write conflict not resolved after %d retries: %s",
                        attempt,
                        exc.details,
                    )
                    raise
                attempt += 1
                logger.warning(
                    "Write conflict (attempt %d/%d), retrying: %s",
                    attempt,
                    self.max_retries,
                    exc.details,
                )
                self.session.expire_all()
