"""
Base service class.

Every service owns the caller's AsyncSession and a logger bound to its
class name. Methods that form one unit of work are wrapped with
``transaction`` so commission rows and wallet balances change together.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.utils.exceptions import AffiliateError


T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Args:
        session: Async database session, shared with the service's
            repositories
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run a service method as one unit of work.

    Commits when the method returns and rolls back when it raises.
    Business rule violations (AffiliateError) are logged as warnings,
    anything else as an error with traceback. The exception is always
    re-raised.

    A rollback expires every instance loaded in the session, including
    the caller's. Reading an expired attribute afterwards needs an await,
    so keep IDs in locals before a call that may fail.

    Usage:
        @transaction
        async def reject(self, commission_id: int) -> Commission:
            ...
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except Exception as e:
            await self.rollback()
            log = self.logger.bind(function=func.__name__)
            if isinstance(e, AffiliateError):
                log.warning(f"{func.__name__} rolled back: {e}")
            else:
                log.opt(exception=e).error(
                    f"Transaction failed in {func.__name__}: {type(e).__name__}"
                )
            raise

    return wrapper
