"""
Database decorators.

``with_rollback_on_error`` leaves the session clean when a service
method fails part way through, so the caller can keep using it.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    """Session from the 'session' kwarg, a leading AsyncSession, or self.session."""
    session = kwargs.get("session")
    if session is None and args:
        if isinstance(args[0], AsyncSession):
            session = args[0]
        else:
            session = getattr(args[0], "session", None)
    return session


def with_rollback_on_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Roll back the session when the wrapped coroutine raises.

    The original exception is re-raised. A failing rollback is logged
    and does not replace it.

    Usage:
        class UserService(BaseService):
            @with_rollback_on_error
            async def register_user(self, email: str) -> User:
                ...
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)
        if session is None:
            raise TypeError(
                f"{func.__name__} is decorated with @with_rollback_on_error "
                f"but has no session"
            )

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            try:
                await session.rollback()
            except Exception as rollback_error:
                logger.opt(exception=rollback_error).error(
                    f"Rollback failed in {func.__name__}"
                )
            else:
                logger.debug(
                    f"Rolled back {func.__name__} after {type(e).__name__}"
                )
            raise

    return wrapper
