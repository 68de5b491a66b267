"""Cross-cutting concern decorators.

Logging of entry, completion and failure for the emulator's public
operations, for both plain and coroutine functions.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, TypeVar, cast

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def log_execution(
    level: int = logging.DEBUG,
    include_args: bool = False,
    include_result: bool = False,
) -> Callable[[F], F]:
    """Decorator to log function execution.

    Args:
        level: Logging level (default: DEBUG)
        include_args: Whether to log function arguments
        include_result: Whether to log function result

    Returns:
        Decorated function with logging capabilities
    """

    def decorator(func: F) -> F:
        func_name = f"{func.__module__}.{func.__qualname__}"

        def _log_entry(args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
            if include_args:
                logger.log(level, "Executing %s with args=%s, kwargs=%s", func_name, args, kwargs)
            else:
                logger.log(level, "Executing %s", func_name)

        def _log_exit(result: Any) -> None:
            if include_result:
                logger.log(level, "Completed %s -> %s", func_name, result)
            else:
                logger.log(level, "Completed %s", func_name)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            _log_entry(args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.debug("Error in %s: %s", func_name, e)
                raise
            _log_exit(result)
            return result

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            _log_entry(args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.debug("Error in %s: %s", func_name, e)
                raise
            _log_exit(result)
            return result

        if asyncio.iscoroutinefunction(func):
            return cast(F, async_wrapper)
        return cast(F, sync_wrapper)

    return decorator
