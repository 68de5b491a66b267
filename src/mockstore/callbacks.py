"""Listener registry used for snapshot subscriptions.

Listeners are keyed by an opaque handle returned at subscription time, never
by the identity of the callback, so the same callable can be subscribed
twice and each subscription can be cancelled on its own.
"""

from __future__ import annotations

from collections.abc import Callable
import itertools
import logging
from typing import Generic, TypeVar

from mockstore.core.exceptions import InvariantViolationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_handle_ids = itertools.count(1)


class SubscriptionHandle:
    """Opaque token for one subscription; calling it unsubscribes."""

    __slots__ = ("_handler", "_id")

    def __init__(self, handler: CallbackHandler[T]) -> None:
        self._handler = handler
        self._id = next(_handle_ids)

    @property
    def active(self) -> bool:
        return self._handler.is_registered(self)

    def __call__(self) -> None:
        self._handler.remove(self)

    def __repr__(self) -> str:
        return f"SubscriptionHandle({self._id}, active={self.active})"


class CallbackHandler(Generic[T]):
    """Registry of callbacks fired synchronously in registration order.

    With ``isolate_errors`` an exception raised by one callback is logged and
    the remaining callbacks still run. Without it the exception propagates and
    the remaining callbacks are skipped. Invariant violations always propagate.
    """

    def __init__(self, *, isolate_errors: bool = True) -> None:
        self.isolate_errors = isolate_errors
        self._callbacks: dict[SubscriptionHandle, Callable[[T], object]] = {}

    def add(self, callback: Callable[[T], object]) -> SubscriptionHandle:
        handle = SubscriptionHandle(self)
        self._callbacks[handle] = callback
        return handle

    def remove(self, handle: SubscriptionHandle) -> None:
        self._callbacks.pop(handle, None)

    def is_registered(self, handle: SubscriptionHandle) -> bool:
        return handle in self._callbacks

    def __len__(self) -> int:
        return len(self._callbacks)

    def __bool__(self) -> bool:
        return bool(self._callbacks)

    def fire(self, value: T) -> None:
        # Callbacks added while firing wait for the next value; removed ones are skipped.
        for handle, callback in list(self._callbacks.items()):
            if handle not in self._callbacks:
                continue
            if not self.isolate_errors:
                callback(value)
                continue
            try:
                callback(value)
            except InvariantViolationError:
                raise
            except Exception:
                logger.exception("Snapshot listener %r failed", handle)
