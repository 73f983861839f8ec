"""Single-flight memoized computation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import StrEnum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResolveState(StrEnum):
    UNINITIALIZED = "uninitialized"
    DISCOVERING = "discovering"
    RESOLVED_PRESENT = "resolved_present"
    RESOLVED_ABSENT = "resolved_absent"


class ResolveOnce(Generic[T]):
    """Runs ``compute`` at most once and serves the memoized result.

    The first callers race for a lock; one runs ``compute`` while the others
    block and then read the same value. Once resolved, reads skip the lock.
    A ``None`` result is memoized like any other ("resolved absent").

    If ``compute`` raises, the state goes back to UNINITIALIZED and the
    exception propagates, so a later call runs it again.
    """

    def __init__(self, compute: Callable[[], T | None]) -> None:
        self._compute = compute
        self._lock = threading.Lock()
        self._state = ResolveState.UNINITIALIZED
        self._value: T | None = None
        self._resolved = False

    @property
    def state(self) -> ResolveState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._resolved

    def get(self) -> T | None:
        if self._resolved:
            return self._value

        with self._lock:
            if not self._resolved:
                self._state = ResolveState.DISCOVERING
                try:
                    value = self._compute()
                except BaseException:
                    self._state = ResolveState.UNINITIALIZED
                    raise
                self._value = value
                self._state = (
                    ResolveState.RESOLVED_ABSENT if value is None else ResolveState.RESOLVED_PRESENT
                )
                # Publish last: the fast path reads _value once this is True
                self._resolved = True
                logger.debug("Resolved once: %s", self._state.value)
        return self._value
