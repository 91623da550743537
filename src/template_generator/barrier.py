"""Compile barrier: a one-shot continuation that runs after the script build.

The barrier is process-wide run state. At most one continuation is pending;
subscribing again retires the previous one (last writer wins). A completion
signal fires the pending continuation exactly once, after deregistering it.
"""
from __future__ import annotations

import logging
from functools import partial
from threading import RLock
from typing import Callable

from .compiler import BuildResult, EditorHost

logger = logging.getLogger(__name__)

_PENDING = "pending"
_FIRED = "fired"
_CANCELLED = "cancelled"


class Subscription:
    """A continuation that can run at most once and can be cancelled."""

    def __init__(
        self,
        callback: Callable[[BuildResult], None],
        on_cancel: Callable[[], None] | None = None,
    ):
        self._callback = callback
        self._on_cancel = on_cancel
        self._state = _PENDING

    @property
    def pending(self) -> bool:
        return self._state == _PENDING

    @property
    def fired(self) -> bool:
        return self._state == _FIRED

    @property
    def cancelled(self) -> bool:
        return self._state == _CANCELLED

    def fire(self, result: BuildResult) -> bool:
        """Run the continuation; returns False if it already ran or was cancelled."""
        if not self.pending:
            return False
        self._state = _FIRED
        self._callback(result)
        return True

    def cancel(self) -> bool:
        if not self.pending:
            return False
        self._state = _CANCELLED
        if self._on_cancel is not None:
            self._on_cancel()
        return True


class CompileBarrier:
    def __init__(self) -> None:
        self._pending: Subscription | None = None

    @property
    def pending(self) -> Subscription | None:
        return self._pending

    def subscribe(
        self,
        callback: Callable[[BuildResult], None],
        on_cancel: Callable[[], None] | None = None,
    ) -> Subscription:
        previous = self._pending
        if previous is not None and previous.pending:
            logger.info("A generation run is already waiting for compilation; replacing it.")
            previous.cancel()
        subscription = Subscription(callback, on_cancel)
        self._pending = subscription
        return subscription

    def trigger(self, host: EditorHost, subscription: Subscription) -> None:
        """Ask the host to build. Returns immediately."""
        host.refresh(partial(self._on_build_finished, subscription))

    def cancel(self) -> None:
        subscription, self._pending = self._pending, None
        if subscription is not None:
            subscription.cancel()

    def _on_build_finished(self, subscription: Subscription, result: BuildResult) -> None:
        if subscription is not self._pending:
            logger.debug("Ignoring build completion for a retired continuation.")
            return
        self._pending = None
        logger.info("Script compilation finished (success=%s).", result.success)
        subscription.fire(result)


# Process-wide barrier shared by every pipeline run.
_compile_barrier: CompileBarrier | None = None
_barrier_lock = RLock()


def get_compile_barrier() -> CompileBarrier:
    global _compile_barrier
    if _compile_barrier is None:
        with _barrier_lock:
            if _compile_barrier is None:
                _compile_barrier = CompileBarrier()
    return _compile_barrier


def set_compile_barrier(barrier: CompileBarrier | None) -> None:
    """Replace the process-wide barrier (``None`` resets it). Test seam."""
    global _compile_barrier
    with _barrier_lock:
        _compile_barrier = barrier
