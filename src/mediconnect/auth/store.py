"""Process-wide session store.

Holds the current identity and the loading counter. Only ``AuthProvider``
writes to it; everything else reads ``snapshot()`` or subscribes for changes.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from mediconnect.models.identity import Identity
from mediconnect.models.session import SessionState

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


class SessionStore:
    """Current identity plus loading state.

    ``is_authenticated`` is derived from ``identity`` so the two can never
    disagree. Every identity write bumps ``version``; writers that computed
    their value from an older view of the store pass ``since`` and are
    discarded if anything was written in between.

    The store starts loading: initial hydration counts as one pending unit of
    work and is released by ``finish_hydration()``.
    """

    def __init__(self) -> None:
        self._identity: Identity | None = None
        self._pending = 1
        self._hydrated = False
        self._version = 0
        self._listeners: list[SessionListener] = []

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    @property
    def is_hydrated(self) -> bool:
        return self._hydrated

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> SessionState:
        """Return an immutable snapshot of the current state."""
        return SessionState(
            identity=self._identity,
            is_loading=self.is_loading,
            version=self._version,
        )

    def set_identity(self, identity: Identity | None, since: int | None = None) -> bool:
        """Replace the current identity.

        Args:
            identity: New identity, or None to sign out
            since: Version the caller's value was based on; the write is
                dropped if the store has moved on since then

        Returns:
            True if the write was applied
        """
        if since is not None and since != self._version:
            logger.debug(
                f"Discarding stale session write (based on v{since}, now v{self._version})"
            )
            return False

        self._identity = identity
        self._version += 1
        self._notify()
        return True

    def clear(self, since: int | None = None) -> bool:
        """Drop the current identity."""
        return self.set_identity(None, since=since)

    def finish_hydration(self) -> None:
        """Mark initial hydration as done. Idempotent."""
        if self._hydrated:
            return
        self._hydrated = True
        self._release()

    @contextmanager
    def loading(self) -> Iterator[None]:
        """Hold the loading flag for the duration of the block."""
        self._pending += 1
        self._notify()
        try:
            yield
        finally:
            self._release()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _release(self) -> None:
        self._pending = max(self._pending - 1, 0)
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        state = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Session listener failed: {e}")
