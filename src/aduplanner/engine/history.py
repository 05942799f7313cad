"""Undo/redo history for the scene.

Scenes are immutable, so history entries are the scene values themselves;
successive entries share every unchanged entity. Changes are captured after a
debounce window so that a burst of pointer-driven updates becomes a single
undo step.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Generic, List, Optional, TypeVar

from ..config import HISTORY_DEBOUNCE_SECONDS, MAX_HISTORY
from ..core.model import Scene

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Collapse bursts of values into a single callback.

    Every ``notify`` restarts the window; the callback receives the last value
    once ``poll`` is called at or after the deadline, or on ``flush``. The
    clock is passed in by the caller.
    """

    def __init__(self, delay: float, callback: Callable[[T], None]):
        self.delay = delay
        self.callback = callback
        self._value: Optional[T] = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def notify(self, value: T, now: float) -> None:
        self._value = value
        self._deadline = now + self.delay

    def poll(self, now: float) -> bool:
        """Fire the callback if the window has elapsed."""
        if self._deadline is None or now < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Fire the pending callback immediately."""
        if self._deadline is None:
            return False
        value = self._value
        self.cancel()
        self.callback(value)
        return True

    def cancel(self) -> None:
        self._value = None
        self._deadline = None


class HistoryManager:
    """Bounded undo/redo stack of scenes.

    The stack holds at most ``max_size`` entries; the oldest entry is evicted
    first. A capture equal to the current entry is skipped, and a capture made
    after an undo discards the redo entries.

    Args:
        max_size: Maximum number of entries kept.
        debounce_seconds: Quiet period before a change is captured.
        on_restore: Called with the target scene on undo/redo. Changes
            notified while it runs are ignored.
    """

    def __init__(
        self,
        max_size: int = MAX_HISTORY,
        debounce_seconds: float = HISTORY_DEBOUNCE_SECONDS,
        on_restore: Optional[Callable[[Scene], None]] = None,
    ):
        if max_size < 1:
            raise ValueError(f"History size must be at least 1, got {max_size}")
        self.max_size = max_size
        self.on_restore = on_restore
        self._entries: List[Scene] = []
        self._index = -1
        self._restoring = False
        self._debouncer: Debouncer[Scene] = Debouncer(debounce_seconds, self.capture)

    @property
    def entries(self) -> tuple[Scene, ...]:
        return tuple(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[Scene]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def reset(self, scene: Scene) -> None:
        """Start a new history whose only entry is ``scene``."""
        self._debouncer.cancel()
        self._entries = [scene]
        self._index = 0

    def capture(self, scene: Scene) -> bool:
        """Append a scene immediately.

        Returns:
            True if an entry was added.
        """
        if self._restoring:
            return False
        if self.current == scene:
            return False

        del self._entries[self._index + 1 :]
        self._entries.append(scene)
        if len(self._entries) > self.max_size:
            del self._entries[0]
        self._index = len(self._entries) - 1
        LOGGER.debug("Captured history entry %d/%d", self._index + 1, self.max_size)
        return True

    def notify_change(self, scene: Scene, now: float) -> None:
        """Schedule a capture of ``scene`` after the debounce window."""
        if self._restoring:
            return
        self._debouncer.notify(scene, now)

    def poll(self, now: float) -> bool:
        return self._debouncer.poll(now)

    def flush(self) -> bool:
        return self._debouncer.flush()

    @contextmanager
    def restoring(self):
        """Suppress captures while a restored scene is being applied."""
        previous = self._restoring
        self._restoring = True
        try:
            yield
        finally:
            self._restoring = previous

    def _move_to(self, index: int) -> Scene:
        self._index = index
        target = self._entries[index]
        if self.on_restore is not None:
            with self.restoring():
                self.on_restore(target)
        return target

    def undo(self) -> Optional[Scene]:
        """Step back one entry.

        A pending change is captured first so that redo can return to it.

        Returns:
            The restored scene, or None when there is nothing to undo.
        """
        self.flush()
        if not self.can_undo:
            return None
        return self._move_to(self._index - 1)

    def redo(self) -> Optional[Scene]:
        """Step forward one entry, or return None when there is nothing to redo."""
        self.flush()
        if not self.can_redo:
            return None
        return self._move_to(self._index + 1)
