"""Per-call cancellation and deadline handling for store operations."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from app.errors import OperationCancelledError


@dataclass
class OperationContext:
    """Carries a cancellation flag and an optional deadline for one operation.

    The deadline is expressed on the ``time.monotonic()`` clock. A context
    without a deadline only aborts when ``cancel()`` is called.
    """

    deadline: float | None = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def background(cls) -> OperationContext:
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> OperationContext:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left until the deadline, ``None`` when there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise ``OperationCancelledError`` if the operation must not proceed."""
        if self.cancelled:
            raise OperationCancelledError("Operation cancelled")
        if self.expired:
            raise OperationCancelledError("Operation deadline exceeded")
