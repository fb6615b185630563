"""Per-cycle record of async helper invocations awaiting execution.

Each render/resolve cycle owns its own Waitlist. The active one is tracked in
a ContextVar so that wrappers called by the template engine append to the
cycle that is rendering right now, while other threads, asyncio tasks and
nested partial renders see their own.
"""

from __future__ import annotations

import secrets
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from .types import PendingInvocation


class Waitlist:
    """FIFO queue of PendingInvocations for one render cycle.

    Rendering only appends; resolution only drains.
    """

    __slots__ = ("cycle_id", "_pending")

    def __init__(self, cycle_id: str | None = None):
        self.cycle_id = cycle_id or secrets.token_hex(4)
        self._pending: deque[PendingInvocation] = deque()

    def append(self, invocation: PendingInvocation) -> None:
        self._pending.append(invocation)

    def drain(self) -> Iterator[PendingInvocation]:
        """Yield and remove invocations oldest first.

        Entries appended while draining are yielded too. Stopping the
        iteration early leaves the rest queued; call clear() to discard them.
        """
        while self._pending:
            yield self._pending.popleft()

    def clear(self) -> int:
        """Discard every queued invocation, returning how many were dropped."""
        dropped = len(self._pending)
        self._pending.clear()
        return dropped

    def tokens(self) -> list[str]:
        return [inv.token for inv in self._pending]

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[PendingInvocation]:
        return iter(list(self._pending))

    def __repr__(self) -> str:
        return f"Waitlist(cycle_id={self.cycle_id!r}, pending={len(self._pending)})"


_current_waitlist: ContextVar[Waitlist | None] = ContextVar(
    "helper_cache_waitlist", default=None
)


def get_current_waitlist() -> Waitlist | None:
    """Return the Waitlist of the render cycle active in this context, if any."""
    return _current_waitlist.get()


@contextmanager
def render_cycle(waitlist: Waitlist | None = None) -> Iterator[Waitlist]:
    """Make a Waitlist current for the duration of a render pass.

    Example:
        with render_cycle() as waitlist:
            text = engine.render(template, data, helpers)
        text = await resolver.resolve(text, waitlist=waitlist)
    """
    waitlist = waitlist if waitlist is not None else Waitlist()
    token = _current_waitlist.set(waitlist)
    try:
        yield waitlist
    finally:
        _current_waitlist.reset(token)
