"""Deferred resolution of async helpers.

The template engine can only call synchronous functions. Async helpers are
therefore registered behind a wrapper that records the call on the current
Waitlist and returns a placeholder token. After the render pass,
``ResolutionEngine.resolve`` runs the recorded calls one at a time, oldest
first, and swaps each token for the real result.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

from helper_cache.errors import get_error_factory
from helper_cache.types import CallStyle, InvocationStatus

from .tokens import TokenFactory
from .types import PendingInvocation
from .waitlist import Waitlist, get_current_waitlist, render_cycle
from .wrapper import build_wrapper

if TYPE_CHECKING:
    from helper_cache.logging import HelperLogger, ResolveLogger

# done(error, result)
DoneCallback = Callable[[BaseException | None, str | None], Any]


class ResolutionEngine:
    """Record async helper calls during rendering and resolve them afterwards."""

    def __init__(
        self,
        tokens: TokenFactory | None = None,
        logger: HelperLogger | None = None,
    ):
        """Initialize resolution engine.

        Args:
            tokens: Token factory (defaults to the standard token format)
            logger: Optional logger
        """
        self.tokens = tokens or TokenFactory()
        self._logger = logger
        self._errors = get_error_factory()
        # Used by wrappers called outside any render cycle
        self._default_waitlist = Waitlist()

    def wrap(self, name: str, fn: Callable[..., Any]) -> Callable[..., str]:
        """Build the synchronous wrapper registered for async helper ``name``."""
        return build_wrapper(name, fn, self._record)

    def cycle(self, waitlist: Waitlist | None = None) -> AbstractContextManager[Waitlist]:
        """Open a render cycle with its own Waitlist."""
        return render_cycle(waitlist)

    def current_waitlist(self) -> Waitlist:
        """Waitlist that wrapper calls made right now would append to."""
        waitlist = get_current_waitlist()
        if waitlist is None:
            return self._default_waitlist
        return waitlist

    def _record(
        self,
        name: str,
        fn: Callable[..., Any],
        style: CallStyle,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> str:
        token = self.tokens.generate()
        self.current_waitlist().append(
            PendingInvocation(
                token=token,
                name=name,
                args=args,
                kwargs=dict(kwargs),
                fn=fn,
                style=style,
            )
        )
        return token

    def _take_waitlist(self, waitlist: Waitlist | None) -> Waitlist:
        if waitlist is not None:
            return waitlist
        current = get_current_waitlist()
        if current is not None:
            return current
        taken = self._default_waitlist
        self._default_waitlist = Waitlist()
        return taken

    async def resolve(
        self,
        text: str,
        done: DoneCallback | None = None,
        *,
        waitlist: Waitlist | None = None,
    ) -> str | None:
        """Replace every placeholder token in ``text`` with its helper's result.

        Invocations run strictly in the order they were recorded, one at a
        time. The first helper error aborts the cycle: the remaining
        invocations are discarded unrun and no partial text is produced.

        An invocation whose token reached a later invocation as an argument
        runs even if the token is gone from ``text``, and the later
        invocation receives its result in place of the token. Sync helpers
        only ever see the token itself; one that transforms its argument
        (upper-casing it, slicing it) destroys the token.

        Args:
            text: Output of the render pass
            done: Optional ``done(error, result)`` callback. When given, errors
                are delivered to it instead of being raised.
            waitlist: Waitlist to drain. Defaults to the current render
                cycle's, or the engine's default one, which is replaced by a
                fresh Waitlist.

        Returns:
            Fully substituted text, or None when an error went to ``done``

        Raises:
            Exception: The helper's original error, when no ``done`` is given
        """
        pending = self._take_waitlist(waitlist)
        try:
            result = await self._drain(text, pending)
        except Exception as exc:
            if done is None:
                raise
            done(exc, None)
            return None

        if done is not None:
            done(None, result)
        return result

    async def _drain(self, text: str, waitlist: Waitlist) -> str:
        log = self._logger.resolve(waitlist.cycle_id) if self._logger else None
        if log:
            log.started(len(waitlist))

        started = time.monotonic()
        resolved = 0
        skipped = 0
        # token -> rendered result, for later invocations that took the token as an argument
        results: dict[str, str] = {}

        for invocation in waitlist.drain():
            if invocation.token not in text and not _passed_to_pending(invocation.token, waitlist):
                invocation.status = InvocationStatus.SKIPPED
                skipped += 1
                if log:
                    log.skipped(invocation.name, invocation.token)
                continue

            if results:
                invocation.args = _substitute(invocation.args, results)
                invocation.kwargs = _substitute(invocation.kwargs, results)

            if log:
                log.invoking(invocation.name, invocation.args)
            call_started = time.monotonic()
            try:
                value = await self._invoke(invocation, log)
            except Exception as exc:
                invocation.status = InvocationStatus.FAILED
                remaining = waitlist.clear()
                if log:
                    log.failed(invocation.name, exc, _elapsed_ms(call_started))
                    log.aborted(remaining)
                raise

            invocation.status = InvocationStatus.COMPLETED
            resolved += 1
            rendered = "" if value is None else str(value)
            results[invocation.token] = rendered
            text = text.replace(invocation.token, rendered)
            if log:
                log.completed(invocation.name, _elapsed_ms(call_started))

        if log:
            log.finished(resolved, skipped, _elapsed_ms(started))
        return text

    async def _invoke(
        self, invocation: PendingInvocation, log: ResolveLogger | None
    ) -> Any:
        """Run one real helper and wait for its result."""
        if invocation.style is CallStyle.COROUTINE:
            return await invocation.fn(*invocation.args, **invocation.kwargs)

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def settle(error: Any, result: Any) -> None:
            if future.done():
                if log:
                    log.duplicate_callback(invocation.name)
                return
            if error is not None:
                future.set_exception(self._errors.from_error_value(error, invocation.name))
            else:
                future.set_result(result)

        def callback(error: Any = None, result: Any = None) -> None:
            # May be called synchronously, later on the loop, or from another thread
            loop.call_soon_threadsafe(settle, error, result)

        invocation.fn(*invocation.args, callback, **invocation.kwargs)
        return await future


def _elapsed_ms(since: float) -> int:
    return int((time.monotonic() - since) * 1000)


def _mentions(value: Any, token: str) -> bool:
    if isinstance(value, str):
        return token in value
    if isinstance(value, (list, tuple)):
        return any(_mentions(item, token) for item in value)
    if isinstance(value, dict):
        return any(_mentions(item, token) for item in value.values())
    return False


def _passed_to_pending(token: str, waitlist: Waitlist) -> bool:
    """Whether a queued invocation received ``token`` as (part of) an argument."""
    return any(
        _mentions(invocation.args, token) or _mentions(invocation.kwargs, token)
        for invocation in waitlist
    )


def _substitute(value: Any, results: dict[str, str]) -> Any:
    """Replace resolved tokens inside string arguments, recursing into containers."""
    if isinstance(value, str):
        for token, rendered in results.items():
            if token in value:
                value = value.replace(token, rendered)
        return value
    if isinstance(value, tuple):
        return tuple(_substitute(item, results) for item in value)
    if isinstance(value, list):
        return [_substitute(item, results) for item in value]
    if isinstance(value, dict):
        return {key: _substitute(item, results) for key, item in value.items()}
    return value
