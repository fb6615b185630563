"""Synchronous stand-ins for async helpers."""

import functools
import inspect
from collections.abc import Callable
from typing import Any

from helper_cache.types import CallStyle

# record(name, fn, style, args, kwargs) -> token
Recorder = Callable[[str, Callable[..., Any], CallStyle, tuple[Any, ...], dict[str, Any]], str]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def detect_call_style(fn: Callable[..., Any]) -> CallStyle:
    """Coroutine functions are awaited; everything else gets a completion callback."""
    if inspect.iscoroutinefunction(fn):
        return CallStyle.COROUTINE
    call = getattr(fn, "__call__", None)
    if not inspect.isfunction(fn) and inspect.iscoroutinefunction(call):
        return CallStyle.COROUTINE
    return CallStyle.CALLBACK


def wrapper_signature(fn: Callable[..., Any], style: CallStyle) -> inspect.Signature | None:
    """Signature the template engine sees: the real one minus the callback.

    Returns None when the real function has no introspectable signature.
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    params = list(sig.parameters.values())
    if style is CallStyle.CALLBACK:
        positional = [i for i, p in enumerate(params) if p.kind in _POSITIONAL]
        if positional:
            del params[positional[-1]]
    return sig.replace(parameters=params, return_annotation=str)


def build_wrapper(name: str, fn: Callable[..., Any], record: Recorder) -> Callable[..., str]:
    """Build the synchronous function registered in place of an async helper.

    Calling it never runs ``fn``; it records the call and returns the token
    that will later be replaced by ``fn``'s result.
    """
    style = detect_call_style(fn)

    def wrapper(*args: Any, **kwargs: Any) -> str:
        return record(name, fn, style, args, kwargs)

    functools.update_wrapper(wrapper, fn)
    if not hasattr(fn, "__name__"):
        # Callable instances and partials
        wrapper.__name__ = name
    sig = wrapper_signature(fn, style)
    if sig is not None:
        wrapper.__signature__ = sig  # type: ignore[attr-defined]

    wrapper.is_async = True  # type: ignore[attr-defined]
    wrapper.helper_name = name  # type: ignore[attr-defined]
    wrapper.call_style = style  # type: ignore[attr-defined]
    return wrapper
