"""Resolution engine types."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from helper_cache.types import CallStyle, InvocationStatus


@dataclass
class PendingInvocation:
    """One async helper call observed during a render pass.

    The real function is called with ``args``/``kwargs`` during resolution
    and its result replaces ``token`` in the rendered text.
    """

    token: str
    name: str
    args: tuple[Any, ...]
    fn: Callable[..., Any]
    kwargs: dict[str, Any] = field(default_factory=dict)
    style: CallStyle = CallStyle.CALLBACK
    status: InvocationStatus = InvocationStatus.PENDING
