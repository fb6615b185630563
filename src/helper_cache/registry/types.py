"""Helper registry types."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from helper_cache.types import HelperKind


@dataclass(frozen=True)
class HelperEntry:
    """A registered helper.

    ``sync_fn`` is what the template engine calls. For async helpers it is the
    placeholder-returning wrapper and ``real_fn`` holds the actual
    implementation; sync helpers never carry a ``real_fn``.
    """

    name: str
    sync_fn: Callable[..., Any]
    is_async: bool = False
    real_fn: Callable[..., Any] | None = None

    def __post_init__(self) -> None:
        """Enforce the async/real_fn pairing."""
        if self.is_async and self.real_fn is None:
            raise ValueError(f"Async helper '{self.name}' requires a real implementation")
        if not self.is_async and self.real_fn is not None:
            raise ValueError(f"Sync helper '{self.name}' must not carry a real implementation")

    @property
    def kind(self) -> HelperKind:
        return HelperKind.ASYNC if self.is_async else HelperKind.SYNC
