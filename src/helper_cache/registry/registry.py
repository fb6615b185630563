"""Helper Registry - name to callable mapping consumed by the template engine."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from helper_cache.config.models import RegistryConfig
from helper_cache.errors import HelperCacheError, create_error

from .types import HelperEntry

if TYPE_CHECKING:
    from helper_cache.logging import HelperLogger
    from helper_cache.resolver import ResolutionEngine

# A batch source: mapping, zero-argument factory returning one, or a nested sequence
HelperSource = Mapping[str, Any] | Callable[[], Any] | Iterable[Any]


def is_valid_name(name: object) -> bool:
    """Check that name is a non-empty, dot-separated run of identifiers."""
    if not isinstance(name, str) or not name:
        return False
    return all(part.isidentifier() for part in name.split("."))


class HelperRegistry:
    """Registry of template helpers.

    Sync helpers are stored as-is. Async helpers are stored behind a
    synchronous wrapper built by the ResolutionEngine, so the template engine
    only ever sees plain callables.
    """

    def __init__(
        self,
        resolver: ResolutionEngine,
        config: RegistryConfig | None = None,
        logger: HelperLogger | None = None,
    ):
        """Initialize helper registry.

        Args:
            resolver: Engine that wraps async helpers
            config: Registry configuration
            logger: Optional logger
        """
        self._resolver = resolver
        self._config = config or RegistryConfig()
        self._log = logger.registry() if logger else None
        self._entries: dict[str, HelperEntry] = {}
        self._callables: dict[str, Callable[..., Any]] = {}
        self._view = MappingProxyType(self._callables)

    def register_sync(self, name: str, fn: Callable[..., Any]) -> HelperEntry:
        """Register a helper that returns its value immediately.

        Args:
            name: Helper name, e.g. "upper" or "mdu.heading"
            fn: Helper function

        Returns:
            The stored HelperEntry

        Raises:
            HelperCacheError(INVALID_ARGUMENT): If name or fn is malformed
        """
        self._validate(name, fn)
        return self._store(HelperEntry(name=name, sync_fn=fn))

    def register_async(self, name: str, fn: Callable[..., Any]) -> HelperEntry:
        """Register a helper that produces its value later.

        ``fn`` is either a coroutine function or a function whose last
        positional parameter is a ``callback(error, result)``. The template
        engine gets a wrapper that returns a placeholder token instead.

        Raises:
            HelperCacheError(INVALID_ARGUMENT): If name or fn is malformed
        """
        self._validate(name, fn)
        wrapper = self._resolver.wrap(name, fn)
        return self._store(HelperEntry(name=name, sync_fn=wrapper, is_async=True, real_fn=fn))

    def register(self, name: str, fn: Callable[..., Any], is_async: bool = False) -> HelperEntry:
        """Dispatch to register_async or register_sync."""
        if is_async:
            return self.register_async(name, fn)
        return self.register_sync(name, fn)

    def register_batch(self, helpers: HelperSource, is_async: bool = False) -> list[str]:
        """Register many helpers at once.

        Accepts a mapping of name to function, a zero-argument function
        returning such a mapping (called once, immediately), or a list/tuple
        mixing those and further lists, flattened depth-first. A mapping value
        that is itself a mapping registers its entries under "<key>.<name>".

        Returns:
            Registered names, in registration order

        Raises:
            HelperCacheError(INVALID_ARGUMENT): On a leaf that is neither
                callable nor a nested collection
        """
        registered: list[str] = []
        self._visit(helpers, is_async, registered, prefix=None)
        return registered

    def register_group(
        self, prefix: str, helpers: HelperSource, is_async: bool = False
    ) -> list[str]:
        """Register helpers namespaced under ``prefix``.

        Templates call them as ``prefix.name(...)``.
        """
        if not is_valid_name(prefix):
            raise self._invalid(prefix, f"group prefix must be identifier-like, got {prefix!r}")
        registered: list[str] = []
        self._visit(helpers, is_async, registered, prefix=prefix)
        return registered

    def lookup(self, name: str | None = None) -> Any:
        """Get the callable for ``name``.

        With no name, return a live read-only view of the whole mapping,
        suitable as the template engine's helper set. A group prefix returns
        a read-only mapping of its members keyed by the rest of their names.

        Returns:
            Callable, group mapping, None if ``name`` is not registered, or
            the mapping view
        """
        if name is None:
            return self._view
        if name in self._callables:
            return self._callables[name]
        prefix = name + "."
        members = {
            key[len(prefix):]: fn for key, fn in self._callables.items() if key.startswith(prefix)
        }
        return MappingProxyType(members) if members else None

    def get_entry(self, name: str) -> HelperEntry | None:
        return self._entries.get(name)

    def get_async_helper(self, name: str) -> Callable[..., Any] | None:
        """Return the real implementation of async helper ``name``, if any."""
        entry = self._entries.get(name)
        if entry is None or not entry.is_async:
            return None
        return entry.real_fn

    def is_async(self, name: str) -> bool:
        entry = self._entries.get(name)
        return bool(entry and entry.is_async)

    def unregister(self, name: str) -> bool:
        """Remove a helper. Returns False if it was not registered."""
        if name not in self._entries:
            return False
        del self._entries[name]
        del self._callables[name]
        return True

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _store(self, entry: HelperEntry) -> HelperEntry:
        previous = self._entries.get(entry.name)
        self._entries[entry.name] = entry
        self._callables[entry.name] = entry.sync_fn

        if self._log:
            if previous is not None and self._config.warn_on_override:
                self._log.overridden(entry.name, previous.kind.value, entry.kind.value)
            self._log.registered(entry.name, entry.kind.value)
        return entry

    def _validate(self, name: Any, fn: Any) -> None:
        if not is_valid_name(name):
            raise self._invalid(name, f"helper name must be identifier-like, got {name!r}")
        if not callable(fn):
            raise self._invalid(
                name, f"helper '{name}' must be callable, got {type(fn).__name__}"
            )

    def _invalid(self, name: Any, reason: str) -> HelperCacheError:
        if self._log:
            self._log.rejected(name, reason)
        return create_error(
            "INVALID_ARGUMENT",
            reason=reason,
            helper_name=name if isinstance(name, str) else None,
        )

    def _visit(
        self,
        value: Any,
        is_async: bool,
        registered: list[str],
        prefix: str | None,
    ) -> None:
        """Walk a batch source depth-first, registering each leaf."""
        if isinstance(value, Mapping):
            for key, item in value.items():
                if not isinstance(key, str):
                    raise self._invalid(key, f"helper name must be a string, got {key!r}")
                name = key if prefix is None else f"{prefix}.{key}"
                if isinstance(item, Mapping):
                    self._visit(item, is_async, registered, prefix=name)
                elif callable(item):
                    registered.append(self.register(name, item, is_async).name)
                else:
                    raise self._invalid(
                        name,
                        f"helper '{name}' must be callable or a mapping of helpers, "
                        f"got {type(item).__name__}",
                    )
        elif isinstance(value, (list, tuple)):
            for item in value:
                self._visit(item, is_async, registered, prefix)
        elif callable(value):
            produced = value()
            if not isinstance(produced, (Mapping, list, tuple)):
                raise self._invalid(
                    getattr(value, "__name__", None),
                    f"helper factory must return a mapping, got {type(produced).__name__}",
                )
            self._visit(produced, is_async, registered, prefix)
        elif isinstance(value, str):
            raise self._invalid(
                None, f"cannot load helpers from {value!r}; pass functions, not paths"
            )
        else:
            raise self._invalid(
                None, f"expected a mapping, function or list of helpers, got {type(value).__name__}"
            )
