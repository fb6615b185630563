"""HelperCache - registry, template engine and resolver wired together.

Example:
    cache = HelperCache()

    @cache.helper
    def link(url, title):
        return f"<a href='{url}'>{title}</a>"

    @cache.async_helper
    async def fetch_title(url):
        ...

    text = await cache.render("{{ link(url, fetch_title(url)) }}", {"url": url})

Sync helpers receive an async helper's placeholder token, not its value, so
they may embed it but must not transform it.
"""

import sys
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, TextIO

from helper_cache.config import HelperCacheConfig, LoggingConfig, load_config
from helper_cache.logging import HelperLogger, LogConfig
from helper_cache.registry import HelperEntry, HelperRegistry, HelperSource
from helper_cache.resolver import DoneCallback, ResolutionEngine, TokenFactory, Waitlist
from helper_cache.template import TemplateEngine


def build_log_config(config: LoggingConfig, output: TextIO | None = None) -> LogConfig:
    """Translate the logging section of a config file into a LogConfig."""
    return LogConfig(
        level=config.level,
        format=config.format,
        show_args=config.options.show_args,
        truncate_at=config.options.truncate_at,
        components={
            "registry": config.components.registry,
            "render": config.components.render,
            "resolve": config.components.resolve,
        },
        output=output or sys.stdout,
    )


class HelperCache:
    """Template helpers, sync and async, behind one object.

    Sync helpers return their value straight into the rendered text. Async
    helpers return a placeholder token during rendering; ``render`` and
    ``resolve`` then run them in call order and substitute the results.
    """

    def __init__(
        self,
        config: HelperCacheConfig | None = None,
        logger: HelperLogger | None = None,
    ):
        """Initialize helper cache.

        Args:
            config: Configuration (defaults to HelperCacheConfig())
            logger: Optional logger. Without one, nothing is logged.
        """
        self.config = config or HelperCacheConfig()
        self.logger = logger
        self.resolver = ResolutionEngine(TokenFactory(self.config.tokens), logger)
        self.registry = HelperRegistry(self.resolver, self.config.registry, logger)
        self.template_engine = TemplateEngine(
            strict_undefined=self.config.template.strict_undefined
        )
        self._render_log = logger.render() if logger else None

    @classmethod
    def from_config(
        cls,
        path: str | Path | None = None,
        log_output: TextIO | None = None,
    ) -> "HelperCache":
        """Build a HelperCache from a YAML config file.

        Args:
            path: Config file path (see ConfigLoader.load for the search order)
            log_output: Output stream for logs (default: sys.stdout)
        """
        config = load_config(path)
        logger = HelperLogger(build_log_config(config.logging, log_output))
        return cls(config, logger)

    # Registration

    def register_sync(self, name: str, fn: Callable[..., Any]) -> HelperEntry:
        return self.registry.register_sync(name, fn)

    def register_async(self, name: str, fn: Callable[..., Any]) -> HelperEntry:
        return self.registry.register_async(name, fn)

    def register_batch(self, helpers: HelperSource, is_async: bool = False) -> list[str]:
        return self.registry.register_batch(helpers, is_async)

    def register_group(
        self, prefix: str, helpers: HelperSource, is_async: bool = False
    ) -> list[str]:
        return self.registry.register_group(prefix, helpers, is_async)

    def lookup(self, name: str | None = None) -> Any:
        return self.registry.lookup(name)

    def get_async_helper(self, name: str) -> Callable[..., Any] | None:
        return self.registry.get_async_helper(name)

    def is_async(self, name: str) -> bool:
        return self.registry.is_async(name)

    def unregister(self, name: str) -> bool:
        return self.registry.unregister(name)

    def helper(self, name_or_fn: Any = None, fn: Callable[..., Any] | None = None) -> Any:
        """Register or look up sync helpers.

        Forms:
            helper()                  -> read-only view of all helpers
            helper("name")            -> callable registered as "name", a group
                                         mapping, or None
            helper("name", fn)        -> registers fn, returns fn
            helper("ns", {"a": fa})   -> registers "ns.a", returns names
            @helper                   -> registers under fn.__name__
            helper({"a": fa, ...})    -> batch registration, returns names
        """
        return self._dispatch(name_or_fn, fn, is_async=False)

    def async_helper(
        self, name_or_fn: Any = None, fn: Callable[..., Any] | None = None
    ) -> Any:
        """Register or look up async helpers. Same forms as ``helper``."""
        return self._dispatch(name_or_fn, fn, is_async=True)

    def group(self, prefix: str, helpers: HelperSource) -> list[str]:
        return self.registry.register_group(prefix, helpers)

    def async_group(self, prefix: str, helpers: HelperSource) -> list[str]:
        return self.registry.register_group(prefix, helpers, is_async=True)

    def _dispatch(self, name_or_fn: Any, fn: Callable[..., Any] | None, is_async: bool) -> Any:
        if name_or_fn is None and fn is None:
            return self.registry.lookup()

        if isinstance(name_or_fn, str):
            if fn is None:
                return self.registry.lookup(name_or_fn)
            if isinstance(fn, Mapping):
                return self.registry.register_group(name_or_fn, fn, is_async)
            self.registry.register(name_or_fn, fn, is_async)
            return fn

        if fn is None and callable(name_or_fn) and hasattr(name_or_fn, "__name__"):
            self.registry.register(name_or_fn.__name__, name_or_fn, is_async)
            return name_or_fn

        return self.registry.register_batch(name_or_fn, is_async)

    # Rendering

    def cycle(self, waitlist: Waitlist | None = None) -> AbstractContextManager[Waitlist]:
        """Open a render cycle; async helper calls inside it share one Waitlist."""
        return self.resolver.cycle(waitlist)

    async def resolve(
        self,
        text: str,
        done: DoneCallback | None = None,
        waitlist: Waitlist | None = None,
    ) -> str | None:
        """Replace placeholder tokens in text with async helper results.

        See ResolutionEngine.resolve.
        """
        return await self.resolver.resolve(text, done, waitlist=waitlist)

    async def render(
        self,
        template: str,
        data: Mapping[str, Any] | None = None,
        done: DoneCallback | None = None,
    ) -> str | None:
        """Render a template and resolve its async helpers.

        Each call runs in its own cycle, so an async helper may itself call
        ``render`` (e.g. for partials) and gets back fully resolved text.

        Args:
            template: Text with {{ }} expressions
            data: Variables visible to expressions
            done: Optional ``done(error, text)`` callback; errors go to it
                instead of being raised

        Returns:
            Rendered text, or None when an error went to ``done``
        """
        with self.cycle() as waitlist:
            try:
                result = self.template_engine.render(template, data, self.registry.lookup())
            except Exception as exc:
                if self._render_log:
                    self._render_log.failed(waitlist.cycle_id, exc)
                waitlist.clear()
                if done is None:
                    raise
                done(exc, None)
                return None
            if self._render_log:
                self._render_log.completed(
                    waitlist.cycle_id, len(result.expressions), len(waitlist)
                )

        return await self.resolve(result.text, done, waitlist=waitlist)

    def __contains__(self, name: object) -> bool:
        return name in self.registry

    def __len__(self) -> int:
        return len(self.registry)
