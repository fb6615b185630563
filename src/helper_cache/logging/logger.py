"""helper-cache logger - Component-scoped colored logging for render/resolve cycles."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from helper_cache.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from helper_cache.types import LogFormat, LogLevel


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_args: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stdout)

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {
                "registry": True,
                "render": True,
                "resolve": True,
            }


class HelperLogger:
    """Main logger facade. Creates component-specific loggers."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()
        self._level_order = {
            LogLevel.DEBUG: 0,
            LogLevel.INFO: 1,
            LogLevel.WARN: 2,
            LogLevel.ERROR: 3,
        }

    def registry(self) -> "RegistryLogger":
        """Get a logger for registration events."""
        return RegistryLogger(self)

    def render(self) -> "RenderLogger":
        """Get a logger for render passes."""
        return RenderLogger(self)

    def resolve(self, cycle_id: str) -> "ResolveLogger":
        """Get a logger scoped to one resolution cycle.

        Args:
            cycle_id: Identifier of the Waitlist being drained

        Returns:
            ResolveLogger instance
        """
        return ResolveLogger(self, cycle_id)

    def configure(self, config: LogConfig) -> None:
        """Update configuration.

        Args:
            config: New logger configuration
        """
        self.config = config

    def truncate(self, value: Any) -> str:
        """Render a value for log output, cut at the configured length."""
        text = str(value)
        if len(text) > self.config.truncate_at:
            text = text[: self.config.truncate_at] + "..."
        return text

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (registry, render, resolve)
            message: Log message
            context: Additional context data
        """
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "registry": GREEN,
            "render": MAGENTA,
            "resolve": ORANGE,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_args:
            output += f" {LIGHT_BLUE}{self.truncate(context)}{RESET}"

        print(output, file=self.config.output)


class RegistryLogger:
    """Logger for helper registration events."""

    def __init__(self, parent: HelperLogger):
        self.parent = parent

    def registered(self, name: str, kind: str) -> None:
        """Log a successful registration.

        Args:
            name: Helper name
            kind: "sync" or "async"
        """
        context = {"event": "helper_registered", "helper_name": name, "kind": kind}
        self.parent._log(LogLevel.DEBUG, "registry", f"Registered {kind} helper '{name}'", context)

    def overridden(self, name: str, previous_kind: str, kind: str) -> None:
        """Log that a registration replaced an existing helper."""
        context = {
            "event": "helper_overridden",
            "helper_name": name,
            "previous_kind": previous_kind,
            "kind": kind,
        }
        message = f"Helper '{name}' overridden ({previous_kind} -> {kind})"
        self.parent._log(LogLevel.WARN, "registry", message, context)

    def rejected(self, name: Any, reason: str) -> None:
        """Log a malformed registration call."""
        context = {"event": "helper_rejected", "helper_name": str(name), "reason": reason}
        message = f"Rejected helper registration: {reason}"
        self.parent._log(LogLevel.ERROR, "registry", message, context)


class RenderLogger:
    """Logger for synchronous render passes."""

    def __init__(self, parent: HelperLogger):
        self.parent = parent

    def completed(self, cycle_id: str, expressions: int, pending: int) -> None:
        """Log the end of a render pass.

        Args:
            cycle_id: Render cycle identifier
            expressions: Number of {{ }} expressions rendered
            pending: Number of async invocations recorded
        """
        context = {
            "event": "render_completed",
            "cycle_id": cycle_id,
            "expressions": expressions,
            "pending": pending,
        }
        message = f"Rendered {expressions} expressions ({pending} async pending)"
        self.parent._log(LogLevel.DEBUG, "render", message, context)

    def failed(self, cycle_id: str, error: Exception) -> None:
        """Log a render pass that raised."""
        context = {
            "event": "render_failed",
            "cycle_id": cycle_id,
            "error": str(error),
            "error_type": type(error).__name__,
        }
        self.parent._log(LogLevel.ERROR, "render", f"Render failed: {error}", context)


class ResolveLogger:
    """Logger for one resolution cycle."""

    def __init__(self, parent: HelperLogger, cycle_id: str):
        """Initialize resolve logger.

        Args:
            parent: Parent HelperLogger instance
            cycle_id: Identifier of the Waitlist being drained
        """
        self.parent = parent
        self.cycle_id = cycle_id

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        context: dict[str, Any] = {"cycle_id": self.cycle_id, "event": event}
        context.update(extra)
        return context

    def started(self, pending: int) -> None:
        """Log the start of a drain."""
        message = f"Resolving {pending} async helper calls"
        self.parent._log(
            LogLevel.DEBUG, "resolve", message, self._context("resolve_started", pending=pending)
        )

    def skipped(self, name: str, token: str) -> None:
        """Log an invocation whose token is not in the text."""
        message = f"Skipping '{name}': placeholder not in rendered text"
        self.parent._log(
            LogLevel.DEBUG,
            "resolve",
            message,
            self._context("invocation_skipped", helper_name=name, token=token),
        )

    def invoking(self, name: str, args: tuple[Any, ...]) -> None:
        """Log a real helper call."""
        context = self._context("invocation_started", helper_name=name)
        if self.parent.config.show_args:
            context["args"] = self.parent.truncate(args)
        self.parent._log(LogLevel.DEBUG, "resolve", f"Calling async helper '{name}'", context)

    def completed(self, name: str, duration_ms: int) -> None:
        """Log a successful helper result."""
        duration_s = duration_ms / 1000
        message = f"Async helper '{name}' completed ({duration_s:.2f}s) ✓"
        self.parent._log(
            LogLevel.DEBUG,
            "resolve",
            message,
            self._context("invocation_completed", helper_name=name, duration_ms=duration_ms),
        )

    def failed(self, name: str, error: BaseException, duration_ms: int) -> None:
        """Log a helper error. The cycle aborts after this."""
        duration_s = duration_ms / 1000
        message = f"Async helper '{name}' failed ({duration_s:.2f}s): {error}"
        self.parent._log(
            LogLevel.ERROR,
            "resolve",
            message,
            self._context(
                "invocation_failed",
                helper_name=name,
                duration_ms=duration_ms,
                error=str(error),
                error_type=type(error).__name__,
            ),
        )

    def duplicate_callback(self, name: str) -> None:
        """Log a completion callback fired more than once."""
        message = f"Async helper '{name}' called back more than once; extra result ignored"
        self.parent._log(
            LogLevel.WARN,
            "resolve",
            message,
            self._context("duplicate_callback", helper_name=name),
        )

    def finished(self, resolved: int, skipped: int, duration_ms: int) -> None:
        """Log the end of a successful drain."""
        duration_s = duration_ms / 1000
        message = f"Resolved {resolved} async helpers, skipped {skipped} ({duration_s:.2f}s) ✓"
        self.parent._log(
            LogLevel.INFO,
            "resolve",
            message,
            self._context(
                "resolve_completed",
                resolved=resolved,
                skipped=skipped,
                duration_ms=duration_ms,
            ),
        )

    def aborted(self, remaining: int) -> None:
        """Log that queued invocations were discarded after an error."""
        message = f"Resolution aborted, {remaining} queued calls discarded"
        self.parent._log(
            LogLevel.WARN,
            "resolve",
            message,
            self._context("resolve_aborted", remaining=remaining),
        )
