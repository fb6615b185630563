"""ANSI color codes for terminal output.

Usage:
    from helper_cache.logging.colors import GREEN, RED, RESET

    print(f"{GREEN}Resolved{RESET}")
"""

RESET = "\033[0m"

# Status colors
GREEN = "\033[38;5;82m"  # Success
RED = "\033[38;5;196m"  # Failure
YELLOW = "\033[38;5;226m"  # Warnings
ORANGE = "\033[38;5;208m"  # Skipped work

# Information colors
LIGHT_BLUE = "\033[38;5;153m"  # Context data
CYAN = "\033[38;5;51m"  # Info
MAGENTA = "\033[38;5;201m"  # Component tags

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
