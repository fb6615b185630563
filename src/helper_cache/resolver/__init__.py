"""Deferred resolution of async helpers."""

from .engine import DoneCallback, ResolutionEngine
from .tokens import TokenFactory, find_tokens, generate_token
from .types import PendingInvocation
from .waitlist import Waitlist, get_current_waitlist, render_cycle
from .wrapper import build_wrapper, detect_call_style

__all__ = [
    # Engine
    "ResolutionEngine",
    "DoneCallback",
    # Per-cycle state
    "Waitlist",
    "PendingInvocation",
    "render_cycle",
    "get_current_waitlist",
    # Tokens
    "TokenFactory",
    "generate_token",
    "find_tokens",
    # Wrappers
    "build_wrapper",
    "detect_call_style",
]
