"""Shared primitives used across the onepace package."""

from onepace.core.cancellation import CancellationToken

__all__ = ["CancellationToken"]
