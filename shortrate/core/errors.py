"""
Exception taxonomy for the short-rate library.

Every error derives from ShortRateError *and* from the builtin it refines,
so callers may catch either `NotFoundError` or a plain `LookupError`.
Pricing never returns sentinel values: a price is a float in (0, 1] or an
exception is raised.
"""

from __future__ import annotations


class ShortRateError(Exception):
    """Base class for all library errors."""


class NotFoundError(ShortRateError, LookupError):
    """Exact term-structure lookup failed (no entry at that maturity)."""


class MissingMarketDataError(NotFoundError):
    """A pricing formula needed market data that is not available."""


class NoClosedFormError(ShortRateError, NotImplementedError):
    """The model has no closed-form zero-coupon bond price."""


class InvalidParameterError(ShortRateError, ValueError):
    """Non-physical model parameter or market point."""
