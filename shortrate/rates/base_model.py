"""
One-factor short-rate model interface.

All models price today's zero-coupon bond P(0,T). Concrete variants are
frozen dataclasses that own r0, their own parameters and an explicit
reference to a read-only TermStructure; nothing is shared through base-class
fields. Analytical variants implement `_price(T)`; stub variants override
`price_zero_coupon_bond` and raise.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import ClassVar, Iterable, Mapping, Union

import numpy as np

from ..core.errors import InvalidParameterError, MissingMarketDataError
from ..core.utils import require_finite
from .term_structure import TermStructure

# Below this maturity discounting is negligible and P(0,T) = 1.
ZERO_MATURITY_EPS = 1e-6

MarketPrices = Union[TermStructure, Mapping[float, float]]


def as_term_structure(market: MarketPrices) -> TermStructure:
    """Accept a TermStructure or a plain {maturity: price} mapping."""
    if isinstance(market, TermStructure):
        return market
    return TermStructure(market)


class ShortRateModel(ABC):
    has_closed_form: ClassVar[bool] = True

    # subclasses declare this as a dataclass field
    term_structure: TermStructure | None

    def set_term_structure(self, structure: MarketPrices) -> None:
        """Attach or replace the market term structure (no arbitrage checks)."""
        object.__setattr__(self, "term_structure", as_term_structure(structure))

    def price_zero_coupon_bond(self, T: float) -> float:
        """P(0,T); exactly 1.0 for |T| below ZERO_MATURITY_EPS."""
        T = require_finite("T", T)
        if T <= -ZERO_MATURITY_EPS:
            raise InvalidParameterError(f"maturity must be >= 0, got {T}")
        if abs(T) < ZERO_MATURITY_EPS:
            return 1.0
        return self._price(T)

    def price_curve(self, maturities: Iterable[float]) -> np.ndarray:
        T_arr = np.asarray(list(maturities), dtype=float)
        return np.array([self.price_zero_coupon_bond(float(T)) for T in T_arr], dtype=float)

    @abstractmethod
    def _price(self, T: float) -> float:
        """Closed-form P(0,T) for T > 0."""
        raise NotImplementedError

    # ---- helpers for arbitrage-free variants --------------------------------

    def _require_term_structure(self) -> TermStructure:
        if self.term_structure is None:
            raise MissingMarketDataError(
                f"{type(self).__name__}: no term structure attached"
            )
        return self.term_structure

    def _market_price(self, T: float) -> float:
        """Exact market P(0,T); no interpolation fallback."""
        ts = self._require_term_structure()
        if T not in ts:
            raise MissingMarketDataError(
                f"{type(self).__name__}: market price for maturity {T} not found"
            )
        return ts.lookup(T)
