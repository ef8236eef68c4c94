"""
Hull-White 1F model fitted to the market term structure:

    dr_t = (theta(t) - a * r_t) dt + sigma * dW_t

Zero-coupon price at t = 0:

    P(0,T) = A(0,T) * exp(-B(0,T) * r0),

with
    B(0,T)    = (1 - e^{-a T}) / a,
    ln A(0,T) = ln P_mkt(0,T) + B(0,T) f(0,0) - (sigma^2 / (4a)) (1 - e^{-2aT}) B(0,T)^2.

P_mkt(0,T) must be an exact TermStructure entry (no interpolation), so the
model reprices the curve at its grid points up to the convexity term and
the finite-difference error in f(0,0).
"""

from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from ..core.utils import require_finite, require_non_negative, require_positive
from .base_model import ShortRateModel
from .term_structure import TermStructure


@dataclass(frozen=True)
class HullWhiteModel(ShortRateModel):
    r0: float
    a: float
    sigma: float
    term_structure: TermStructure | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "r0", require_finite("HullWhiteModel: r0", self.r0))
        object.__setattr__(self, "a", require_positive("HullWhiteModel: a", self.a))
        object.__setattr__(self, "sigma", require_non_negative("HullWhiteModel: sigma", self.sigma))

    # ---- affine building blocks ---------------------------------------------

    def B(self, T: float) -> float:
        """Sensitivity of ln P(0,T) to the short rate."""
        a = self.a
        return float((1.0 - np.exp(-a * T)) / a)

    def instantaneous_forward_rate(self, t: float) -> float:
        """Market f(0,t) by finite difference on the attached curve."""
        return self._require_term_structure().instantaneous_forward(t)

    def convexity_term(self, T: float) -> float:
        """(sigma^2 / (4a)) (1 - e^{-2aT}) B(0,T)^2; increasing in sigma."""
        a, sig = self.a, self.sigma
        b = self.B(T)
        return float((sig * sig) / (4.0 * a) * (1.0 - np.exp(-2.0 * a * T)) * b * b)

    def log_A(self, T: float) -> float:
        p_mkt = self._market_price(T)
        f0 = self.instantaneous_forward_rate(0.0)
        return float(np.log(p_mkt) + self.B(T) * f0 - self.convexity_term(T))

    # ---- bond price ----------------------------------------------------------

    def _price(self, T: float) -> float:
        return float(np.exp(self.log_A(T) - self.B(T) * self.r0))
