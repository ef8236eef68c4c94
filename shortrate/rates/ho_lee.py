"""
Ho-Lee model:  dr_t = theta(t) dt + sigma dW_t

At t = 0, P(0,T) = A(0,T) * exp(-B(0,T) * r0) with B(0,T) = T.

Two pricing modes:

- unfitted (default): the dynamics-only formula

      P(0,T) = exp(-r0 T + 0.5 sigma^2 T^2)

  It ignores the market curve, so its output does NOT reprice the attached
  TermStructure. Calibrating it against market prices measures how far the
  raw dynamics are from the curve.

- fitted: theta(t) chosen to match the curve. With
  ln A(0,T) = ln P_mkt(0,T) + T f(0,0) the price is

      P(0,T) = P_mkt(0,T) * exp(T (f(0,0) - r0))

  which needs an exact TermStructure entry at T.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math

from ..core.utils import require_finite, require_non_negative
from .base_model import ShortRateModel
from .term_structure import TermStructure


@dataclass(frozen=True)
class HoLeeModel(ShortRateModel):
    r0: float
    sigma: float
    fitted: bool = False
    term_structure: TermStructure | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "r0", require_finite("HoLeeModel: r0", self.r0))
        object.__setattr__(self, "sigma", require_non_negative("HoLeeModel: sigma", self.sigma))

    def _price(self, T: float) -> float:
        if self.fitted:
            p_mkt = self._market_price(T)
            f0 = self._require_term_structure().instantaneous_forward(0.0)
            return p_mkt * math.exp(T * (f0 - self.r0))
        return math.exp(-self.r0 * T + 0.5 * self.sigma * self.sigma * T * T)
