"""
Lognormal short-rate models without a closed-form bond price.

  Black-Derman-Toy:  d ln r_t = (theta(t) - (sigma'(t)/sigma(t)) ln r_t) dt + sigma(t) dW_t
  Black-Karasinski:  d ln r_t = (theta(t) - a ln r_t) dt + sigma dW_t

Both need a lattice (binomial tree for BDT, trinomial tree for BK) with
theta(t) solved node by node to match the curve. No lattice is provided here,
so pricing raises NoClosedFormError instead of returning an approximation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..core.errors import NoClosedFormError
from ..core.utils import require_finite, require_non_negative, require_positive
from .base_model import ShortRateModel
from .term_structure import TermStructure

logger = logging.getLogger(__name__)


class _LatticeOnlyModel(ShortRateModel):
    has_closed_form = False
    lattice: str = "tree"

    def price_zero_coupon_bond(self, T: float) -> float:
        name = type(self).__name__
        logger.warning("%s requires a numerical implementation (%s)", name, self.lattice)
        raise NoClosedFormError(
            f"Pricing not implemented for {name} at T={T}: use a {self.lattice}"
        )

    def _price(self, T: float) -> float:
        return self.price_zero_coupon_bond(T)


@dataclass(frozen=True)
class BDTModel(_LatticeOnlyModel):
    r0: float
    sigma: float
    term_structure: TermStructure | None = field(default=None, repr=False, compare=False)

    lattice = "binomial tree"

    def __post_init__(self) -> None:
        object.__setattr__(self, "r0", require_finite("BDTModel: r0", self.r0))
        object.__setattr__(self, "sigma", require_non_negative("BDTModel: sigma", self.sigma))


@dataclass(frozen=True)
class BlackKarasinskiModel(_LatticeOnlyModel):
    r0: float
    a: float
    sigma: float
    term_structure: TermStructure | None = field(default=None, repr=False, compare=False)

    lattice = "trinomial tree"

    def __post_init__(self) -> None:
        object.__setattr__(self, "r0", require_finite("BlackKarasinskiModel: r0", self.r0))
        object.__setattr__(self, "a", require_positive("BlackKarasinskiModel: a", self.a))
        object.__setattr__(self, "sigma", require_non_negative("BlackKarasinskiModel: sigma", self.sigma))
