"""
Market term structure: observed zero-coupon prices P(0, T) keyed by maturity.

We work in *years*. The structure is an ordered mapping

    T_1 < T_2 < ... < T_n  ->  P(0, T_i) in (0, 1]

Lookups are exact (no interpolation). Callers that need an off-grid point,
e.g. T + dt for forward-rate differencing, must add it explicitly; see
`TermStructure.from_yields`, which adds the helper points used by the
Hull-White pricer.

Notes
-----
- Built once by the caller, then shared read-only by every model it is
  attached to. Models never call `set`.
- No-arbitrage (prices non-increasing in T) is reported, not enforced.
"""

from __future__ import annotations
import bisect
import logging
import math
from typing import Iterator, Mapping, Sequence, Tuple

from ..core.errors import InvalidParameterError, NotFoundError
from ..core.utils import is_monotone_decreasing, maturity_key, require_finite

logger = logging.getLogger(__name__)

# Step used for the finite-difference forward rate f(0,t).
FORWARD_DT = 1e-3


class TermStructure:
    """
    Ordered maturity -> market ZCB price mapping.

    Parameters
    ----------
    prices : mapping, optional
        Initial (maturity, price) pairs, each inserted through `set`.
    forward_dt : float
        Step of the finite-difference forward rate.
    """

    def __init__(self, prices: Mapping[float, float] | None = None, forward_dt: float = FORWARD_DT):
        if not forward_dt > 0.0:
            raise InvalidParameterError(f"forward_dt must be > 0, got {forward_dt}")
        self.forward_dt = float(forward_dt)
        self._prices: dict[float, float] = {}
        self._keys: list[float] = []
        self._helpers: set[float] = set()
        if prices:
            for t, p in prices.items():
                self.set(t, p)

    # ---- construction --------------------------------------------------------

    @classmethod
    def from_yields(
        cls,
        yields: Mapping[float, float],
        helper_points: Sequence[float] | None = None,
        anchor: bool = True,
        forward_dt: float = FORWARD_DT,
    ) -> "TermStructure":
        """
        Build from continuously-compounded zero yields: P(0,T) = exp(-y(T) * T).

        `anchor` adds the (0, 1) point. Each helper maturity h (default:
        just `forward_dt`) is priced off the shortest quoted yield,
        P(0,h) = exp(-y_first * h); these points only exist for forward-rate
        differencing (f(0,0) needs P(0) and P(dt)).
        """
        if not yields:
            raise InvalidParameterError("from_yields: at least one yield is required")
        if helper_points is None:
            helper_points = (forward_dt,)
        ts = cls(forward_dt=forward_dt)
        if anchor:
            ts.set(0.0, 1.0)
        for t, y in sorted(yields.items()):
            t = require_finite("maturity", t)
            y = require_finite(f"yield at {t}", y)
            ts.set(t, math.exp(-y * t))
        y_first = yields[min(yields)]
        for h in helper_points:
            key = maturity_key(h)
            if key not in ts._prices:
                ts.set(h, math.exp(-y_first * h))
                ts._helpers.add(key)
        if not ts.is_arbitrage_free():
            logger.warning("Term structure prices increase with maturity (arbitrage not enforced)")
        return ts

    def set(self, maturity: float, price: float) -> None:
        """Insert or overwrite one (maturity, price) pair."""
        t = require_finite("maturity", maturity)
        p = require_finite("price", price)
        if t < 0.0:
            raise InvalidParameterError(f"maturity must be >= 0, got {t}")
        if p <= 0.0:
            raise InvalidParameterError(f"price must be > 0, got {p} at T={t}")
        if p > 1.0:
            logger.warning("Price %.10g at T=%g is above par (negative yield)", p, t)
        key = maturity_key(t)
        if key not in self._prices:
            bisect.insort(self._keys, key)
        # an explicit insert turns a helper into a quote
        self._helpers.discard(key)
        self._prices[key] = p

    # ---- queries -------------------------------------------------------------

    def lookup(self, maturity: float) -> float:
        """Exact-key lookup of P(0, maturity); raises NotFoundError if absent."""
        key = maturity_key(maturity)
        try:
            return self._prices[key]
        except KeyError:
            raise NotFoundError(f"No market price at maturity {maturity!r}") from None

    def last_entry(self) -> Tuple[float, float]:
        """(maturity, price) with the largest maturity."""
        if not self._keys:
            raise NotFoundError("Term structure is empty")
        t = self._keys[-1]
        return t, self._prices[t]

    def maturities(self) -> list[float]:
        return list(self._keys)

    def items(self) -> list[Tuple[float, float]]:
        return [(t, self._prices[t]) for t in self._keys]

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._keys))

    def __contains__(self, maturity: object) -> bool:
        try:
            return maturity_key(maturity) in self._prices  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def __repr__(self) -> str:
        pts = ", ".join(f"{t:g}: {p:.6f}" for t, p in self.items())
        return f"TermStructure({{{pts}}})"

    @property
    def helper_points(self) -> frozenset[float]:
        """Maturities added by `from_yields` for differencing only, not quotes."""
        return frozenset(self._helpers)

    def is_helper(self, maturity: float) -> bool:
        return maturity_key(maturity) in self._helpers

    def is_arbitrage_free(self) -> bool:
        """True if prices are non-increasing in maturity."""
        return is_monotone_decreasing(self._prices[t] for t in self._keys)

    # ---- rates ---------------------------------------------------------------

    def zero_rate(self, maturity: float) -> float:
        """y(0,T) = -ln P(0,T) / T at an exact grid point (0 at T=0)."""
        p = self.lookup(maturity)
        if maturity <= 0.0:
            return 0.0
        return -math.log(p) / maturity

    def instantaneous_forward(self, t: float, dt: float | None = None) -> float:
        """
        Instantaneous forward f(0,t) = -d/dt ln P(0,t), by forward difference:

            f(0,t) ~ -(ln P(t+dt) - ln P(t)) / dt      (dt defaults to forward_dt)

        When P(t) or P(t+dt) is not on the grid we fall back to the average
        rate of the last entry, -ln(P_last) / T_last. That is an
        approximation, not a derivative.
        """
        if dt is None:
            dt = self.forward_dt
        key_t = maturity_key(t)
        key_dt = maturity_key(t + dt)
        if key_t in self._prices and key_dt in self._prices:
            return -(math.log(self._prices[key_dt]) - math.log(self._prices[key_t])) / dt

        t_last, p_last = self.last_entry()
        logger.debug("f(0,%g): grid points missing, falling back to last entry T=%g", t, t_last)
        if t_last <= 0.0:
            raise NotFoundError("Forward-rate fallback needs an entry with positive maturity")
        return -math.log(p_last) / t_last
