"""
Calibration objective: sum of squared pricing errors against market ZCBs.

    SSE(params) = sum_T ( P_mkt(0,T) - P_model(0,T; params) )^2

over every market maturity except forward-differencing helper points: anything
at or below HELPER_THRESHOLD, plus the points `from_yields` recorded as
helpers (e.g. at a wider `forward_dt`). This module only *evaluates* the
loss; searching for the minimising parameters (Levenberg-Marquardt,
Nelder-Mead, ...) is left to the caller, e.g. `scipy.optimize.minimize(CalibrationObjective(...), x0)`.

Trials are independent: each evaluation builds its own model against the
shared, read-only TermStructure, so a parameter grid can be evaluated
concurrently.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from typing import Callable, Dict, Iterable, Sequence

import numpy as np

from ..rates.base_model import MarketPrices, ShortRateModel, as_term_structure
from ..rates.ho_lee import HoLeeModel
from ..rates.hull_white import HullWhiteModel
from ..rates.term_structure import TermStructure

logger = logging.getLogger(__name__)

# Maturities at or below this are differencing helpers, not quotes.
HELPER_THRESHOLD = 1e-3

ModelFactory = Callable[[Sequence[float]], ShortRateModel]


def _is_helper(ts: TermStructure, T: float) -> bool:
    return T <= HELPER_THRESHOLD + 1e-12 or ts.is_helper(T)


def pricing_errors(
    parameters: Sequence[float],
    market_prices: MarketPrices,
    model_factory: ModelFactory,
) -> Dict[float, float]:
    """Residuals market - model for every evaluated maturity (ascending T)."""
    ts = as_term_structure(market_prices)
    model = model_factory(parameters)
    model.set_term_structure(ts)

    errors: Dict[float, float] = {}
    for T, p_mkt in ts.items():
        if _is_helper(ts, T):
            continue
        errors[T] = p_mkt - model.price_zero_coupon_bond(T)
    return errors


def evaluate(
    parameters: Sequence[float],
    market_prices: MarketPrices,
    model_factory: ModelFactory,
) -> float:
    """Sum of squared errors; what an external optimizer would minimise."""
    resid = np.fromiter(pricing_errors(parameters, market_prices, model_factory).values(), dtype=float)
    sse = float(np.sum(resid * resid))
    logger.debug("SSE(%s) = %.6e over %d maturities", tuple(parameters), sse, resid.size)
    return sse


@dataclass(frozen=True)
class CalibrationObjective:
    """
    Callable wrapper binding market data and a model factory.

    obj = CalibrationObjective(ts, hull_white_factory(r0)); obj((a, sigma)) -> SSE
    """
    market_prices: MarketPrices
    model_factory: ModelFactory

    def __post_init__(self) -> None:
        object.__setattr__(self, "market_prices", as_term_structure(self.market_prices))

    def __call__(self, parameters: Sequence[float]) -> float:
        return evaluate(parameters, self.market_prices, self.model_factory)

    def residuals(self, parameters: Sequence[float]) -> np.ndarray:
        errs = pricing_errors(parameters, self.market_prices, self.model_factory)
        return np.fromiter(errs.values(), dtype=float)


def evaluate_grid(
    objective: Callable[[Sequence[float]], float],
    parameter_sets: Iterable[Sequence[float]],
    max_workers: int | None = None,
) -> np.ndarray:
    """
    Evaluate `objective` on each parameter set concurrently.

    Results are returned in input order. No minimum is selected.
    """
    trials = [tuple(p) for p in parameter_sets]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        values = list(pool.map(objective, trials))
    return np.asarray(values, dtype=float)


# ---- Model factories ---------------------------------------------------------

def hull_white_factory(r0: float) -> ModelFactory:
    """params = (a, sigma)."""
    def build(parameters: Sequence[float]) -> HullWhiteModel:
        a, sigma = parameters
        return HullWhiteModel(r0=r0, a=a, sigma=sigma)
    return build


def ho_lee_factory(r0: float, fitted: bool = False) -> ModelFactory:
    """params = (sigma,)."""
    def build(parameters: Sequence[float]) -> HoLeeModel:
        (sigma,) = parameters
        return HoLeeModel(r0=r0, sigma=sigma, fitted=fitted)
    return build
