"""
Plot helpers (PNG) for market vs model discount curves and SSE grids.

Each function saves ONE figure per call and closes it (no memory leak).
"""

from __future__ import annotations
import os
from typing import Dict, Sequence

import numpy as np
import matplotlib.pyplot as plt


def _ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def save_price_curve_plot(
    maturities: np.ndarray,
    market: np.ndarray,
    model_prices: Dict[str, np.ndarray],
    outpath: str,
    title: str = "Zero-coupon prices P(0,T)",
):
    _ensure_dir(os.path.dirname(outpath))
    plt.figure(figsize=(8, 4.5))
    plt.plot(maturities, market, "o", label="Market")
    for label, prices in model_prices.items():
        plt.plot(maturities, prices, "-", label=label)
    plt.xlabel("Maturity (years)")
    plt.ylabel("P(0,T)")
    plt.title(title)
    plt.legend()
    plt.tight_layout()
    plt.savefig(outpath, dpi=150)
    plt.close()


def save_sse_grid_plot(
    a_values: Sequence[float],
    sigma_values: Sequence[float],
    sse: np.ndarray,
    outpath: str,
    title: str = "Hull-White SSE over (a, sigma)",
):
    """sse has shape (len(a_values), len(sigma_values))."""
    _ensure_dir(os.path.dirname(outpath))
    plt.figure(figsize=(7, 5))
    plt.imshow(np.log10(np.maximum(sse, 1e-300)), origin="lower", aspect="auto", cmap="viridis")
    plt.colorbar(label="log10 SSE")
    plt.xticks(range(len(sigma_values)), [f"{s:g}" for s in sigma_values])
    plt.yticks(range(len(a_values)), [f"{a:g}" for a in a_values])
    plt.xlabel("sigma")
    plt.ylabel("a")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath, dpi=150)
    plt.close()
