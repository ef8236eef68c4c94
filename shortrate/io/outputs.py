"""
CSV/JSON exports for pricing runs.

We keep it dependency-free (no pandas). Tables are written as simple CSVs.
Directory is created if missing.
"""

from __future__ import annotations
import os, csv, json
from typing import Any, Dict, Iterable, List

from ..core.errors import ShortRateError
from ..rates.base_model import ShortRateModel
from ..rates.term_structure import TermStructure

PRICING_HEADERS = ["maturity", "market_price", "model_price", "difference"]


def _ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def write_matrix_csv(filepath: str, headers: List[str], rows: List[List[Any]]) -> None:
    _ensure_dir(os.path.dirname(filepath))
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(headers)
        for row in rows:
            w.writerow(row)


def write_meta_json(filepath: str, meta: Dict[str, Any]) -> None:
    _ensure_dir(os.path.dirname(filepath))
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2, ensure_ascii=False)


# ---------- High-level exports -----------------------------------------------

def pricing_table_rows(ts: TermStructure, model: ShortRateModel, maturities: Iterable[float]) -> List[List[str]]:
    """
    One row per maturity: T, P_mkt, P_model, P_mkt - P_model.
    A pricing failure is written as the error class name in the model column
    so a partially priced table stays readable.
    """
    rows = []
    for T in maturities:
        p_mkt = ts.lookup(T)
        try:
            p_model = model.price_zero_coupon_bond(T)
        except ShortRateError as exc:
            rows.append([f"{T:g}", f"{p_mkt:.12g}", type(exc).__name__, ""])
            continue
        rows.append([f"{T:g}", f"{p_mkt:.12g}", f"{p_model:.12g}", f"{p_mkt - p_model:.12g}"])
    return rows


def export_pricing_table(filepath: str, ts: TermStructure, model: ShortRateModel, maturities: Iterable[float]) -> None:
    write_matrix_csv(filepath, PRICING_HEADERS, pricing_table_rows(ts, model, maturities))
