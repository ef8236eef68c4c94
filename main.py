"""
Main runner: build the market curve, price ZCBs under each short-rate model,
and report calibration errors.

Usage:
  python -m main --config config/settings.yaml --out data/run1 --plots
"""

from __future__ import annotations
import os, argparse, datetime as dt
import itertools
import logging

import numpy as np

from shortrate.core.errors import NoClosedFormError
from shortrate.rates.term_structure import TermStructure, FORWARD_DT
from shortrate.rates.hull_white import HullWhiteModel
from shortrate.rates.ho_lee import HoLeeModel
from shortrate.rates.lattice_stubs import BDTModel, BlackKarasinskiModel
from shortrate.calibration.objective import CalibrationObjective, evaluate_grid, hull_white_factory
from shortrate.io.config import load_settings
from shortrate.io.outputs import export_pricing_table, pricing_table_rows, write_matrix_csv, write_meta_json
from shortrate.io.plots import save_price_curve_plot, save_sse_grid_plot

logger = logging.getLogger("main")


def print_table(title: str, rows: list[list[str]]) -> None:
    print(f"\n{title}")
    print("Maturity | Market Price | Model Price    | Difference")
    print("---------|--------------|----------------|-----------")
    for T, p_mkt, p_model, diff in rows:
        print(f"{T:<8} | {float(p_mkt):<12.6f} | {p_model:<14.14} | {diff}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", type=str, default="config/settings.yaml", help="YAML settings file")
    parser.add_argument("--out", type=str, default=None, help="Output directory (default: no files written)")
    parser.add_argument("--plots", action="store_true", help="Save PNG plots (requires --out or uses data/run_YYYYMMDD_HHMMSS)")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_settings(args.config)

    outdir = args.out
    if outdir is None and args.plots:
        stamp = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
        outdir = os.path.join("data", f"run_{stamp}")
    if outdir is not None:
        os.makedirs(outdir, exist_ok=True)

    # ---- Market data ---------------------------------------------------------
    yields = cfg["market_yields"]
    ts = TermStructure.from_yields(yields, forward_dt=float(cfg.get("forward_dt", FORWARD_DT)))
    quoted = sorted(yields)
    r0 = cfg["r0"]
    print(f"Market curve: {len(quoted)} quotes, r0 = {r0}")
    logger.info("Term structure: %r", ts)

    # ---- Hull-White with initial guesses ------------------------------------
    hw_cfg = cfg["hull_white"]
    a0, s0 = float(hw_cfg["initial"]["a"]), float(hw_cfg["initial"]["sigma"])
    hw = HullWhiteModel(r0=r0, a=a0, sigma=s0)
    hw.set_term_structure(ts)
    print_table(f"Hull-White, initial guess a = {a0}, sigma = {s0}:", pricing_table_rows(ts, hw, quoted))

    # ---- Ho-Lee ---------------------------------------------------------------
    hl_cfg = cfg.get("ho_lee", {"sigma": s0})
    hl = HoLeeModel(r0=r0, sigma=float(hl_cfg["sigma"]), fitted=bool(hl_cfg.get("fitted", False)))
    hl.set_term_structure(ts)
    mode = "fitted" if hl.fitted else "unfitted (dynamics only)"
    print_table(f"Ho-Lee {mode}, sigma = {hl.sigma}:", pricing_table_rows(ts, hl, quoted))

    # ---- Calibration objective (no optimizer here) ---------------------------
    objective = CalibrationObjective(ts, hull_white_factory(r0))
    sse_initial = objective((a0, s0))
    print(f"\nInitial Sum of Squared Errors: {sse_initial:.6e}")

    sse_calibrated = None
    if "calibrated" in hw_cfg:
        a1, s1 = float(hw_cfg["calibrated"]["a"]), float(hw_cfg["calibrated"]["sigma"])
        sse_calibrated = objective((a1, s1))
        print(f"Calibrated guess a = {a1}, sigma = {s1}: SSE = {sse_calibrated:.6e}")

    grid_cfg = hw_cfg.get("grid")
    sse_grid = None
    if grid_cfg:
        a_vals = [float(x) for x in grid_cfg["a"]]
        s_vals = [float(x) for x in grid_cfg["sigma"]]
        trials = list(itertools.product(a_vals, s_vals))
        sse_grid = evaluate_grid(objective, trials).reshape(len(a_vals), len(s_vals))
        print("\nSSE grid (rows: a, columns: sigma)")
        print("a \\ sigma | " + " | ".join(f"{s:<10g}" for s in s_vals))
        for a, row in zip(a_vals, sse_grid):
            print(f"{a:<9g} | " + " | ".join(f"{v:<10.3e}" for v in row))

    # ---- Lattice-only models -------------------------------------------------
    stubs_cfg = cfg.get("stubs", {})
    stubs = [
        BDTModel(r0=r0, **stubs_cfg.get("bdt", {"sigma": 0.2})),
        BlackKarasinskiModel(r0=r0, **stubs_cfg.get("black_karasinski", {"a": 0.1, "sigma": 0.2})),
    ]
    print()
    for model in stubs:
        try:
            model.price_zero_coupon_bond(quoted[0])
        except NoClosedFormError as exc:
            print(f"{type(model).__name__}: {exc}")

    # ---- Exports -------------------------------------------------------------
    if outdir is not None:
        export_pricing_table(os.path.join(outdir, "prices_hull_white.csv"), ts, hw, quoted)
        export_pricing_table(os.path.join(outdir, "prices_ho_lee.csv"), ts, hl, quoted)
        if sse_grid is not None:
            rows = [[f"{a:g}", f"{s:g}", f"{sse_grid[i, j]:.12g}"]
                    for i, a in enumerate(a_vals) for j, s in enumerate(s_vals)]
            write_matrix_csv(os.path.join(outdir, "sse_grid.csv"), ["a", "sigma", "sse"], rows)

        if args.plots:
            figs_dir = os.path.join(outdir, "figs")
            T_arr = np.asarray(quoted, dtype=float)
            save_price_curve_plot(
                maturities=T_arr,
                market=np.array([ts.lookup(T) for T in quoted]),
                model_prices={"Hull-White": hw.price_curve(quoted), f"Ho-Lee ({mode})": hl.price_curve(quoted)},
                outpath=os.path.join(figs_dir, "prices.png"),
            )
            if sse_grid is not None:
                save_sse_grid_plot(a_vals, s_vals, sse_grid, os.path.join(figs_dir, "sse_grid.png"))

        meta = {
            "config": os.path.abspath(args.config),
            "r0": r0,
            "market_yields": {f"{t:g}": y for t, y in yields.items()},
            "hull_white_initial": {"a": a0, "sigma": s0, "sse": sse_initial},
            "hull_white_calibrated_sse": sse_calibrated,
            "ho_lee": {"sigma": hl.sigma, "fitted": hl.fitted},
            "notes": "SSE evaluated only; parameter search is left to an external optimizer.",
        }
        write_meta_json(os.path.join(outdir, "run_meta.json"), meta)
        print(f"\nFiles written under: {outdir}")


if __name__ == "__main__":
    main()
