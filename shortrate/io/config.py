# shortrate/io/config.py
from __future__ import annotations
import pathlib
import yaml

REQUIRED_KEYS = ["market_yields", "hull_white"]


def load_settings(path: str | pathlib.Path) -> dict:
    """
    Load the YAML run settings and return a dict.
    Uses yaml.safe_load. Raises FileNotFoundError if the file is missing,
    ValueError if a required key is absent or malformed.
    """
    p = pathlib.Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    for k in REQUIRED_KEYS:
        if k not in cfg:
            raise ValueError(f"Missing required key in settings: '{k}'")

    yields = cfg["market_yields"]
    if not isinstance(yields, dict) or not yields:
        raise ValueError("market_yields must be a non-empty mapping maturity -> yield")
    # YAML keys like `0.25` already parse as floats; normalise ints/strings too
    cfg["market_yields"] = {float(t): float(y) for t, y in yields.items()}

    # r0 defaults to the shortest quoted yield
    if cfg.get("r0") is None:
        cfg["r0"] = cfg["market_yields"][min(cfg["market_yields"])]
    cfg["r0"] = float(cfg["r0"])

    if "initial" not in cfg["hull_white"]:
        raise ValueError("hull_white.initial (a, sigma) is required")
    return cfg
