"""Configuration loading and sweep manifest validation utilities."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from twamm_sim.common.errors import InvalidParameterError
from twamm_sim.common.models import GasCostModel, Parameters

log = logging.getLogger(__name__)

SWEEP_SCHEMA = "sweep_manifest.schema.json"


def _load_json(path: str | Path) -> Dict[str, Any]:
    # Decimal floats keep fee rates such as 0.00005 exact.
    with Path(path).expanduser().open("r", encoding="utf-8") as fh:
        return json.load(fh, parse_float=Decimal)


def _load_schema(name: str) -> Dict[str, Any]:
    here = Path(__file__).resolve().parent / "schemas"
    with (here / name).open("r", encoding="utf-8") as fh:
        return json.load(fh)


def validate_json_manifest(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate a manifest dict against a bundled JSON schema."""
    schema = _load_schema(schema_name)
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        msgs = "; ".join(f"{'/'.join(map(str, e.path))}: {e.message}" for e in errors)
        raise ValueError(f"Manifest validation failed: {msgs}")


def load_validated_manifest(path: str | Path, schema_name: str) -> Dict[str, Any]:
    """Load JSON file and validate it; returns the parsed object."""
    payload = _load_json(path)
    validate_json_manifest(payload, schema_name)
    return payload


def build_parameters(**values: Any) -> Parameters:
    """Construct ``Parameters``, reporting every rejected field at once."""
    try:
        return Parameters(**values)
    except ValidationError as exc:
        msgs = "; ".join(f"{'.'.join(map(str, e['loc'])) or 'parameters'}: {e['msg']}" for e in exc.errors())
        raise InvalidParameterError(f"Invalid simulation parameters: {msgs}") from exc


class Settings(BaseSettings):
    """Environment-driven configuration for a simulation run."""

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    results_dir: str = Field("simulations/L2-USDT", alias="RESULTS_DIR")
    results_summary_csv: str = Field("summary.csv", alias="RESULTS_SUMMARY_CSV")
    metrics_file: Optional[str] = Field(None, alias="METRICS_FILE")

    liquidity_usd: Decimal = Field(Decimal("20000000"), alias="LIQUIDITY_USD")
    lt_trade_usd: Decimal = Field(Decimal("1000000"), alias="LT_TRADE_USD")
    duration_intervals: int = Field(2, alias="DURATION_INTERVALS")
    swap_fee: Decimal = Field(Decimal("0.00005"), alias="SWAP_FEE")
    lt_swap_fee: Decimal = Field(Decimal("0.0001"), alias="LT_SWAP_FEE")
    # unset -> derived from the gas cost model below
    arb_cost_usd: Optional[Decimal] = Field(None, alias="ARB_COST_USD")
    arb_threshold_usd: Decimal = Field(Decimal("1"), alias="ARB_THRESHOLD_USD")

    est_evo_gas: Decimal = Field(Decimal("219806"), alias="EST_EVO_GAS")
    usd_per_eth: Decimal = Field(Decimal("1879.75"), alias="USD_PER_ETH")
    gwei_base_fee: Decimal = Field(Decimal("0.0837"), alias="GWEI_BASE_FEE")
    gwei_priority_fee: Decimal = Field(Decimal("0.1080"), alias="GWEI_PRIORITY_FEE")

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=False, extra="ignore")

    # ------------------------------------------------------------------ #
    def gas_cost_model(self) -> GasCostModel:
        return GasCostModel(
            est_evo_gas=self.est_evo_gas,
            usd_per_eth=self.usd_per_eth,
            gwei_base_fee=self.gwei_base_fee,
            gwei_priority_fee=self.gwei_priority_fee,
        )

    def arbitrage_cost(self) -> Decimal:
        if self.arb_cost_usd is not None:
            return self.arb_cost_usd
        return self.gas_cost_model().arbitrage_cost_usd()

    def parameter_values(self) -> Dict[str, Any]:
        return {
            "total_liquidity_usd": self.liquidity_usd,
            "lt_order_amount": self.lt_trade_usd,
            "duration_intervals": self.duration_intervals,
            "short_term_fee_rate": self.swap_fee,
            "long_term_fee_rate": self.lt_swap_fee,
            "arbitrage_cost_usd": self.arbitrage_cost(),
            "arbitrage_profit_threshold_usd": self.arb_threshold_usd,
            "evo_gas_usd": self.gas_cost_model().est_evo_usd,
        }

    def to_parameters(self, **overrides: Any) -> Parameters:
        """Parameters from the environment, with explicit overrides on top."""
        values = self.parameter_values()
        values.update(overrides)
        return build_parameters(**values)

    def load_sweep(self, path: str | Path) -> List[Parameters]:
        """Expand a sweep manifest into one ``Parameters`` per run."""
        data = load_validated_manifest(path, SWEEP_SCHEMA)
        defaults = data.get("defaults", {})
        runs: List[Parameters] = []
        log.info("Loading sweep from %s", path)
        for i, entry in enumerate(data["runs"]):
            try:
                runs.append(self.to_parameters(**{**defaults, **entry}))
            except InvalidParameterError as exc:
                raise InvalidParameterError(f"run {i}: {exc}") from exc
        log.info("Loaded %d sweep runs", len(runs))
        return runs

    @property
    def summary_path(self) -> Path:
        return Path(self.results_dir) / self.results_summary_csv


__all__ = [
    "Settings",
    "build_parameters",
    "validate_json_manifest",
    "load_validated_manifest",
]
