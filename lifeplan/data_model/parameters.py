# data_model/parameters.py
"""Versioned Swedish tax and pension parameter tables.

The engine receives one of these tables per run; nothing in the engine or the
tax calculator hard-codes a rate, threshold or life expectancy.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_TAX_YEAR = 2025


@dataclass(frozen=True)
class DeductionBand:
    minimum: float
    maximum: float
    minimum_at_high_income: float


@dataclass(frozen=True)
class BasicDeductionTable:
    """Grundavdrag amounts; a three-tier approximation of the real schedule."""

    under_senior: DeductionBand
    senior: DeductionBand
    low_income_bound: float = 100000.0
    mid_income_bound: float = 500000.0


@dataclass(frozen=True)
class FlatYieldParameters:
    """Schablon taxation shared by ISK and KF."""

    government_bond_rate: float
    supplement: float
    min_rate: float
    tax_rate: float
    tax_free_amount: float

    def effective_rate(self) -> float:
        schablon_rate = max(self.government_bond_rate + self.supplement, self.min_rate)
        return schablon_rate * self.tax_rate


@dataclass(frozen=True)
class TaxParameters:
    income_base_amount: float
    price_base_amount: float
    pension_fee_rate: float
    pgi_multiplier: float
    pgi_discount: float
    municipal_tax_rate: float
    state_tax_threshold_under_senior: float
    state_tax_threshold_senior: float
    state_tax_rate: float
    senior_age: int
    basic_deduction: BasicDeductionTable
    flat_yield: FlatYieldParameters
    capital_gains_rate: float

    def pension_fee_cap(self) -> float:
        return self.income_base_amount * self.pgi_multiplier * self.pgi_discount

    def state_tax_threshold(self, age: int) -> float:
        if age >= self.senior_age:
            return self.state_tax_threshold_senior
        return self.state_tax_threshold_under_senior


@dataclass(frozen=True)
class MacroAssumptions:
    inflation: float
    real_salary_growth: float
    stocks_return: float
    bonds_return: float
    mixed_portfolio_return: float
    liquid_savings_return: float
    life_expectancy_male: float
    life_expectancy_female: float

    def life_expectancy(self, gender: str) -> float:
        if gender == "man":
            return self.life_expectancy_male
        return self.life_expectancy_female


@dataclass(frozen=True)
class DrawdownPolicy:
    # Until-depleted accounts without a fixed amount pay capital × rate / 12.
    non_lifelong_rate: float = 0.04
    min_remaining_years: float = 1.0


@dataclass(frozen=True)
class ProjectionParameters:
    year: int
    tax: TaxParameters
    macro: MacroAssumptions
    drawdown: DrawdownPolicy = field(default_factory=DrawdownPolicy)


_FLAT_YIELD_2025 = FlatYieldParameters(
    government_bond_rate=0.0196,
    supplement=0.01,
    min_rate=0.0125,
    tax_rate=0.30,
    tax_free_amount=150000.0,
)

_TAX_2025 = TaxParameters(
    income_base_amount=80600.0,
    price_base_amount=58800.0,
    pension_fee_rate=0.07,
    pgi_multiplier=8.07,
    pgi_discount=0.93,
    municipal_tax_rate=0.3241,
    state_tax_threshold_under_senior=643100.0,
    state_tax_threshold_senior=733200.0,
    state_tax_rate=0.20,
    senior_age=66,
    basic_deduction=BasicDeductionTable(
        under_senior=DeductionBand(minimum=24900.0, maximum=45300.0, minimum_at_high_income=17300.0),
        senior=DeductionBand(minimum=65300.0, maximum=163100.0, minimum_at_high_income=107400.0),
    ),
    flat_yield=_FLAT_YIELD_2025,
    capital_gains_rate=0.30,
)

_MACRO_2025 = MacroAssumptions(
    inflation=0.02,
    real_salary_growth=0.016,
    stocks_return=0.045,
    bonds_return=0.005,
    mixed_portfolio_return=0.035,
    liquid_savings_return=0.005,
    life_expectancy_male=82.3,
    life_expectancy_female=85.4,
)

PARAMETERS_2025 = ProjectionParameters(year=2025, tax=_TAX_2025, macro=_MACRO_2025)

PARAMETERS_2026 = ProjectionParameters(
    year=2026,
    tax=replace(_TAX_2025, flat_yield=replace(_FLAT_YIELD_2025, tax_free_amount=300000.0)),
    macro=_MACRO_2025,
)

PARAMETER_TABLES: Dict[int, ProjectionParameters] = {
    PARAMETERS_2025.year: PARAMETERS_2025,
    PARAMETERS_2026.year: PARAMETERS_2026,
}


def get_parameters(year: int | None = None) -> ProjectionParameters:
    year = DEFAULT_TAX_YEAR if year is None else int(year)
    try:
        return PARAMETER_TABLES[year]
    except KeyError:
        available = ", ".join(str(y) for y in sorted(PARAMETER_TABLES))
        raise ValueError(f"No parameter table for {year}. Available: {available}") from None


def _apply_overrides(obj: Any, overrides: Dict[str, Any]) -> Any:
    """Return a copy of a (nested) frozen dataclass with matching keys replaced."""
    changes: Dict[str, Any] = {}
    for f in fields(obj):
        if f.name not in overrides:
            continue
        current = getattr(obj, f.name)
        value = overrides[f.name]
        if is_dataclass(current) and isinstance(value, dict):
            changes[f.name] = _apply_overrides(current, value)
        elif isinstance(current, (int, float)) and not isinstance(value, bool):
            changes[f.name] = type(current)(value)
        else:
            logger.warning("Ignoring parameter override %s=%r", f.name, value)
    return replace(obj, **changes) if changes else obj


def _load_json_overrides(path: str) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError):
        logger.warning("Could not read parameter overrides from %s", path)
        return {}
    return data if isinstance(data, dict) else {}


def load_parameters_from_env() -> ProjectionParameters:
    """Build the parameter table from env flags.

    Env vars:
      LIFEPLAN_TAX_YEAR=2025              -> which shipped table to start from
      LIFEPLAN_PARAMETERS_FILE=<path.json> -> optional nested overrides, e.g.
                                             {"tax": {"municipal_tax_rate": 0.32}}
    """
    params = get_parameters(os.getenv("LIFEPLAN_TAX_YEAR") or DEFAULT_TAX_YEAR)
    overrides = _load_json_overrides(os.getenv("LIFEPLAN_PARAMETERS_FILE", ""))
    if overrides:
        params = _apply_overrides(params, overrides)
    return params
