# engine/simulator.py
from __future__ import annotations

import logging
import math
from typing import List

from ..data_model import (
    InvestmentRates,
    PensionAccount,
    PensionCapital,
    PensionIncome,
    ProjectionParameters,
    SimulationConfig,
    SimulationInputs,
    YearCalculations,
    YearProjection,
    get_parameters,
)
from ..data_model.parameters import DrawdownPolicy
from ..data_model.pensions import GENERAL, OCCUPATIONAL, GeneralPension
from .sanitize import NumberSanitizer
from .tax import compute_yearly_tax, pension_fee
from .validation import ISK_RATE_BOUNDS, LIQUID_RATE_BOUNDS

logger = logging.getLogger(__name__)

DEBUG_YEARS = 5


def _clamp(value: float, bounds: tuple) -> float:
    low, high = bounds
    return max(low, min(high, value))


def resolve_investment_rates(
    inputs: SimulationInputs,
    config: SimulationConfig,
    params: ProjectionParameters,
) -> InvestmentRates:
    """Caller-supplied rates (clamped) or the table defaults."""
    macro = params.macro
    if not config.use_custom_investment_rates or inputs.investments is None:
        return InvestmentRates(
            liquid_savings_rate=macro.liquid_savings_return,
            isk_account_rate=macro.mixed_portfolio_return,
        )

    requested = inputs.investments
    liquid = _clamp(requested.liquid_savings_rate, LIQUID_RATE_BOUNDS)
    isk = _clamp(requested.isk_account_rate, ISK_RATE_BOUNDS)
    if liquid != requested.liquid_savings_rate:
        logger.warning("Liquid savings rate capped from %s to %s", requested.liquid_savings_rate, liquid)
    if isk != requested.isk_account_rate:
        logger.warning("ISK rate capped from %s to %s", requested.isk_account_rate, isk)
    return InvestmentRates(liquid_savings_rate=liquid, isk_account_rate=isk)


def _build_pension_state(account: PensionAccount, safe: NumberSanitizer) -> dict:
    # Per-run working copy; the caller's account is only read.
    return {
        "account": account,
        "kind": account.normalized_type(),
        "start_age": account.withdrawal.start_age,
        "capital": safe(account.current_value),
        "monthly": 0.0,
    }


def _lifelong_monthly(
    capital: float,
    age: int,
    life_expectancy: float,
    drawdown: DrawdownPolicy,
    safe: NumberSanitizer,
) -> float:
    remaining_years = max(drawdown.min_remaining_years, life_expectancy - age)
    return safe.divide(capital, remaining_years * 12.0)


def _account_monthly_pension(
    state: dict,
    age: int,
    life_expectancy: float,
    params: ProjectionParameters,
    safe: NumberSanitizer,
) -> float:
    if age < state["start_age"]:
        return 0.0
    account: PensionAccount = state["account"]

    fixed = account.withdrawal.fixed_monthly_amount()
    if fixed > 0:
        if not account.withdrawal.is_lifelong and not account.expected_monthly_pension:
            # Until-depleted: payouts stop once the capital is gone.
            return safe(min(fixed, max(0.0, state["capital"]) / 12.0))
        return safe(fixed)
    if account.expected_monthly_pension and account.expected_monthly_pension > 0:
        return safe(account.expected_monthly_pension)

    capital = safe(state["capital"])
    if account.withdrawal.is_lifelong:
        return _lifelong_monthly(capital, age, life_expectancy, params.drawdown, safe)
    return safe(capital * params.drawdown.non_lifelong_rate / 12.0)


def _general_monthly_pension(
    general: GeneralPension,
    capital: float,
    age: int,
    life_expectancy: float,
    params: ProjectionParameters,
    safe: NumberSanitizer,
) -> float:
    if age < general.withdrawal_start_age:
        return 0.0
    if general.estimated_monthly_amount > 0:
        return safe(general.estimated_monthly_amount)
    return _lifelong_monthly(capital, age, life_expectancy, params.drawdown, safe)


def _pension_income(
    age: int,
    general_monthly: float,
    pension_states: List[dict],
    life_expectancy: float,
    params: ProjectionParameters,
    safe: NumberSanitizer,
) -> PensionIncome:
    """Monthly pension for the year; stores each account's amount on its state."""
    by_kind = {GENERAL: 0.0, OCCUPATIONAL: 0.0}
    private = 0.0
    for state in pension_states:
        state["monthly"] = _account_monthly_pension(state, age, life_expectancy, params, safe)
        if state["kind"] in by_kind:
            by_kind[state["kind"]] += state["monthly"]
        else:
            private += state["monthly"]

    return PensionIncome(
        general=safe(general_monthly + by_kind[GENERAL]),
        occupational=safe(by_kind[OCCUPATIONAL]),
        private=safe(private),
    )


def _advance_pension_capital(
    age: int,
    general: GeneralPension,
    general_capital: float,
    general_monthly: float,
    pension_states: List[dict],
    params: ProjectionParameters,
    safe: NumberSanitizer,
) -> float:
    """Withdraw from paying accounts, grow the rest. Returns next general capital."""
    macro = params.macro
    if age >= general.withdrawal_start_age:
        general_capital = max(0.0, safe(general_capital) - safe(general_monthly * 12.0))
    else:
        general_capital = safe(general_capital * (1 + macro.bonds_return))

    for state in pension_states:
        if age >= state["start_age"]:
            state["capital"] = max(0.0, safe(state["capital"]) - safe(state["monthly"] * 12.0))
        else:
            state["capital"] = safe(state["capital"] * (1 + macro.mixed_portfolio_return))
    return general_capital


def _pension_capital(general_capital: float, pension_states: List[dict], safe: NumberSanitizer) -> PensionCapital:
    totals = {GENERAL: general_capital, OCCUPATIONAL: 0.0}
    private = 0.0
    for state in pension_states:
        if state["kind"] in totals:
            totals[state["kind"]] += state["capital"]
        else:
            private += state["capital"]
    return PensionCapital(
        general=safe(totals[GENERAL]),
        occupational=safe(totals[OCCUPATIONAL]),
        private=safe(private),
    )


def _apply_cash_flow(cash_flow: float, liquid: float, isk: float) -> tuple:
    """Deficits drain liquid savings first, then the ISK account; surpluses go to liquid."""
    if cash_flow < 0:
        deficit = -cash_flow
        from_liquid = min(deficit, liquid)
        liquid -= from_liquid
        deficit -= from_liquid
        if deficit > 0:
            from_isk = min(deficit, isk)
            isk -= from_isk
            deficit -= from_isk
        if deficit > 0:
            logger.debug("Unfunded deficit of %.0f after draining liquid and ISK", deficit)
    else:
        liquid += cash_flow
    return max(0.0, liquid), max(0.0, isk)


def simulate_yearly(
    inputs: SimulationInputs,
    config: SimulationConfig | None = None,
    params: ProjectionParameters | None = None,
    sanitizer: NumberSanitizer | None = None,
) -> List[YearProjection]:
    """Year-by-year projection from current age to life expectancy.

    Inputs are not validated here; see `validate_inputs` and `run_request`.
    """
    config = config or SimulationConfig()
    params = params or get_parameters()
    safe = sanitizer or NumberSanitizer()

    profile = inputs.profile
    life_expectancy = params.macro.life_expectancy(profile.gender)
    rates = resolve_investment_rates(inputs, config, params)
    pensions = inputs.pensions if config.include_pensions else None

    salary = safe(inputs.income.annual_salary())
    liquid = safe(inputs.assets.liquid_savings)
    isk = safe(inputs.assets.isk_account)

    general_capital = 0.0
    pension_states: List[dict] = []
    if pensions is not None:
        general_capital = safe(pensions.general.total_capital())
        pension_states = [_build_pension_state(account, safe) for account in pensions.accounts]

    records: List[YearProjection] = []
    last_age = int(math.floor(life_expectancy))

    for year, age in enumerate(range(profile.current_age, last_age + 1)):
        is_retired = age >= profile.desired_retirement_age
        if is_retired:
            salary = 0.0
        salary_income = safe(salary)

        pension_income = None
        general_monthly = 0.0
        if pensions is not None:
            general_monthly = _general_monthly_pension(
                pensions.general, general_capital, age, life_expectancy, params, safe
            )
            pension_income = _pension_income(age, general_monthly, pension_states, life_expectancy, params, safe)

        pension_yearly = safe(pension_income.total * 12.0) if pension_income else 0.0
        gross_income = salary_income + pension_yearly

        tax_result = compute_yearly_tax(gross_income, age, isk_balance=safe(isk), kf_balance=0.0, params=params)

        yearly_expenses = safe(inputs.expenses.annual_amount())
        net_income = safe(tax_result.net_income)
        cash_flow = safe(net_income - yearly_expenses)

        pension_capital = None
        if pensions is not None:
            general_capital = _advance_pension_capital(
                age, pensions.general, general_capital, general_monthly, pension_states, params, safe
            )
            pension_capital = _pension_capital(general_capital, pension_states, safe)

        liquid, isk = _apply_cash_flow(cash_flow, liquid, isk)
        if liquid > 0:
            liquid = safe(liquid * (1 + rates.liquid_savings_rate))
        if isk > 0:
            isk = safe(isk * (1 + rates.isk_account_rate))

        pension_total = pension_capital.total if pension_capital else 0.0
        net_worth = max(0.0, safe(liquid + isk + pension_total))

        records.append(
            YearProjection(
                year=year,
                age=age,
                salary=salary_income,
                expenses=yearly_expenses,
                savings=cash_flow,
                net_worth=net_worth,
                calculations=YearCalculations(
                    gross_income=gross_income,
                    pension_fee=safe(pension_fee(salary_income, params.tax)),
                    municipal_tax=safe(tax_result.municipal_tax),
                    state_tax=safe(tax_result.state_tax),
                    isk_tax=safe(tax_result.isk_tax),
                    total_tax=safe(tax_result.total_tax),
                    net_income=net_income,
                    cash_flow=cash_flow,
                ),
                pension_income=pension_income,
                pension_capital=pension_capital,
                tax_breakdown=tax_result.calculations if config.enable_transparency else None,
            )
        )

        if year < DEBUG_YEARS:
            logger.debug(
                "Year %s: Liquid=%.0f, ISK=%.0f, CashFlow=%.0f, NetWorth=%.0f",
                year,
                liquid,
                isk,
                cash_flow,
                net_worth,
            )

        if not is_retired:
            salary = safe(salary * (1 + inputs.income.real_salary_growth))

    return records
