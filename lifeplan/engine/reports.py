# engine/reports.py
from __future__ import annotations

from typing import Sequence

from ..data_model import SimulationConfig, SimulationInputs, SimulationSummary, YearProjection

# Replacement rate assumed when no pension data is modelled.
FALLBACK_COMPENSATION_RATIO = 0.6


def capital_duration(projections: Sequence[YearProjection], retirement_age: int) -> int:
    """Years from the retirement row until net worth first hits 0 (or the last row)."""
    start = next((i for i, p in enumerate(projections) if p.age == retirement_age), None)
    if start is None:
        return 0
    for projection in projections[start:]:
        if projection.net_worth <= 0:
            return projection.age - retirement_age
    return projections[-1].age - retirement_age


def estimate_pension(inputs: SimulationInputs, config: SimulationConfig) -> tuple:
    """(estimated monthly pension, compensation ratio vs. current monthly salary)."""
    monthly_salary = inputs.income.monthly_salary
    if config.include_pensions and inputs.pensions is not None:
        pensions = inputs.pensions
        estimated = pensions.general.estimated_monthly_amount + sum(
            account.expected_monthly_pension or 0.0 for account in pensions.accounts
        )
        ratio = estimated / monthly_salary if monthly_salary > 0 else 0.0
        return estimated, ratio
    return monthly_salary * FALLBACK_COMPENSATION_RATIO, FALLBACK_COMPENSATION_RATIO


def summarize(
    projections: Sequence[YearProjection],
    inputs: SimulationInputs,
    config: SimulationConfig | None = None,
) -> SimulationSummary:
    config = config or SimulationConfig()
    if not projections:
        return SimulationSummary()

    retirement_age = inputs.profile.desired_retirement_age
    monthly_pension, compensation_ratio = estimate_pension(inputs, config)

    retirement_row = next((p for p in projections if p.age == retirement_age), None)
    positive_savings = [p.savings for p in projections if p.savings > 0]
    total_savings = sum(positive_savings)
    break_even = next((p for p in projections if p.net_worth > 0), None)

    pension_fields = {
        "total_pension_capital": 0.0,
        "average_monthly_pension": monthly_pension,
        "pension_duration": 0,
    }
    if config.include_pensions and inputs.pensions is not None:
        start_age = inputs.pensions.general.withdrawal_start_age
        paying = [
            p.pension_income.total if p.pension_income else 0.0
            for p in projections
            if p.age >= start_age
        ]
        pension_fields = {
            "total_pension_capital": inputs.pensions.total_capital(),
            "average_monthly_pension": sum(paying) / len(paying) if paying else 0.0,
            "pension_duration": sum(1 for amount in paying if amount > 0),
        }

    return SimulationSummary(
        max_net_worth=max(p.net_worth for p in projections),
        retirement_net_worth=retirement_row.net_worth if retirement_row else 0.0,
        final_net_worth=projections[-1].net_worth,
        total_savings=total_savings,
        average_yearly_savings=total_savings / len(positive_savings) if positive_savings else 0.0,
        years_of_positive_cash_flow=len(positive_savings),
        break_even_age=break_even.age if break_even else None,
        expected_monthly_pension=monthly_pension,
        pension_compensation_ratio=compensation_ratio,
        capital_duration_years=capital_duration(projections, retirement_age),
        **pension_fields,
    )
