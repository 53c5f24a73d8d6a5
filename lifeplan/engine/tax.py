# engine/tax.py
"""
Swedish yearly tax calculator.

Pure functions of (gross income, age, ISK/KF balances, capital gains) and an
injected parameter table. Every tax category also returns its derivation as an
ordered list of labelled steps so callers can show how a figure was reached.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..data_model.parameters import FlatYieldParameters, ProjectionParameters, TaxParameters, get_parameters
from ..data_model.projection import CalculationStep, TransparentCalculation

INCOME_TAX = "Income tax"
ISK_TAX = "ISK flat-yield tax"
KF_TAX = "KF yield tax"
CAPITAL_GAINS_TAX = "Capital gains tax"


@dataclass(frozen=True)
class TaxResult:
    pension_fee: float
    basic_deduction: float
    taxable_income: float
    municipal_tax: float
    state_tax: float
    isk_tax: float
    kf_tax: float
    capital_gains_tax: float
    total_tax: float
    net_income: float
    calculations: Tuple[TransparentCalculation, ...]

    def calculation(self, category: str) -> TransparentCalculation:
        for calc in self.calculations:
            if calc.category == category:
                return calc
        raise KeyError(category)


# --- 1. Internal helpers ---


def pension_fee(gross_income: float, tax: TaxParameters) -> float:
    """General pension fee: 7% of income up to the pensionable-income cap."""
    pensionable = min(max(0.0, gross_income), tax.pension_fee_cap())
    return pensionable * tax.pension_fee_rate


def basic_deduction(income_after_fee: float, age: int, tax: TaxParameters) -> float:
    # Three income tiers per age band; a known simplification of the
    # continuous grundavdrag schedule.
    table = tax.basic_deduction
    band = table.senior if age >= tax.senior_age else table.under_senior
    if income_after_fee <= table.low_income_bound:
        return band.minimum
    if income_after_fee <= table.mid_income_bound:
        return band.maximum
    return band.minimum_at_high_income


def _income_tax(gross_income: float, age: int, tax: TaxParameters):
    steps: List[CalculationStep] = []
    cap = tax.pension_fee_cap()

    fee = pension_fee(gross_income, tax)
    steps.append(
        CalculationStep(
            description="General pension fee (7% of pensionable income)",
            formula="min(gross_income, pgi_cap) × pension_fee_rate",
            inputs={"gross_income": gross_income, "pgi_cap": cap, "pension_fee_rate": tax.pension_fee_rate},
            result=fee,
        )
    )

    income_after_fee = gross_income - fee
    deduction = basic_deduction(income_after_fee, age, tax)
    steps.append(
        CalculationStep(
            description="Basic deduction (grundavdrag)",
            formula="tier(income_after_fee, age)",
            inputs={"income_after_fee": income_after_fee, "age": float(age)},
            result=deduction,
        )
    )

    taxable_income = max(0.0, gross_income - fee - deduction)
    steps.append(
        CalculationStep(
            description="Taxable earned income",
            formula="max(0, gross_income - pension_fee - basic_deduction)",
            inputs={"gross_income": gross_income, "pension_fee": fee, "basic_deduction": deduction},
            result=taxable_income,
        )
    )

    municipal_tax = taxable_income * tax.municipal_tax_rate
    steps.append(
        CalculationStep(
            description="Municipal tax incl. region (average rate)",
            formula="taxable_income × municipal_tax_rate",
            inputs={"taxable_income": taxable_income, "municipal_tax_rate": tax.municipal_tax_rate},
            result=municipal_tax,
        )
    )

    threshold = tax.state_tax_threshold(age)
    state_tax = max(0.0, taxable_income - threshold) * tax.state_tax_rate
    steps.append(
        CalculationStep(
            description="State income tax above the breakpoint",
            formula="max(0, taxable_income - breakpoint) × state_tax_rate",
            inputs={"taxable_income": taxable_income, "breakpoint": threshold, "state_tax_rate": tax.state_tax_rate},
            result=state_tax,
        )
    )

    calculation = TransparentCalculation(
        category=INCOME_TAX,
        steps=tuple(steps),
        final_result=municipal_tax + state_tax,
    )
    return fee, deduction, taxable_income, municipal_tax, state_tax, calculation


def _flat_yield_tax(balance: float, flat: FlatYieldParameters, category: str):
    """Schablon tax shared by ISK and KF."""
    taxable_capital = max(0.0, balance - flat.tax_free_amount)
    rate = flat.effective_rate()
    tax = taxable_capital * rate
    steps = (
        CalculationStep(
            description="Capital above the tax-free amount",
            formula="max(0, balance - tax_free_amount)",
            inputs={"balance": balance, "tax_free_amount": flat.tax_free_amount},
            result=taxable_capital,
        ),
        CalculationStep(
            description="Flat-yield tax on taxable capital",
            formula="taxable_capital × max(bond_rate + supplement, min_rate) × tax_rate",
            inputs={
                "taxable_capital": taxable_capital,
                "bond_rate": flat.government_bond_rate,
                "supplement": flat.supplement,
                "min_rate": flat.min_rate,
                "tax_rate": flat.tax_rate,
            },
            result=tax,
        ),
    )
    return tax, TransparentCalculation(category=category, steps=steps, final_result=tax)


def _capital_gains_tax(capital_gains: float, tax: TaxParameters):
    result = max(0.0, capital_gains) * tax.capital_gains_rate
    step = CalculationStep(
        description="Tax on realised gains from securities",
        formula="max(0, capital_gains) × capital_gains_rate",
        inputs={"capital_gains": capital_gains, "capital_gains_rate": tax.capital_gains_rate},
        result=result,
    )
    return result, TransparentCalculation(category=CAPITAL_GAINS_TAX, steps=(step,), final_result=result)


# --- 2. Public API ---


def compute_yearly_tax(
    gross_salary: float,
    age: int,
    isk_balance: float = 0.0,
    kf_balance: float = 0.0,
    capital_gains: float | None = None,
    params: ProjectionParameters | None = None,
) -> TaxResult:
    """Every tax liability for one year plus the steps that produced it."""
    tax = (params or get_parameters()).tax

    fee, deduction, taxable_income, municipal_tax, state_tax, income_calc = _income_tax(gross_salary, age, tax)
    isk_tax, isk_calc = _flat_yield_tax(isk_balance, tax.flat_yield, ISK_TAX)
    kf_tax, kf_calc = _flat_yield_tax(kf_balance, tax.flat_yield, KF_TAX)
    gains_tax, gains_calc = _capital_gains_tax(capital_gains or 0.0, tax)

    total_tax = municipal_tax + state_tax + isk_tax + kf_tax + gains_tax

    return TaxResult(
        pension_fee=fee,
        basic_deduction=deduction,
        taxable_income=taxable_income,
        municipal_tax=municipal_tax,
        state_tax=state_tax,
        isk_tax=isk_tax,
        kf_tax=kf_tax,
        capital_gains_tax=gains_tax,
        total_tax=total_tax,
        net_income=gross_salary - total_tax,
        calculations=(income_calc, isk_calc, kf_calc, gains_calc),
    )


def net_income(
    gross_income: float,
    age: int,
    isk_balance: float = 0.0,
    kf_balance: float = 0.0,
    params: ProjectionParameters | None = None,
) -> float:
    return compute_yearly_tax(gross_income, age, isk_balance, kf_balance, params=params).net_income


def tax_summary(
    gross_salary: float,
    age: int,
    isk_balance: float = 0.0,
    kf_balance: float = 0.0,
    capital_gains: float | None = None,
    params: ProjectionParameters | None = None,
) -> List[dict]:
    result = compute_yearly_tax(gross_salary, age, isk_balance, kf_balance, capital_gains, params)
    return [
        {"description": "Municipal tax (incl. region)", "amount": result.municipal_tax},
        {"description": "State income tax", "amount": result.state_tax},
        {"description": ISK_TAX, "amount": result.isk_tax},
        {"description": KF_TAX, "amount": result.kf_tax},
        {"description": CAPITAL_GAINS_TAX, "amount": result.capital_gains_tax},
        {"description": "Total tax", "amount": result.total_tax},
    ]
