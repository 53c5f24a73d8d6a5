# engine/validation.py
from __future__ import annotations

from ..data_model import SimulationConfig, SimulationInputs, ValidationResult
from ..data_model.pensions import PensionSettings

MIN_AGE = 16
MAX_AGE = 80
RETIREMENT_AGE_WARNING = 61
LOW_SALARY = 10000.0
HIGH_SALARY = 100000.0
LOW_EXPENSES = 15000.0
SALARY_GROWTH_BOUNDS = (-0.05, 0.10)
LIQUID_RATE_BOUNDS = (-0.10, 0.20)
ISK_RATE_BOUNDS = (-0.50, 0.50)
ISK_RATE_WARNING = 0.15
GENERAL_PENSION_EARLIEST = 62
GENERAL_PENSION_LATEST = 70
GENDERS = ("man", "kvinna")


def _validate_profile(inputs: SimulationInputs, result: ValidationResult) -> None:
    profile = inputs.profile
    if profile.current_age < MIN_AGE or profile.current_age > MAX_AGE:
        result.errors.append(f"Age must be between {MIN_AGE} and {MAX_AGE}")
    if profile.desired_retirement_age <= profile.current_age:
        result.errors.append("Retirement age must be higher than current age")
    if profile.desired_retirement_age < RETIREMENT_AGE_WARNING:
        result.warnings.append(
            f"Retirement before {RETIREMENT_AGE_WARNING} may limit pension payments"
        )
    if profile.gender not in GENDERS:
        result.errors.append(f"Unknown life-expectancy category: {profile.gender!r}")


def _validate_amounts(inputs: SimulationInputs, result: ValidationResult) -> None:
    amounts = {
        "Monthly salary": inputs.income.monthly_salary,
        "Monthly living expenses": inputs.expenses.monthly_living,
        "Liquid savings": inputs.assets.liquid_savings,
        "ISK account": inputs.assets.isk_account,
    }
    for label, value in amounts.items():
        if value < 0:
            result.errors.append(f"{label} cannot be negative")


def _validate_income(inputs: SimulationInputs, result: ValidationResult) -> None:
    income = inputs.income
    if income.monthly_salary < LOW_SALARY:
        result.warnings.append("Low monthly salary may affect pension accrual")
    if income.monthly_salary > HIGH_SALARY:
        result.warnings.append("Salary above the pension cap - limited accrual on the excess")
    low, high = SALARY_GROWTH_BOUNDS
    if income.real_salary_growth < low or income.real_salary_growth > high:
        result.warnings.append("Unusual real salary growth - check that the value is reasonable")


def _validate_expenses(inputs: SimulationInputs, result: ValidationResult) -> None:
    monthly_living = inputs.expenses.monthly_living
    if monthly_living >= inputs.income.monthly_salary:
        result.warnings.append("Expenses equal or exceed income - no savings")
    if monthly_living < LOW_EXPENSES:
        result.warnings.append("Very low living costs - check that all expenses are included")


def _validate_investment_rates(inputs: SimulationInputs, result: ValidationResult) -> None:
    rates = inputs.investments
    if rates is None:
        return
    low, high = LIQUID_RATE_BOUNDS
    if rates.liquid_savings_rate < low or rates.liquid_savings_rate > high:
        result.warnings.append("Return on liquid savings looks unrealistic (expected between -10% and 20%)")
    low, high = ISK_RATE_BOUNDS
    if rates.isk_account_rate < low or rates.isk_account_rate > high:
        result.errors.append("Return on the ISK account must be between -50% and 50%")
    if rates.isk_account_rate > ISK_RATE_WARNING:
        result.warnings.append(
            "High expected ISK return (above 15% per year) - consider more conservative assumptions"
        )


def _validate_pensions(pensions: PensionSettings, result: ValidationResult) -> None:
    start_age = pensions.general.withdrawal_start_age
    if start_age < GENERAL_PENSION_EARLIEST:
        result.errors.append(f"General pension can be drawn at the earliest at age {GENERAL_PENSION_EARLIEST}")
    if start_age > GENERAL_PENSION_LATEST:
        result.warnings.append(f"General pension should be drawn at the latest at age {GENERAL_PENSION_LATEST}")

    for account in pensions.accounts:
        account_start = account.withdrawal.start_age
        if account_start < account.earliest_withdrawal_age:
            result.errors.append(
                f"{account.name}: withdrawal age too early (minimum {account.earliest_withdrawal_age})"
            )
        if account_start > account.latest_withdrawal_age:
            result.warnings.append(f"{account.name}: late withdrawal may reduce the total pension")
        if account.current_value == 0 and not account.expected_monthly_pension:
            result.warnings.append(f"{account.name}: no value given - check the details")


def validate_inputs(inputs: SimulationInputs, config: SimulationConfig | None = None) -> ValidationResult:
    """Collect blocking errors and advisory warnings for one run."""
    config = config or SimulationConfig()
    result = ValidationResult()

    _validate_profile(inputs, result)
    _validate_amounts(inputs, result)
    _validate_income(inputs, result)
    _validate_expenses(inputs, result)

    if config.use_custom_investment_rates:
        _validate_investment_rates(inputs, result)

    if config.include_pensions and inputs.pensions is not None:
        _validate_pensions(inputs.pensions, result)

    return result
