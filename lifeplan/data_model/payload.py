# data_model/payload.py
"""Turn loosely shaped JSON payloads into frozen simulation inputs."""
from __future__ import annotations

from typing import Any, Mapping

from .pensions import GeneralPension, PensionAccount, PensionSettings, WithdrawalSettings
from .plan import (
    AssetData,
    ExpenseData,
    IncomeData,
    InvestmentRates,
    SimulationConfig,
    SimulationInputs,
    UserProfile,
)


def _extract_payload_value(payload: Mapping[str, Any] | None, *keys: str, default=None):
    if not payload:
        return default
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _as_float(value: Any, default: float = 0.0) -> float:
    return float(value if value not in (None, "") else default)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def parse_pension_account(row: Mapping[str, Any], index: int = 0) -> PensionAccount:
    settings = _extract_payload_value(row, "withdrawalSettings", "withdrawal", default={}) or {}
    start_age = int(_extract_payload_value(settings, "startAge", "start_age", default=65))
    expected = _extract_payload_value(row, "expectedMonthlyPension", "expected_monthly_pension")
    return PensionAccount(
        id=str(_extract_payload_value(row, "id", default=f"account-{index + 1}")),
        name=str(_extract_payload_value(row, "name", default=f"Pension {index + 1}")).strip(),
        type=str(_extract_payload_value(row, "type", default="privat")),
        provider=str(_extract_payload_value(row, "provider", default="")),
        current_value=_as_float(_extract_payload_value(row, "currentValue", "current_value")),
        expected_monthly_pension=None if expected is None else _as_float(expected),
        can_choose_withdrawal_age=_as_bool(
            _extract_payload_value(row, "canChooseWithdrawalAge", "can_choose_withdrawal_age", default=True)
        ),
        earliest_withdrawal_age=int(_extract_payload_value(row, "earliestWithdrawalAge", "earliest_withdrawal_age", default=55)),
        latest_withdrawal_age=int(_extract_payload_value(row, "latestWithdrawalAge", "latest_withdrawal_age", default=70)),
        withdrawal=WithdrawalSettings(
            start_age=start_age,
            monthly_amount=_as_float(_extract_payload_value(settings, "monthlyAmount", "monthly_amount")),
            is_percentage=_as_bool(_extract_payload_value(settings, "isPercentage", "is_percentage", default=False)),
            is_lifelong=_as_bool(_extract_payload_value(settings, "isLifelong", "is_lifelong", default=True)),
        ),
    )


def parse_pensions(payload: Mapping[str, Any] | None) -> PensionSettings | None:
    if not payload:
        return None
    general_raw = _extract_payload_value(payload, "generalPension", "general", default={}) or {}
    general = GeneralPension(
        current_inkomstpension=_as_float(
            _extract_payload_value(general_raw, "currentInkomstpension", "current_inkomstpension")
        ),
        current_premiepension=_as_float(
            _extract_payload_value(general_raw, "currentPremiepension", "current_premiepension")
        ),
        estimated_monthly_amount=_as_float(
            _extract_payload_value(general_raw, "estimatedMonthlyAmount", "estimated_monthly_amount")
        ),
        withdrawal_start_age=int(
            _extract_payload_value(general_raw, "withdrawalStartAge", "withdrawal_start_age", default=65)
        ),
    )
    rows = _extract_payload_value(payload, "accounts", default=[]) or []
    accounts = tuple(parse_pension_account(row, i) for i, row in enumerate(rows) if row)
    return PensionSettings(general=general, accounts=accounts)


def inputs_from_payload(payload: Mapping[str, Any]) -> SimulationInputs:
    """Build SimulationInputs from camelCase or snake_case JSON.

    Raises KeyError/TypeError/ValueError on missing or malformed sections; the
    caller decides how to report those.
    """
    profile = payload["profile"]
    income = payload["income"]
    expenses = payload["expenses"]
    assets = _extract_payload_value(payload, "assets", default={}) or {}
    investments = _extract_payload_value(payload, "investments", "investmentRates")

    rates = None
    if investments:
        rates = InvestmentRates(
            liquid_savings_rate=_as_float(_extract_payload_value(investments, "liquidSavingsRate", "liquid_savings_rate")),
            isk_account_rate=_as_float(_extract_payload_value(investments, "iskAccountRate", "isk_account_rate")),
        )

    return SimulationInputs(
        profile=UserProfile(
            current_age=int(_extract_payload_value(profile, "currentAge", "current_age")),
            gender=str(_extract_payload_value(profile, "gender", default="kvinna")),
            desired_retirement_age=int(
                _extract_payload_value(profile, "desiredRetirementAge", "desired_retirement_age")
            ),
        ),
        income=IncomeData(
            monthly_salary=_as_float(_extract_payload_value(income, "monthlySalary", "monthly_salary")),
            real_salary_growth=_as_float(_extract_payload_value(income, "realSalaryGrowth", "real_salary_growth")),
        ),
        expenses=ExpenseData(
            monthly_living=_as_float(_extract_payload_value(expenses, "monthlyLiving", "monthly_living")),
        ),
        assets=AssetData(
            liquid_savings=_as_float(_extract_payload_value(assets, "liquidSavings", "liquid_savings")),
            isk_account=_as_float(_extract_payload_value(assets, "iskAccount", "isk_account")),
        ),
        investments=rates,
        pensions=parse_pensions(_extract_payload_value(payload, "pensions")),
    )


def config_from_payload(payload: Mapping[str, Any] | None) -> SimulationConfig:
    return SimulationConfig(
        include_pensions=_as_bool(_extract_payload_value(payload, "includePensions", "include_pensions", default=False)),
        use_custom_investment_rates=_as_bool(
            _extract_payload_value(payload, "useCustomInvestmentRates", "use_custom_investment_rates", default=False)
        ),
        enable_transparency=_as_bool(
            _extract_payload_value(payload, "enableTransparency", "enable_transparency", default=False)
        ),
    )
