from __future__ import annotations

from .parameters import PARAMETERS_2025
from .pensions import default_pension_settings
from .plan import (
    AssetData,
    ExpenseData,
    IncomeData,
    InvestmentRates,
    SimulationConfig,
    SimulationInputs,
    UserProfile,
)

DEFAULT_INVESTMENT_RATES = InvestmentRates(
    liquid_savings_rate=PARAMETERS_2025.macro.liquid_savings_return,
    isk_account_rate=PARAMETERS_2025.macro.mixed_portfolio_return,
)

DEFAULT_INPUTS = SimulationInputs(
    profile=UserProfile(current_age=30, gender="kvinna", desired_retirement_age=65),
    income=IncomeData(monthly_salary=45000.0, real_salary_growth=0.016),
    expenses=ExpenseData(monthly_living=25000.0),
    assets=AssetData(liquid_savings=100000.0, isk_account=200000.0),
    investments=DEFAULT_INVESTMENT_RATES,
    pensions=default_pension_settings(),
)

DEFAULT_CONFIG = SimulationConfig()
