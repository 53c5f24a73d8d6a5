# data_model/plan.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from .pensions import PensionSettings

Gender = Literal["man", "kvinna"]


@dataclass(frozen=True)
class UserProfile:
    current_age: int
    gender: Gender
    desired_retirement_age: int


@dataclass(frozen=True)
class IncomeData:
    monthly_salary: float
    real_salary_growth: float = 0.0

    def annual_salary(self) -> float:
        return self.monthly_salary * 12.0


@dataclass(frozen=True)
class ExpenseData:
    monthly_living: float

    def annual_amount(self) -> float:
        return self.monthly_living * 12.0


@dataclass(frozen=True)
class AssetData:
    liquid_savings: float = 0.0
    isk_account: float = 0.0


@dataclass(frozen=True)
class InvestmentRates:
    liquid_savings_rate: float
    isk_account_rate: float


@dataclass(frozen=True)
class SimulationInputs:
    profile: UserProfile
    income: IncomeData
    expenses: ExpenseData
    assets: AssetData
    investments: Optional[InvestmentRates] = None
    pensions: Optional[PensionSettings] = None


@dataclass(frozen=True)
class SimulationConfig:
    include_pensions: bool = False
    use_custom_investment_rates: bool = False
    enable_transparency: bool = False
