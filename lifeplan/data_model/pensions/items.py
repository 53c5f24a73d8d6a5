from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import GENERAL, OCCUPATIONAL, PRIVATE


@dataclass(frozen=True)
class WithdrawalSettings:
    start_age: int
    monthly_amount: float = 0.0
    is_percentage: bool = False  # True = capital-ratio rule, False = fixed monthly amount
    is_lifelong: bool = True  # True = pays for remaining lifetime, False = until depleted

    def fixed_monthly_amount(self) -> float:
        if self.is_percentage:
            return 0.0
        return self.monthly_amount


@dataclass(frozen=True)
class PensionAccount:
    id: str
    name: str
    type: str
    current_value: float
    withdrawal: WithdrawalSettings
    provider: str = ""
    expected_monthly_pension: Optional[float] = None
    can_choose_withdrawal_age: bool = True
    earliest_withdrawal_age: int = 55
    latest_withdrawal_age: int = 70

    def normalized_type(self) -> str:
        kind = self.type.lower()
        if kind in {OCCUPATIONAL, "tjänste", "occupational"}:
            return OCCUPATIONAL
        if kind in {GENERAL, "allmän", "general"}:
            return GENERAL
        return PRIVATE


@dataclass(frozen=True)
class GeneralPension:
    current_inkomstpension: float = 0.0
    current_premiepension: float = 0.0
    estimated_monthly_amount: float = 0.0
    withdrawal_start_age: int = 65

    def total_capital(self) -> float:
        return self.current_inkomstpension + self.current_premiepension


@dataclass(frozen=True)
class PensionSettings:
    general: GeneralPension = field(default_factory=GeneralPension)
    accounts: Tuple[PensionAccount, ...] = ()

    def total_capital(self) -> float:
        return self.general.total_capital() + sum(acc.current_value for acc in self.accounts)
