# data_model/projection.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CalculationStep:
    """One labelled step of a tax derivation, kept for auditing."""

    description: str
    formula: str
    inputs: Dict[str, float]
    result: float


@dataclass(frozen=True)
class TransparentCalculation:
    category: str
    steps: Tuple[CalculationStep, ...]
    final_result: float


@dataclass(frozen=True)
class YearCalculations:
    gross_income: float
    pension_fee: float
    municipal_tax: float
    state_tax: float
    isk_tax: float
    total_tax: float
    net_income: float
    cash_flow: float


@dataclass(frozen=True)
class PensionIncome:
    """Monthly pension amounts paid out during the year."""

    general: float = 0.0
    occupational: float = 0.0
    private: float = 0.0

    @property
    def total(self) -> float:
        return self.general + self.occupational + self.private


@dataclass(frozen=True)
class PensionCapital:
    general: float = 0.0
    occupational: float = 0.0
    private: float = 0.0

    @property
    def total(self) -> float:
        return self.general + self.occupational + self.private


@dataclass(frozen=True)
class YearProjection:
    year: int
    age: int
    salary: float
    expenses: float
    savings: float
    net_worth: float
    calculations: YearCalculations
    pension_income: Optional[PensionIncome] = None
    pension_capital: Optional[PensionCapital] = None
    tax_breakdown: Optional[Tuple[TransparentCalculation, ...]] = None


@dataclass(frozen=True)
class SimulationSummary:
    max_net_worth: float = 0.0
    retirement_net_worth: float = 0.0
    final_net_worth: float = 0.0
    total_savings: float = 0.0
    average_yearly_savings: float = 0.0
    years_of_positive_cash_flow: int = 0
    break_even_age: Optional[int] = None
    expected_monthly_pension: float = 0.0
    pension_compensation_ratio: float = 0.0
    capital_duration_years: int = 0
    total_pension_capital: float = 0.0
    average_monthly_pension: float = 0.0
    pension_duration: int = 0


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class SimulationResult:
    projections: List[YearProjection] = field(default_factory=list)
    summary: Optional[SimulationSummary] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    coercions: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors
