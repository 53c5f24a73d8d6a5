from .defaults import DEFAULT_CONFIG, DEFAULT_INPUTS, DEFAULT_INVESTMENT_RATES
from .parameters import (
    PARAMETER_TABLES,
    PARAMETERS_2025,
    PARAMETERS_2026,
    ProjectionParameters,
    get_parameters,
    load_parameters_from_env,
)
from .payload import config_from_payload, inputs_from_payload
from .pensions import (
    PENSION_ACCOUNT_TEMPLATES,
    GeneralPension,
    PensionAccount,
    PensionSettings,
    WithdrawalSettings,
    account_from_template,
)
from .plan import (
    AssetData,
    ExpenseData,
    IncomeData,
    InvestmentRates,
    SimulationConfig,
    SimulationInputs,
    UserProfile,
)
from .projection import (
    CalculationStep,
    PensionCapital,
    PensionIncome,
    SimulationResult,
    SimulationSummary,
    TransparentCalculation,
    ValidationResult,
    YearCalculations,
    YearProjection,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_INPUTS",
    "DEFAULT_INVESTMENT_RATES",
    "PARAMETER_TABLES",
    "PARAMETERS_2025",
    "PARAMETERS_2026",
    "PENSION_ACCOUNT_TEMPLATES",
    "AssetData",
    "CalculationStep",
    "ExpenseData",
    "GeneralPension",
    "IncomeData",
    "InvestmentRates",
    "PensionAccount",
    "PensionCapital",
    "PensionIncome",
    "PensionSettings",
    "ProjectionParameters",
    "SimulationConfig",
    "SimulationInputs",
    "SimulationResult",
    "SimulationSummary",
    "TransparentCalculation",
    "UserProfile",
    "ValidationResult",
    "WithdrawalSettings",
    "YearCalculations",
    "YearProjection",
    "account_from_template",
    "config_from_payload",
    "get_parameters",
    "inputs_from_payload",
    "load_parameters_from_env",
]
