from .constants import GENERAL, OCCUPATIONAL, PRIVATE
from .defaults import PENSION_ACCOUNT_TEMPLATES, account_from_template, default_pension_settings
from .items import GeneralPension, PensionAccount, PensionSettings, WithdrawalSettings

__all__ = [
    "GENERAL",
    "OCCUPATIONAL",
    "PRIVATE",
    "PENSION_ACCOUNT_TEMPLATES",
    "GeneralPension",
    "PensionAccount",
    "PensionSettings",
    "WithdrawalSettings",
    "account_from_template",
    "default_pension_settings",
]
