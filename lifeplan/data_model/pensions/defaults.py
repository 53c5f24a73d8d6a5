from __future__ import annotations

from typing import Dict

from .constants import GENERAL, OCCUPATIONAL, PRIVATE
from .items import GeneralPension, PensionAccount, PensionSettings, WithdrawalSettings

PENSION_ACCOUNT_TEMPLATES: Dict[str, dict] = {
    "allman": {
        "name": "Allmän pension",
        "type": GENERAL,
        "provider": "Pensionsmyndigheten",
        "can_choose_withdrawal_age": True,
        "earliest_withdrawal_age": 62,
        "latest_withdrawal_age": 70,
    },
    "itp1": {
        "name": "ITP1 Tjänstepension",
        "type": OCCUPATIONAL,
        "provider": "Collectum",
        "can_choose_withdrawal_age": True,
        "earliest_withdrawal_age": 55,
        "latest_withdrawal_age": 70,
    },
    "itp2": {
        "name": "ITP2 Tjänstepension",
        "type": OCCUPATIONAL,
        "provider": "Alecta/Collectum",
        "can_choose_withdrawal_age": True,
        "earliest_withdrawal_age": 55,
        "latest_withdrawal_age": 70,
    },
    "saflo": {
        "name": "Avtalspension SAF-LO",
        "type": OCCUPATIONAL,
        "provider": "Fora",
        "can_choose_withdrawal_age": True,
        "earliest_withdrawal_age": 55,
        "latest_withdrawal_age": 70,
    },
    "ips": {
        "name": "Privat pensionssparande (IPS)",
        "type": PRIVATE,
        "provider": "Eget val",
        "can_choose_withdrawal_age": True,
        "earliest_withdrawal_age": 55,
        "latest_withdrawal_age": 100,
    },
}


def account_from_template(
    template: str,
    account_id: str,
    current_value: float,
    start_age: int,
    monthly_amount: float = 0.0,
    is_lifelong: bool = True,
    expected_monthly_pension: float | None = None,
) -> PensionAccount:
    try:
        base = PENSION_ACCOUNT_TEMPLATES[template]
    except KeyError:
        raise ValueError(f"Unknown pension template: {template}") from None
    return PensionAccount(
        id=account_id,
        current_value=current_value,
        expected_monthly_pension=expected_monthly_pension,
        withdrawal=WithdrawalSettings(
            start_age=start_age,
            monthly_amount=monthly_amount,
            is_lifelong=is_lifelong,
        ),
        **base,
    )


def default_pension_settings() -> PensionSettings:
    return PensionSettings(general=GeneralPension(withdrawal_start_age=65), accounts=())
