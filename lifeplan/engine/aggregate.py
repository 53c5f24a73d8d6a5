from typing import Sequence

import pandas as pd

from ..data_model import YearProjection

REQUIRED_COLUMNS = {"Year", "Age", "NetWorth"}


def projections_to_frame(projections: Sequence[YearProjection]) -> pd.DataFrame:
    """Flatten yearly projections to one row per year."""
    records = []
    for p in projections:
        calc = p.calculations
        row = {
            "Year": p.year,
            "Age": p.age,
            "Salary": p.salary,
            "Expenses": p.expenses,
            "Savings": p.savings,
            "NetWorth": p.net_worth,
            "GrossIncome": calc.gross_income,
            "PensionFee": calc.pension_fee,
            "MunicipalTax": calc.municipal_tax,
            "StateTax": calc.state_tax,
            "IskTax": calc.isk_tax,
            "TotalTax": calc.total_tax,
            "NetIncome": calc.net_income,
            "CashFlow": calc.cash_flow,
        }
        if p.pension_income is not None:
            row["PensionGeneral"] = p.pension_income.general
            row["PensionOccupational"] = p.pension_income.occupational
            row["PensionPrivate"] = p.pension_income.private
            row["PensionTotal"] = p.pension_income.total
        if p.pension_capital is not None:
            row["CapitalGeneral"] = p.pension_capital.general
            row["CapitalOccupational"] = p.pension_capital.occupational
            row["CapitalPrivate"] = p.pension_capital.private
            row["CapitalTotal"] = p.pension_capital.total
        records.append(row)
    return pd.DataFrame(records)


def milestone_rows(df: pd.DataFrame, every: int = 5) -> pd.DataFrame:
    """Every n-th simulated year plus the final year."""
    if df.empty:
        return df
    missing = REQUIRED_COLUMNS.difference(df.columns)
    if missing:
        raise KeyError(f"Missing required columns: {', '.join(sorted(missing))}")

    every = max(1, int(every))
    df = df.sort_values("Year")
    mask = (df["Year"] % every == 0) | (df["Year"] == df["Year"].max())
    return df[mask].reset_index(drop=True)
