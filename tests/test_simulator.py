import logging

import pytest

from lifeplan.data_model import (
    PARAMETERS_2025,
    AssetData,
    ExpenseData,
    GeneralPension,
    IncomeData,
    InvestmentRates,
    PensionAccount,
    PensionSettings,
    SimulationConfig,
    SimulationInputs,
    UserProfile,
    WithdrawalSettings,
)
from lifeplan.engine import simulate_yearly
from lifeplan.engine.sanitize import NumberSanitizer
from lifeplan.engine.simulator import resolve_investment_rates
from lifeplan.engine.tax import INCOME_TAX, ISK_TAX, pension_fee


def make_inputs(
    age=30,
    retire=65,
    gender="kvinna",
    salary=40000.0,
    growth=0.0,
    living=20000.0,
    liquid=0.0,
    isk=0.0,
    investments=None,
    pensions=None,
):
    return SimulationInputs(
        profile=UserProfile(current_age=age, gender=gender, desired_retirement_age=retire),
        income=IncomeData(monthly_salary=salary, real_salary_growth=growth),
        expenses=ExpenseData(monthly_living=living),
        assets=AssetData(liquid_savings=liquid, isk_account=isk),
        investments=investments,
        pensions=pensions,
    )


def private_account(value, start_age, is_lifelong=True, monthly_amount=0.0, kind="privat"):
    return PensionAccount(
        id="acc-1",
        name="IPS",
        type=kind,
        current_value=value,
        withdrawal=WithdrawalSettings(start_age=start_age, monthly_amount=monthly_amount, is_lifelong=is_lifelong),
    )


def test_runs_from_current_age_to_life_expectancy():
    women = simulate_yearly(make_inputs(gender="kvinna"))
    men = simulate_yearly(make_inputs(gender="man"))

    assert [p.age for p in women] == list(range(30, 86))
    assert men[-1].age == 82
    assert [p.year for p in women][:3] == [0, 1, 2]


def test_salary_grows_until_retirement_then_stops():
    projections = simulate_yearly(make_inputs(growth=0.02, retire=40))

    assert projections[0].salary == pytest.approx(480000.0)
    assert projections[1].salary == pytest.approx(480000.0 * 1.02)
    assert projections[9].salary == pytest.approx(480000.0 * 1.02 ** 9)
    assert all(p.salary == 0.0 for p in projections if p.age >= 40)


def test_savings_is_net_income_minus_expenses():
    projections = simulate_yearly(make_inputs(salary=50000.0, living=30000.0, isk=400000.0))

    first = projections[0]
    assert first.expenses == pytest.approx(360000.0)
    assert first.savings == pytest.approx(first.calculations.net_income - 360000.0)
    assert first.calculations.cash_flow == first.savings
    assert first.calculations.gross_income == pytest.approx(600000.0)


def test_surplus_goes_to_liquid_savings_and_grows():
    inputs = make_inputs(salary=50000.0, living=20000.0, liquid=100000.0)
    projections = simulate_yearly(inputs)

    rate = PARAMETERS_2025.macro.liquid_savings_return
    expected = (100000.0 + projections[0].savings) * (1 + rate)
    assert projections[0].net_worth == pytest.approx(expected)


def test_deficit_drains_liquid_then_isk():
    inputs = make_inputs(salary=20000.0, living=40000.0, liquid=50000.0, isk=500000.0)
    first = simulate_yearly(inputs)[0]

    assert first.savings < -50000.0
    isk_left = 500000.0 - (-first.savings - 50000.0)
    assert first.net_worth == pytest.approx(isk_left * (1 + PARAMETERS_2025.macro.mixed_portfolio_return))


def test_net_worth_never_negative():
    projections = simulate_yearly(make_inputs(salary=15000.0, living=60000.0, liquid=10000.0))

    assert all(p.net_worth >= 0.0 for p in projections)
    assert projections[-1].net_worth == 0.0


def test_zero_assets_pay_no_isk_tax():
    projections = simulate_yearly(make_inputs(liquid=0.0, isk=0.0))

    assert all(p.calculations.isk_tax == 0.0 for p in projections)


def test_high_income_pays_state_tax():
    first = simulate_yearly(make_inputs(salary=100000.0, living=30000.0))[0]

    assert first.calculations.state_tax > 0.0


def test_pension_fee_on_salary_is_capped():
    first = simulate_yearly(make_inputs(salary=150000.0, living=30000.0))[0]

    assert first.calculations.pension_fee == pytest.approx(pension_fee(1800000.0, PARAMETERS_2025.tax))
    assert first.calculations.pension_fee == pytest.approx(80600.0 * 8.07 * 0.93 * 0.07)


def test_projection_is_deterministic():
    inputs = make_inputs(growth=0.015, liquid=50000.0, isk=250000.0)

    assert simulate_yearly(inputs) == simulate_yearly(inputs)


def test_tax_breakdown_only_when_transparency_enabled():
    inputs = make_inputs(isk=300000.0)

    plain = simulate_yearly(inputs)
    detailed = simulate_yearly(inputs, SimulationConfig(enable_transparency=True))

    assert plain[0].tax_breakdown is None
    categories = [calc.category for calc in detailed[0].tax_breakdown]
    assert categories[:2] == [INCOME_TAX, ISK_TAX]


def test_pensions_ignored_unless_enabled():
    pensions = PensionSettings(general=GeneralPension(estimated_monthly_amount=15000.0, withdrawal_start_age=65))
    projections = simulate_yearly(make_inputs(pensions=pensions))

    assert all(p.pension_income is None and p.pension_capital is None for p in projections)


def test_general_pension_starts_at_withdrawal_age():
    pensions = PensionSettings(general=GeneralPension(estimated_monthly_amount=15000.0, withdrawal_start_age=65))
    projections = simulate_yearly(make_inputs(pensions=pensions), SimulationConfig(include_pensions=True))
    by_age = {p.age: p for p in projections}

    assert by_age[64].pension_income.total == 0.0
    assert by_age[65].pension_income.general == pytest.approx(15000.0)
    assert by_age[65].calculations.gross_income == pytest.approx(15000.0 * 12)
    assert by_age[65].calculations.pension_fee == 0.0


def test_fixed_monthly_withdrawal_goes_to_occupational_bucket():
    account = private_account(500000.0, 65, monthly_amount=5000.0, kind="tjänste")
    pensions = PensionSettings(accounts=(account,))
    projections = simulate_yearly(make_inputs(pensions=pensions), SimulationConfig(include_pensions=True))
    at_65 = next(p for p in projections if p.age == 65)

    assert all(p.pension_income.occupational == 0.0 for p in projections if p.age < 65)
    assert all(p.pension_income.private == 0.0 for p in projections)
    assert at_65.pension_income.occupational == pytest.approx(5000.0)


def test_private_account_pays_nothing_before_its_start_age():
    account = private_account(200000.0, 67)
    pensions = PensionSettings(general=GeneralPension(withdrawal_start_age=65), accounts=(account,))
    projections = simulate_yearly(make_inputs(pensions=pensions), SimulationConfig(include_pensions=True))
    by_age = {p.age: p for p in projections}

    assert all(p.pension_income.private == 0.0 for p in projections if p.age < 67)
    assert by_age[67].pension_income.private > 0.0


def test_until_depleted_fixed_amount_stops_when_capital_runs_out():
    account = private_account(100000.0, 65, is_lifelong=False, monthly_amount=5000.0)
    pensions = PensionSettings(general=GeneralPension(withdrawal_start_age=70), accounts=(account,))
    inputs = make_inputs(age=65, retire=66, pensions=pensions)

    projections = simulate_yearly(inputs, SimulationConfig(include_pensions=True))
    paid = [p.pension_income.private * 12 for p in projections]

    assert paid[0] == pytest.approx(60000.0)
    assert paid[1] == pytest.approx(40000.0)
    assert paid[2:] == pytest.approx([0.0] * len(paid[2:]), abs=1e-6)
    assert sum(paid) == pytest.approx(100000.0)
    assert projections[1].pension_capital.private == pytest.approx(0.0, abs=1e-6)


def test_until_depleted_account_pays_four_percent_of_capital():
    account = private_account(120000.0, 65, is_lifelong=False)
    pensions = PensionSettings(general=GeneralPension(withdrawal_start_age=70), accounts=(account,))
    inputs = make_inputs(age=65, retire=66, pensions=pensions)

    projections = simulate_yearly(inputs, SimulationConfig(include_pensions=True))

    assert projections[0].pension_income.private == pytest.approx(400.0)
    assert projections[0].pension_capital.private == pytest.approx(115200.0)
    assert projections[1].pension_income.private == pytest.approx(384.0)


def test_lifelong_account_spreads_capital_over_remaining_life():
    account = private_account(120000.0, 65)
    pensions = PensionSettings(general=GeneralPension(withdrawal_start_age=70), accounts=(account,))
    inputs = make_inputs(age=65, retire=66, gender="kvinna", pensions=pensions)

    first = simulate_yearly(inputs, SimulationConfig(include_pensions=True))[0]

    assert first.pension_income.private == pytest.approx(120000.0 / ((85.4 - 65) * 12))


def test_pension_capital_grows_before_withdrawal_starts():
    account = private_account(100000.0, 65)
    general = GeneralPension(current_inkomstpension=200000.0, withdrawal_start_age=65)
    pensions = PensionSettings(general=general, accounts=(account,))

    first = simulate_yearly(make_inputs(pensions=pensions), SimulationConfig(include_pensions=True))[0]

    macro = PARAMETERS_2025.macro
    assert first.pension_capital.general == pytest.approx(200000.0 * (1 + macro.bonds_return))
    assert first.pension_capital.private == pytest.approx(100000.0 * (1 + macro.mixed_portfolio_return))
    assert first.net_worth >= first.pension_capital.total


def test_simulation_does_not_modify_inputs():
    account = private_account(100000.0, 40, is_lifelong=False)
    pensions = PensionSettings(accounts=(account,))
    inputs = make_inputs(pensions=pensions, liquid=10000.0)

    simulate_yearly(inputs, SimulationConfig(include_pensions=True))

    assert inputs.pensions.accounts[0].current_value == 100000.0
    assert inputs.assets.liquid_savings == 10000.0


def test_custom_rates_are_clamped(caplog):
    inputs = make_inputs(investments=InvestmentRates(liquid_savings_rate=0.5, isk_account_rate=-0.9))
    config = SimulationConfig(use_custom_investment_rates=True)

    with caplog.at_level(logging.WARNING):
        rates = resolve_investment_rates(inputs, config, PARAMETERS_2025)

    assert rates.liquid_savings_rate == 0.20
    assert rates.isk_account_rate == -0.50
    assert "capped" in caplog.text


def test_default_rates_used_without_custom_flag():
    inputs = make_inputs(investments=InvestmentRates(liquid_savings_rate=0.1, isk_account_rate=0.1))

    rates = resolve_investment_rates(inputs, SimulationConfig(), PARAMETERS_2025)

    assert rates.liquid_savings_rate == PARAMETERS_2025.macro.liquid_savings_return
    assert rates.isk_account_rate == PARAMETERS_2025.macro.mixed_portfolio_return


def test_extreme_values_are_counted_by_sanitizer():
    sanitizer = NumberSanitizer()

    simulate_yearly(make_inputs(salary=2e11), sanitizer=sanitizer)

    assert sanitizer.coercions > 0
