from datetime import date
from decimal import Decimal

from src.coach_payroll.coach_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.coach_payroll.coach_payroll.payroll.model import round_money
from src.coach_payroll.coach_payroll.settings.model import Settings

SETTINGS = Settings(monthly_fee=Decimal("1100.00"), base_days=31, payment_day=28)


def test_daily_rate_is_exact_decimal():
    calc = StandardPayrollCalculator()

    rate = calc.daily_rate(SETTINGS)

    assert isinstance(rate, Decimal)
    assert round_money(rate) == Decimal("35.48")
    assert rate > Decimal("35.483870")


def test_days_worked_is_inclusive():
    calc = StandardPayrollCalculator()

    assert calc.days_worked(date(2025, 1, 29), date(2025, 2, 28)) == 31
    assert calc.days_worked(date(2025, 2, 10), date(2025, 2, 10)) == 1
    assert calc.days_worked(date(2025, 2, 11), date(2025, 2, 10)) == 0


def test_amount_for_full_cycle():
    calc = StandardPayrollCalculator()

    assert round_money(calc.amount_for(SETTINGS, 31)) == Decimal("1100.00")
    assert round_money(calc.amount_for(SETTINGS, 12)) == Decimal("425.81")
    assert round_money(calc.amount_for(SETTINGS, 19)) == Decimal("674.19")


def test_half_up_rounding():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
