"""Murabaha amortization engine - cost-plus-profit installment schedules"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List

from murabaha_gateway.domain.exceptions import ComputationError, ValidationError
from murabaha_gateway.domain.models import CalculationResult, DealParameters, DealSummary, ScheduleRow
from murabaha_gateway.utils.date_utils import monthly_due_dates

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")
MAX_DURATION_MONTHS = 1200  # 100 years


def _to_decimal(field: str, value: Any) -> Decimal:
    if value is None:
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, (int, str)):
            number = Decimal(str(value).strip())
        elif isinstance(value, float):
            number = Decimal(str(value))  # repr keeps 0.05 as 0.05
        else:
            raise ValidationError(field, "must be a number")
    except InvalidOperation:
        raise ValidationError(field, "must be a number")
    if not number.is_finite():
        raise ValidationError(field, "must be a finite number")
    return number


def normalize_profit_rate(rate: Decimal) -> Decimal:
    """
    Convert an annual profit rate to a fraction.

    Callers send the rate either as a fraction (0.05) or as a percentage (5).
    Policy: any value strictly greater than 1 is a percentage and is divided
    by 100; values up to and including 1 are already fractions (1 == 100%).
    """
    return rate / HUNDRED if rate > ONE else rate


def validate_parameters(params: DealParameters) -> tuple[Decimal, Decimal, int, Decimal, Decimal]:
    """
    Check deal inputs and return them as exact decimals.

    Raises:
        ValidationError: naming the first offending field
    """
    asset_price = _to_decimal("asset_price", params.asset_price)
    if asset_price <= ZERO:
        raise ValidationError("asset_price", "must be greater than 0")

    rate = _to_decimal("annual_profit_rate", params.annual_profit_rate)
    if rate < ZERO:
        raise ValidationError("annual_profit_rate", "must not be negative")

    months = params.duration_months
    if months is None:
        raise ValidationError("duration_months", "is required")
    if isinstance(months, bool) or not isinstance(months, int):
        raise ValidationError("duration_months", "must be an integer")
    if months < 1:
        raise ValidationError("duration_months", "must be at least 1")
    if months > MAX_DURATION_MONTHS:
        raise ValidationError("duration_months", f"must be at most {MAX_DURATION_MONTHS}")

    down_pct = _to_decimal("down_payment_percentage", params.down_payment_percentage)
    if down_pct < ZERO or down_pct > ONE:
        raise ValidationError("down_payment_percentage", "must be between 0 and 1")

    deposit = _to_decimal("security_deposit", params.security_deposit)
    if deposit < ZERO:
        raise ValidationError("security_deposit", "must not be negative")
    if asset_price * down_pct + deposit > asset_price:
        raise ValidationError("security_deposit", "upfront payments exceed the asset price")

    return asset_price, rate, months, down_pct, deposit


def summarize(params: DealParameters) -> DealSummary:
    """Compute down payment, financed amount, profit and installment totals"""
    asset_price, rate, months, down_pct, deposit = validate_parameters(params)
    rate = normalize_profit_rate(rate)

    down_payment = asset_price * down_pct + deposit
    financed = asset_price - down_payment
    total_profit = financed * rate * Decimal(months) / MONTHS_PER_YEAR
    total_cost = financed + total_profit

    return DealSummary(
        asset_price=asset_price,
        annual_profit_rate=rate,
        duration_months=months,
        down_payment_percentage=down_pct,
        security_deposit=deposit,
        down_payment=down_payment,
        financed_amount=financed,
        total_profit=total_profit,
        total_cost=total_cost,
        monthly_installment=total_cost / Decimal(months),
    )


def build_schedule(summary: DealSummary, start_date: date) -> List[ScheduleRow]:
    """
    Fold the outstanding balance over the installment months.

    Every installment equals the monthly installment except the last, which
    pays exactly what is left so the schedule sums to the total cost and the
    final remaining balance is zero. Balances never go below zero.
    """
    months = summary.duration_months
    principal_share = summary.financed_amount / Decimal(months)
    profit_share = summary.total_profit / Decimal(months)

    rows = []
    remaining = summary.total_cost
    for month, due_date in enumerate(monthly_due_dates(start_date, months), start=1):
        beginning = remaining
        installment = beginning if month == months else summary.monthly_installment
        remaining = max(beginning - installment, ZERO)

        rows.append(
            ScheduleRow(
                month=month,
                due_date=due_date,
                beginning_balance=beginning,
                principal_paid=principal_share,
                profit_portion=profit_share,
                installment_amount=installment,
                remaining_balance=remaining,
            )
        )

    if rows[-1].remaining_balance != ZERO:
        raise ComputationError(f"Schedule ended with balance {rows[-1].remaining_balance}")

    return rows


def calculate(params: DealParameters, start_date: date | None = None) -> CalculationResult:
    """
    Main entry point: validate deal parameters and produce summary + schedule.

    Args:
        params: Deal inputs (price, rate, duration, down payment %, deposit)
        start_date: Calculation date; first installment is due one month
            later (default: today)

    Example:
        price 100000, rate 0.05, 12 months, 20% down, no deposit
        → financed 80000, profit 4000, total 84000, 12 x 7000
    """
    summary = summarize(params)

    if start_date is None:
        start_date = date.today()

    return CalculationResult(summary=summary, schedule=tuple(build_schedule(summary, start_date)))
