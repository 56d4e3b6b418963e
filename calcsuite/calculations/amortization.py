"""
Loan Amortization Calculations

Implements loan payment and amortization schedule calculations,
matching Excel's PMT, IPMT, and PPMT functions, plus an iterative
engine for extra payments and mid-term rate changes.
"""

import logging
from typing import List, Dict, Optional
from datetime import date
from dataclasses import dataclass, field

import numpy as np
from dateutil.relativedelta import relativedelta

from calcsuite.calculations.annuity import compound_growth

logger = logging.getLogger(__name__)

MAX_PERIODS = 600  # 50 years of monthly payments
PAYOFF_EPSILON = 0.01
EXTRA_PAYMENT_FREQUENCIES = ("monthly", "yearly", "one-time")


@dataclass
class RateChange:
    """A new nominal annual rate taking effect at a given period."""

    period: int  # First period (1-based) charged at the new rate
    annual_rate: float  # Annual rate as decimal (e.g., 0.06 for 6%)


@dataclass
class ExtraPayment:
    """Additional principal paid on top of the scheduled payment."""

    amount: float
    frequency: str = "monthly"

    def __post_init__(self):
        if self.frequency not in EXTRA_PAYMENT_FREQUENCIES:
            raise ValueError(
                f"Unknown extra payment frequency '{self.frequency}', "
                f"expected one of {', '.join(EXTRA_PAYMENT_FREQUENCIES)}"
            )
        if self.amount < 0:
            raise ValueError("Extra payment cannot be negative")

    def amount_for(self, period: int) -> float:
        """Extra principal applied in the given period."""
        if self.frequency == "monthly":
            return self.amount
        if self.frequency == "yearly":
            return self.amount if period % 12 == 1 else 0.0
        return self.amount if period == 1 else 0.0


@dataclass
class ScheduleResult:
    """Period-by-period breakdown and summary totals."""

    rows: List[Dict] = field(default_factory=list)
    totals: Dict = field(default_factory=dict)
    amortized: bool = True
    capped: bool = False


def _monthly_rate(annual_rate: float) -> float:
    # Zero and negative rates amortize linearly
    return max(annual_rate / 12, 0.0)


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.05 for 5%)
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0

    monthly_rate = _monthly_rate(annual_rate)

    # P·r(1+r)^n / ((1+r)^n - 1) rewritten as P·r / (1 - (1+r)^-n)
    discount = -compound_growth(monthly_rate, -amortization_months)
    if discount == 0:
        return principal / amortization_months

    return principal * monthly_rate / discount


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    monthly_rate = _monthly_rate(annual_rate)
    payment = calculate_payment(principal, annual_rate, amortization_months)

    growth = compound_growth(monthly_rate, payments_completed)
    if growth == 0:
        return max(0.0, principal - payment * payments_completed)

    balance = principal * (1 + growth) - payment * growth / monthly_rate

    return max(0.0, balance)


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    io_months: int = 0,
    total_months: int = 120,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a fixed-term amortization schedule.

    Interest-only periods come first, then the balance amortizes over
    ``amortization_months``. The schedule stops at payoff or at
    ``total_months``, whichever comes first; a term shorter than the
    lead-in plus amortization leaves the balloon balance on the last row.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal
        amortization_months: Amortization period in months
        io_months: Interest-only period in months
        total_months: Total loan term in months
        start_date: Date of first payment

    Returns:
        List of amortization rows rounded to cents
    """
    if start_date is None:
        start_date = date.today()

    io_periods = min(io_months, total_months)
    monthly_rate = _monthly_rate(annual_rate)
    interest = principal * monthly_rate

    schedule = [
        {
            "period": period,
            "date": (start_date + relativedelta(months=period - 1)).isoformat(),
            "beginning_balance": principal,
            "payment": interest,
            "principal": 0.0,
            "interest": interest,
            "extra_payment": 0.0,
            "rate": annual_rate,
            "ending_balance": principal,
        }
        for period in range(1, io_periods + 1)
    ]

    remaining = total_months - io_periods
    if remaining > 0 and principal > 0:
        amortizing = compute_schedule(
            principal,
            annual_rate,
            term_months=amortization_months,
            start_date=start_date + relativedelta(months=io_periods),
            max_periods=max(MAX_PERIODS, amortization_months),
        )
        for row in amortizing.rows[:remaining]:
            schedule.append({**row, "period": row["period"] + io_periods})

    return round_rows(schedule)


def compute_schedule(
    principal: float,
    annual_rate: float,
    term_months: Optional[int] = None,
    payment: Optional[float] = None,
    extra_payment: Optional[ExtraPayment] = None,
    rate_changes: Optional[List[RateChange]] = None,
    start_date: Optional[date] = None,
    max_periods: int = MAX_PERIODS,
    epsilon: float = PAYOFF_EPSILON,
) -> ScheduleResult:
    """
    Amortize a balance period by period.

    The scheduled payment comes either from the term (standard formula) or
    is given directly. Each period charges interest on the opening balance,
    applies the scheduled payment plus any extra principal, and stops once
    the balance is at or below ``epsilon``. A payment that never covers the
    accruing interest leaves the balance unchanged; the loop then stops at
    ``max_periods`` and the result is marked as capped.

    When a rate change takes effect and the term is known, the payment is
    recomputed from the remaining balance over the remaining periods.

    Args:
        principal: Opening balance
        annual_rate: Nominal annual rate as decimal
        term_months: Amortization term; mutually exclusive with ``payment``
        payment: Fixed periodic payment; mutually exclusive with ``term_months``
        extra_payment: Optional extra principal schedule
        rate_changes: Optional rate changes, any order
        start_date: Date of first payment (defaults to today)
        max_periods: Iteration safety cap
        epsilon: Balance treated as paid off

    Returns:
        ScheduleResult with unrounded rows and totals

    Raises:
        ValueError: If neither or both of term_months and payment are given
    """
    if (term_months is None) == (payment is None):
        raise ValueError("Provide exactly one of term_months or payment")
    if term_months is not None and term_months <= 0:
        raise ValueError("Term must be at least one period")
    if payment is not None and payment < 0:
        raise ValueError("Payment cannot be negative")
    if principal < 0:
        raise ValueError("Principal cannot be negative")

    if start_date is None:
        start_date = date.today()

    changes = {change.period: change.annual_rate for change in rate_changes or []}

    rate = annual_rate
    if term_months is not None:
        scheduled_payment = calculate_payment(principal, rate, term_months)
    else:
        scheduled_payment = payment
    initial_payment = scheduled_payment

    rows = []
    balance = float(principal)
    total_interest = 0.0
    total_principal = 0.0
    total_extra = 0.0
    total_paid = 0.0
    unpaid_interest = 0.0
    period = 0

    while balance > epsilon and period < max_periods:
        period += 1

        if period in changes:
            rate = changes[period]
            if term_months is not None and term_months - period + 1 > 0:
                scheduled_payment = calculate_payment(
                    balance, rate, term_months - period + 1
                )
            logger.debug(
                "Rate change at period %d: %.4f%%, payment %.2f",
                period,
                rate * 100,
                scheduled_payment,
            )

        interest = balance * _monthly_rate(rate)

        # Principal from the scheduled payment never goes negative
        scheduled_principal = scheduled_payment - interest
        if scheduled_principal < 0:
            unpaid_interest += -scheduled_principal
            scheduled_principal = 0.0
        if term_months is not None and period >= term_months:
            # Last scheduled period clears any residue
            scheduled_principal = balance

        extra = extra_payment.amount_for(period) if extra_payment else 0.0
        principal_pmt = min(scheduled_principal + extra, balance)
        if balance - principal_pmt <= epsilon:
            principal_pmt = balance

        if principal_pmt >= scheduled_principal + extra:
            extra_applied = extra
        else:
            extra_applied = max(0.0, principal_pmt - scheduled_principal)
        interest_paid = min(interest, scheduled_payment) if interest > 0 else 0.0
        period_payment = interest_paid + principal_pmt

        beginning_balance = balance
        balance = max(0.0, balance - principal_pmt)

        # Interest the payment did not cover is tracked in unpaid_interest
        total_interest += interest_paid
        total_principal += principal_pmt
        total_extra += extra_applied
        total_paid += period_payment

        rows.append(
            {
                "period": period,
                "date": (start_date + relativedelta(months=period - 1)).isoformat(),
                "beginning_balance": beginning_balance,
                "payment": period_payment,
                "principal": principal_pmt,
                "interest": interest,
                "extra_payment": extra_applied,
                "rate": rate,
                "ending_balance": balance,
            }
        )

    amortized = balance <= epsilon
    capped = not amortized

    if capped:
        logger.warning(
            "Schedule did not amortize within %d periods; balance %.2f remains",
            max_periods,
            balance,
        )

    totals = {
        "payment": initial_payment,
        "total_interest": total_interest,
        "total_principal": total_principal,
        "total_extra_payments": total_extra,
        "total_paid": total_paid,
        "unpaid_interest": unpaid_interest,
        "payoff_periods": len(rows),
        "final_balance": balance,
        "payoff_date": rows[-1]["date"] if rows else None,
        "amortized": amortized,
    }

    return ScheduleResult(rows=rows, totals=totals, amortized=amortized, capped=capped)


def compare_extra_payments(
    principal: float,
    annual_rate: float,
    term_months: int,
    extra_payment: ExtraPayment,
    start_date: Optional[date] = None,
    max_periods: int = MAX_PERIODS,
) -> Dict:
    """
    Compare a loan with and without an extra payment schedule.

    Returns:
        Dict with both schedules plus interest and time savings
    """
    baseline = compute_schedule(
        principal,
        annual_rate,
        term_months=term_months,
        start_date=start_date,
        max_periods=max_periods,
    )
    accelerated = compute_schedule(
        principal,
        annual_rate,
        term_months=term_months,
        extra_payment=extra_payment,
        start_date=start_date,
        max_periods=max_periods,
    )

    return {
        "baseline": baseline,
        "accelerated": accelerated,
        "interest_savings": baseline.totals["total_interest"]
        - accelerated.totals["total_interest"],
        "periods_saved": baseline.totals["payoff_periods"]
        - accelerated.totals["payoff_periods"],
    }


def annualize_schedule(rows: List[Dict]) -> List[Dict]:
    """
    Roll monthly rows up to year-end snapshots.

    Year N covers periods 12(N-1)+1 through 12N; the final partial year is
    included. Rate and payment are those of the year's last period.
    """
    if not rows:
        return []

    periods = np.array([row["period"] for row in rows])
    years = (periods - 1) // 12 + 1
    interest = np.array([row["interest"] for row in rows])
    principal = np.array([row["principal"] for row in rows])
    paid = np.array([row["payment"] for row in rows])

    annual = []
    for year in np.unique(years):
        mask = years == year
        last = rows[int(np.flatnonzero(mask)[-1])]
        annual.append(
            {
                "year": int(year),
                "rate": last.get("rate"),
                "payment": last["payment"],
                "total_paid": float(paid[mask].sum()),
                "interest": float(interest[mask].sum()),
                "principal": float(principal[mask].sum()),
                "ending_balance": last["ending_balance"],
            }
        )

    return annual


def round_rows(rows: List[Dict], digits: int = 2) -> List[Dict]:
    """Round monetary fields for display; rate and period are left as-is."""
    money_fields = (
        "beginning_balance",
        "payment",
        "principal",
        "interest",
        "extra_payment",
        "ending_balance",
        "total_paid",
    )
    return [
        {
            key: round(value, digits) if key in money_fields and value is not None else value
            for key, value in row.items()
        }
        for row in rows
    ]


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)
