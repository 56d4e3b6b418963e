"""
Time Value of Money Calculations

Future value of lump sums and annuities, and level annuity payments,
matching Excel's FV and PMT functions for end-of-period cash flows.
"""

import math
from typing import List, Dict

COMPOUNDING_PERIODS = {
    "annually": 1,
    "semiannually": 2,
    "quarterly": 4,
    "monthly": 12,
    "daily": 365,
}


def periods_per_year(compounding: str) -> int:
    """Number of compounding periods per year for a named frequency."""
    try:
        return COMPOUNDING_PERIODS[compounding]
    except KeyError:
        raise ValueError(
            f"Unknown compounding frequency '{compounding}', "
            f"expected one of {', '.join(COMPOUNDING_PERIODS)}"
        ) from None


def compound_growth(periodic_rate: float, periods: float) -> float:
    """
    ``(1 + rate) ** periods - 1`` computed without cancellation.

    Stays accurate for rates so small that ``1 + rate`` rounds to 1.0, and
    is exactly 0.0 only for a zero rate or zero periods.
    """
    return math.expm1(periods * math.log1p(periodic_rate))


def future_value(
    present_value: float, annual_rate: float, years: float, compounding: str = "annually"
) -> float:
    """
    Future value of a single amount.

    Args:
        present_value: Amount invested today
        annual_rate: Nominal annual rate as decimal
        years: Investment horizon in years
        compounding: Compounding frequency name

    Returns:
        Value at the end of the horizon
    """
    m = periods_per_year(compounding)
    return present_value * (1 + annual_rate / m) ** (years * m)


def annuity_future_value(
    payment: float, annual_rate: float, years: float, compounding: str = "annually"
) -> float:
    """Future value of a level payment made at the end of every period."""
    m = periods_per_year(compounding)
    periodic_rate = annual_rate / m
    total_periods = years * m

    growth = compound_growth(periodic_rate, total_periods)
    if growth == 0:
        return payment * total_periods

    return payment * growth / periodic_rate


def growing_annuity_future_value(
    payment: float,
    annual_rate: float,
    growth_rate: float,
    years: float,
    compounding: str = "annually",
) -> float:
    """
    Future value of a payment stream growing at ``growth_rate`` per year.

    When the rate equals the growth rate the formula degenerates and every
    payment compounds to the same value, giving ``payment * n``.
    """
    m = periods_per_year(compounding)
    periodic_rate = annual_rate / m
    periodic_growth = growth_rate / m
    total_periods = years * m

    spread = compound_growth(periodic_rate, total_periods) - compound_growth(
        periodic_growth, total_periods
    )
    if periodic_rate == periodic_growth or spread == 0:
        return payment * total_periods

    return payment * spread / (periodic_rate - periodic_growth)


def annuity_payment(
    present_value: float,
    annual_rate: float,
    years: float,
    compounding: str = "monthly",
    due: bool = False,
) -> float:
    """
    Level payment that exhausts a present value over the horizon.

    Args:
        present_value: Amount to be paid out (or borrowed)
        annual_rate: Nominal annual rate as decimal
        years: Payout horizon in years
        compounding: Payment/compounding frequency name
        due: Payments at the start of each period (annuity due)

    Returns:
        Periodic payment
    """
    m = periods_per_year(compounding)
    periodic_rate = annual_rate / m
    total_periods = years * m

    if total_periods <= 0:
        raise ValueError("Payout horizon must be positive")

    # 1 - (1 + r) ** -n, bounded by 1 so large rates cannot overflow
    discount = -compound_growth(periodic_rate, -total_periods)
    if discount == 0:
        return present_value / total_periods

    payment = present_value * periodic_rate / discount
    if due:
        payment /= 1 + periodic_rate
    return payment


def project_growth(
    present_value: float,
    payment: float,
    annual_rate: float,
    years: int,
    compounding: str = "annually",
) -> List[Dict]:
    """
    Year-by-year balance of a lump sum plus level end-of-period contributions.

    Returns:
        One row per year with contributions to date, interest to date and balance
    """
    m = periods_per_year(compounding)
    periodic_rate = annual_rate / m

    rows = []
    balance = present_value
    contributions = present_value

    for year in range(1, years + 1):
        for _ in range(m):
            balance = balance * (1 + periodic_rate) + payment
        contributions += payment * m

        rows.append(
            {
                "year": year,
                "contributions": contributions,
                "interest": balance - contributions,
                "balance": balance,
            }
        )

    return rows
