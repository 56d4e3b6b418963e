"""
Adjustable-Rate Mortgage Projection

Projects an ARM's rate path (fixed period, then capped adjustments toward
the fully indexed rate) and runs it through the amortization engine.
"""

from typing import List, Dict, Optional
from datetime import date

from calcsuite.calculations.amortization import (
    MAX_PERIODS,
    RateChange,
    annualize_schedule,
    compute_schedule,
)
from calcsuite.calculations.tiers import Tier, TierTable

VOLATILITY_TIERS = TierTable(
    name="arm_volatility",
    tiers=[
        Tier(
            "Low",
            0.10,
            "Payments may change over time. Plan for variability and cushion your budget.",
        ),
        Tier(
            "Moderate",
            0.25,
            "Moderate volatility risk. Ensure emergency funds and stress-test your budget.",
            recommendations=("Keep three to six months of payments in reserve",),
        ),
        Tier(
            "High",
            None,
            "High payment volatility risk. Consider affordability buffers or a fixed-rate alternative.",
            recommendations=(
                "Compare against a fixed-rate quote",
                "Budget for the lifetime-cap payment",
            ),
            warnings=("Payment can rise sharply at the first adjustment",),
        ),
    ],
)


def build_rate_path(
    initial_rate: float,
    fixed_months: int,
    total_months: int,
    index_rate: float,
    margin: float,
    adjust_interval_months: int,
    periodic_cap: float,
    lifetime_cap: float,
) -> List[RateChange]:
    """
    Rate changes after the fixed period.

    Each adjustment moves the rate toward ``index_rate + margin`` by at most
    ``periodic_cap`` and never above ``initial_rate + lifetime_cap``.
    """
    if adjust_interval_months <= 0:
        raise ValueError("Adjustment interval must be positive")

    target_rate = index_rate + margin
    max_rate = initial_rate + lifetime_cap

    changes = []
    elapsed = fixed_months
    last_rate = initial_rate

    while elapsed < total_months:
        step = min(periodic_cap, abs(target_rate - last_rate))
        direction = 1 if target_rate >= last_rate else -1
        new_rate = min(last_rate + direction * step, max_rate)

        changes.append(RateChange(period=elapsed + 1, annual_rate=new_rate))

        elapsed += min(adjust_interval_months, total_months - elapsed)
        last_rate = new_rate

    return changes


def payment_volatility(payments: List[float]) -> float:
    """Spread of payments relative to the smallest one."""
    if not payments:
        return 0.0
    smallest = min(payments)
    return (max(payments) - smallest) / (smallest or 1)


def project_arm(
    principal: float,
    initial_rate: float,
    fixed_years: int,
    term_years: int,
    index_rate: float,
    margin: float,
    adjust_interval_years: int,
    periodic_cap: float,
    lifetime_cap: float,
    start_date: Optional[date] = None,
    max_periods: int = MAX_PERIODS,
) -> Dict:
    """
    Project payments for an adjustable-rate loan.

    All rates are annual decimals (0.055 for 5.5%).

    Returns:
        Dict with the rate path, engine result, yearly rows, volatility
        and its interpretation
    """
    total_months = term_years * 12
    fixed_months = min(fixed_years * 12, total_months)

    rate_changes = build_rate_path(
        initial_rate=initial_rate,
        fixed_months=fixed_months,
        total_months=total_months,
        index_rate=index_rate,
        margin=margin,
        adjust_interval_months=adjust_interval_years * 12,
        periodic_cap=periodic_cap,
        lifetime_cap=lifetime_cap,
    )

    result = compute_schedule(
        principal,
        initial_rate,
        term_months=total_months,
        rate_changes=rate_changes,
        start_date=start_date,
        max_periods=max_periods,
    )

    yearly = annualize_schedule(result.rows)
    # Final period carries rounding residue, so use the scheduled payments
    scheduled = [row["payment"] for row in result.rows[:-1]] or [
        row["payment"] for row in result.rows
    ]
    volatility = payment_volatility(scheduled)

    return {
        "rate_changes": rate_changes,
        "schedule": result,
        "yearly": yearly,
        "volatility": volatility,
        "assessment": VOLATILITY_TIERS.classify(volatility),
    }
