"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Rates are accepted as percentages and converted to decimals here.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from calcsuite.config import get_settings
from calcsuite.calculations import amortization, annuity, arm, catalog

router = APIRouter()


def _limit_rows(rows: List[dict]) -> List[dict]:
    limit = get_settings().schedule_row_limit
    return rows[:limit] if limit > 0 else rows


class PaymentInput(BaseModel):
    """Input for payment calculation."""

    principal: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0, le=100)
    term_months: int = Field(..., ge=1)


class PaymentResponse(BaseModel):
    """Fixed periodic payment and lifetime totals."""

    payment: float
    total_paid: float
    total_interest: float


@router.post("/payment", response_model=PaymentResponse)
async def calculate_payment_endpoint(inputs: PaymentInput):
    """Calculate the standard fixed monthly payment."""
    payment = amortization.calculate_payment(
        inputs.principal, inputs.annual_rate_percent / 100, inputs.term_months
    )
    total_paid = payment * inputs.term_months

    return PaymentResponse(
        payment=round(payment, 2),
        total_paid=round(total_paid, 2),
        total_interest=round(total_paid - inputs.principal, 2),
    )


class AmortizationInput(BaseModel):
    """Input for fixed-term amortization calculation."""

    principal: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0, le=100)
    amortization_years: int = Field(..., ge=1, le=50)
    io_months: int = Field(0, ge=0)
    total_months: int = Field(120, ge=1, le=600)
    start_date: Optional[date] = None


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a fixed-term loan amortization schedule."""
    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate_percent / 100,
        amortization_months=inputs.amortization_years * 12,
        io_months=inputs.io_months,
        total_months=inputs.total_months,
        start_date=inputs.start_date,
    )

    return {
        "schedule": _limit_rows(schedule),
        "total_interest": round(amortization.calculate_total_interest(schedule), 2),
        "total_principal": round(sum(row["principal"] for row in schedule), 2),
    }


class RateChangeInput(BaseModel):
    """A new annual rate from a given period onward."""

    period: int = Field(..., ge=1)
    annual_rate_percent: float = Field(..., ge=0, le=100)


class ExtraPaymentInput(BaseModel):
    """Extra principal paid on top of the scheduled payment."""

    amount: float = Field(..., ge=0)
    frequency: str = Field("monthly", pattern="^(monthly|yearly|one-time)$")


class ScheduleInput(BaseModel):
    """Input for the iterative amortization engine."""

    principal: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0, le=100)
    term_months: Optional[int] = Field(None, ge=1)
    payment: Optional[float] = Field(None, ge=0)
    extra_payment: Optional[ExtraPaymentInput] = None
    rate_changes: List[RateChangeInput] = []
    start_date: Optional[date] = None


class ScheduleResponse(BaseModel):
    """Amortization rows, yearly roll-up and totals."""

    rows: List[dict]
    yearly: List[dict]
    totals: dict
    amortized: bool
    capped: bool


def _run_schedule(inputs: ScheduleInput) -> amortization.ScheduleResult:
    settings = get_settings()
    extra = (
        amortization.ExtraPayment(inputs.extra_payment.amount, inputs.extra_payment.frequency)
        if inputs.extra_payment
        else None
    )
    return amortization.compute_schedule(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate_percent / 100,
        term_months=inputs.term_months,
        payment=inputs.payment,
        extra_payment=extra,
        rate_changes=[
            amortization.RateChange(change.period, change.annual_rate_percent / 100)
            for change in inputs.rate_changes
        ],
        start_date=inputs.start_date,
        max_periods=settings.max_amortization_periods,
        epsilon=settings.payoff_epsilon,
    )


def _totals_for_display(totals: dict) -> dict:
    return {
        key: round(value, 2) if isinstance(value, float) else value
        for key, value in totals.items()
    }


@router.post("/schedule", response_model=ScheduleResponse)
async def calculate_schedule(inputs: ScheduleInput):
    """
    Amortize with optional extra payments and rate changes.

    A payment that never covers interest returns a capped result
    (``amortized`` false) rather than an error.
    """
    try:
        result = _run_schedule(inputs)
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ScheduleResponse(
        rows=_limit_rows(amortization.round_rows(result.rows)),
        yearly=amortization.round_rows(amortization.annualize_schedule(result.rows)),
        totals=_totals_for_display(result.totals),
        amortized=result.amortized,
        capped=result.capped,
    )


class ExtraPaymentsInput(BaseModel):
    """Input for extra payment comparison."""

    principal: float = Field(..., gt=0)
    annual_rate_percent: float = Field(..., ge=0, le=50)
    term_years: int = Field(..., ge=1, le=50)
    extra_payment: ExtraPaymentInput
    start_date: Optional[date] = None


@router.post("/extra-payments")
async def calculate_extra_payments(inputs: ExtraPaymentsInput):
    """Compare a loan with and without extra principal payments."""
    comparison = amortization.compare_extra_payments(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate_percent / 100,
        term_months=inputs.term_years * 12,
        extra_payment=amortization.ExtraPayment(
            inputs.extra_payment.amount, inputs.extra_payment.frequency
        ),
        start_date=inputs.start_date,
        max_periods=get_settings().max_amortization_periods,
    )

    return {
        "baseline": _totals_for_display(comparison["baseline"].totals),
        "with_extra_payments": _totals_for_display(comparison["accelerated"].totals),
        "interest_savings": round(comparison["interest_savings"], 2),
        "periods_saved": comparison["periods_saved"],
    }


class ARMInput(catalog.ARMInputs):
    """Input for adjustable-rate mortgage projection."""

    start_date: Optional[date] = None


@router.post("/arm")
async def calculate_arm(inputs: ARMInput):
    """Project ARM rates and payments year by year."""
    projection = arm.project_arm(
        principal=inputs.loan_amount,
        initial_rate=inputs.initial_rate_percent / 100,
        fixed_years=inputs.fixed_years,
        term_years=inputs.term_years,
        index_rate=inputs.index_rate_percent / 100,
        margin=inputs.margin_percent / 100,
        adjust_interval_years=inputs.adjust_interval_years,
        periodic_cap=inputs.periodic_cap_percent / 100,
        lifetime_cap=inputs.lifetime_cap_percent / 100,
        start_date=inputs.start_date,
        max_periods=get_settings().max_amortization_periods,
    )

    return {
        "rate_changes": [
            {"period": change.period, "rate_percent": round(change.annual_rate * 100, 4)}
            for change in projection["rate_changes"]
        ],
        "yearly": amortization.round_rows(projection["yearly"]),
        "totals": _totals_for_display(projection["schedule"].totals),
        "volatility": round(projection["volatility"], 4),
        "assessment": projection["assessment"],
    }


class FutureValueInput(BaseModel):
    """Input for future value calculation."""

    calculation_type: str = Field(
        "single-amount", pattern="^(single-amount|annuity|growing-annuity)$"
    )
    present_value: float = Field(0.0, ge=0)
    payment: float = Field(0.0, ge=0)
    annual_rate_percent: float = Field(..., ge=0, le=100)
    growth_rate_percent: float = Field(0.0, ge=-50, le=100)
    years: int = Field(..., ge=1, le=100)
    compounding: str = "annually"


@router.post("/future-value")
async def calculate_future_value(inputs: FutureValueInput):
    """Future value of a lump sum, level annuity or growing annuity."""
    rate = inputs.annual_rate_percent / 100

    try:
        if inputs.calculation_type == "single-amount":
            value = annuity.future_value(
                inputs.present_value, rate, inputs.years, inputs.compounding
            )
            contributions = inputs.present_value
        elif inputs.calculation_type == "annuity":
            value = annuity.annuity_future_value(
                inputs.payment, rate, inputs.years, inputs.compounding
            )
            contributions = inputs.payment * inputs.years * annuity.periods_per_year(
                inputs.compounding
            )
        else:
            value = annuity.growing_annuity_future_value(
                inputs.payment,
                rate,
                inputs.growth_rate_percent / 100,
                inputs.years,
                inputs.compounding,
            )
            m = annuity.periods_per_year(inputs.compounding)
            growth = inputs.growth_rate_percent / 100 / m
            contributions = sum(
                inputs.payment * (1 + growth) ** k for k in range(inputs.years * m)
            )
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "future_value": round(value, 2),
        "total_contributions": round(contributions, 2),
        "total_interest": round(value - contributions, 2),
    }


class AnnuityPaymentInput(BaseModel):
    """Input for annuity payment calculation."""

    present_value: float = Field(..., gt=0)
    annual_rate_percent: float = Field(..., ge=0, le=100)
    years: float = Field(..., gt=0, le=100)
    compounding: str = "monthly"
    annuity_due: bool = False


@router.post("/annuity-payment")
async def calculate_annuity_payment(inputs: AnnuityPaymentInput):
    """Level payment that draws a present value down to zero."""
    try:
        payment = annuity.annuity_payment(
            inputs.present_value,
            inputs.annual_rate_percent / 100,
            inputs.years,
            inputs.compounding,
            due=inputs.annuity_due,
        )
        periods = inputs.years * annuity.periods_per_year(inputs.compounding)
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "payment": round(payment, 2),
        "total_payout": round(payment * periods, 2),
        "total_interest": round(payment * periods - inputs.present_value, 2),
    }
