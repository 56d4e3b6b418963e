"""
Scored Calculator Catalog

Each scored calculator is data: an inputs model, a compute function that
returns metrics including a ``score``, and the tier ladder used to
interpret that score. Heuristic constants are product decisions and are
kept as published on the site.
"""

from typing import Callable, Dict, List, Optional, Type, Union
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from calcsuite.calculations import amortization, annuity, arm
from calcsuite.calculations.tiers import Tier, TierTable


@dataclass
class ScoredCalculator:
    """A calculator whose headline result maps onto a tier ladder."""

    name: str
    title: str
    inputs: Type[BaseModel]
    compute: Callable[[BaseModel], Dict]
    tiers: Union[TierTable, Callable[[BaseModel], TierTable]]

    def table_for(self, inputs: BaseModel) -> TierTable:
        if isinstance(self.tiers, TierTable):
            return self.tiers
        return self.tiers(inputs)

    def run(self, payload: Dict) -> Dict:
        """Validate a payload, compute metrics and interpret the score."""
        inputs = self.inputs.model_validate(payload)
        metrics = self.compute(inputs)
        return {
            "calculator": self.name,
            "metrics": metrics,
            "interpretation": self.table_for(inputs).classify(metrics["score"]),
        }


# =============================================================================
# BODY MASS INDEX
# =============================================================================


class BMIInputs(BaseModel):
    weight_kg: float = Field(..., gt=0, le=500)
    height_cm: float = Field(..., gt=0, le=300)


def compute_bmi(inputs: BMIInputs) -> Dict:
    bmi = inputs.weight_kg / (inputs.height_cm / 100) ** 2
    return {"score": bmi, "bmi": bmi}


BMI_TIERS = TierTable(
    name="bmi",
    inclusive=False,
    tiers=[
        Tier(
            "Underweight",
            18.5,
            "Your BMI is below the healthy range.",
            recommendations=("Discuss nutrient-dense, calorie-sufficient meals with a professional",),
        ),
        Tier(
            "Normal weight",
            25,
            "Your BMI is within the normal range for adults.",
            recommendations=("Maintain regular activity and a balanced diet",),
        ),
        Tier(
            "Overweight",
            30,
            "Your BMI is above the normal range.",
            recommendations=("Add 150 minutes of moderate activity per week",),
        ),
        Tier(
            "Obese",
            None,
            "Your BMI is in the obese range.",
            recommendations=("Talk to a healthcare provider about a weight plan",),
            warnings=("BMI does not distinguish muscle from fat",),
        ),
    ],
)


# =============================================================================
# LOAN-TO-VALUE
# =============================================================================


class LTVInputs(BaseModel):
    loan_amount: float = Field(..., ge=0)
    property_value: float = Field(..., gt=0)


def compute_ltv(inputs: LTVInputs) -> Dict:
    ltv = inputs.loan_amount / inputs.property_value * 100
    return {"score": ltv, "ltv_percent": ltv}


LTV_TIERS = TierTable(
    name="ltv",
    tiers=[
        Tier("Strong equity", 80, "Strong equity position, often qualifies for better rates."),
        Tier("Moderate risk", 90, "Moderate risk, PMI or a higher rate may apply."),
        Tier(
            "High risk",
            None,
            "High risk, consider a larger down payment to reduce LTV.",
            warnings=("Lenders may require mortgage insurance above 80% LTV",),
        ),
    ],
)


# =============================================================================
# COMBINED LOAN-TO-VALUE / HELOC
# =============================================================================


class CLTVInputs(BaseModel):
    home_value: float = Field(..., gt=0)
    first_mortgage_balance: float = Field(0.0, ge=0)
    second_mortgage_balance: float = Field(0.0, ge=0)
    lender_max_ltv_percent: float = Field(85.0, gt=0, le=100)


def compute_cltv(inputs: CLTVInputs) -> Dict:
    total_liens = inputs.first_mortgage_balance + inputs.second_mortgage_balance
    cltv = total_liens / inputs.home_value * 100
    max_allowed_liens = inputs.lender_max_ltv_percent / 100 * inputs.home_value
    return {
        "score": cltv,
        "cltv_percent": cltv,
        "equity": max(0.0, inputs.home_value - total_liens),
        "estimated_max_heloc": max(0.0, max_allowed_liens - total_liens),
    }


def cltv_tiers(inputs: CLTVInputs) -> TierTable:
    return TierTable(
        name="cltv",
        tiers=[
            Tier(
                "Within lender limit",
                inputs.lender_max_ltv_percent,
                "Healthy equity improves approval odds and terms. Keep CLTV within lender limits.",
            ),
            Tier(
                "Exceeds lender limit",
                None,
                "Current CLTV exceeds typical limits. You may need to reduce balances or wait for appreciation.",
                warnings=("A HELOC is unlikely to be approved at this CLTV",),
            ),
        ],
    )


# =============================================================================
# DAILY ANTIOXIDANT (ORAC) GOAL
# =============================================================================


class ActivityLevel(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"


ORAC_TARGETS = {
    ActivityLevel.low: (3000, 5000),
    ActivityLevel.moderate: (5000, 10000),
    ActivityLevel.high: (10000, 15000),
}

ORAC_BASE_RECOMMENDATIONS = (
    "Build meals around a rainbow of produce for diverse antioxidants.",
    "Flavor foods with herbs and spices; a teaspoon of turmeric or oregano significantly boosts ORAC.",
    "Choose minimally processed foods to preserve polyphenols and vitamins.",
)

ORAC_WARNINGS = (
    "High-dose antioxidant supplements may interact with medications.",
    "People undergoing chemotherapy or radiation should discuss antioxidant use with their care team.",
)


class ORACInputs(BaseModel):
    activity_level: ActivityLevel
    servings_fruit_veg: float = Field(..., ge=0, le=30)
    average_orac_per_serving: float = Field(..., ge=0, le=50000)
    additional_orac: float = Field(0.0, ge=0, le=50000)


def compute_orac(inputs: ORACInputs) -> Dict:
    total = round(
        inputs.servings_fruit_veg * inputs.average_orac_per_serving + inputs.additional_orac
    )
    target_min, target_max = ORAC_TARGETS[inputs.activity_level]
    return {
        "score": total,
        "total_orac": total,
        "target_min": target_min,
        "target_max": target_max,
        "delta_from_min": total - target_min,
    }


def orac_tiers(inputs: ORACInputs) -> TierTable:
    target_min, target_max = ORAC_TARGETS[inputs.activity_level]
    return TierTable(
        name="orac",
        tiers=[
            Tier(
                "Below target",
                target_min,
                "Your estimated daily ORAC is below the suggested range. Add more colorful produce, herbs and antioxidant beverages.",
                recommendations=ORAC_BASE_RECOMMENDATIONS
                + (
                    "Add two antioxidant-rich servings daily.",
                    "Sip green or hibiscus tea instead of sugary drinks.",
                ),
                warnings=ORAC_WARNINGS,
                inclusive=False,
            ),
            Tier(
                "Within target",
                target_max,
                "Your ORAC score sits within the targeted range. Maintain variety in fruits, vegetables and spices.",
                recommendations=ORAC_BASE_RECOMMENDATIONS
                + ("Rotate seasonal produce and experiment with spice blends.",),
                warnings=ORAC_WARNINGS,
            ),
            Tier(
                "Above target",
                None,
                "Your ORAC score exceeds the typical range. Food-based antioxidants are safe, but review supplement doses.",
                recommendations=ORAC_BASE_RECOMMENDATIONS
                + ("Prioritize whole foods over concentrated powders.",),
                warnings=ORAC_WARNINGS,
            ),
        ],
    )


# =============================================================================
# SLEEP EFFICIENCY
# =============================================================================


class SleepEfficiencyInputs(BaseModel):
    total_sleep_hours: float = Field(..., gt=0, le=24)
    time_in_bed_hours: float = Field(..., gt=0, le=24)

    @model_validator(mode="after")
    def sleep_fits_in_bed(self):
        if self.total_sleep_hours > self.time_in_bed_hours:
            raise ValueError("Total sleep cannot exceed time in bed")
        return self


def compute_sleep_efficiency(inputs: SleepEfficiencyInputs) -> Dict:
    efficiency = inputs.total_sleep_hours / inputs.time_in_bed_hours * 100
    time_awake = inputs.time_in_bed_hours - inputs.total_sleep_hours
    return {
        "score": efficiency,
        "efficiency_percent": efficiency,
        "time_awake_minutes": time_awake * 60,
    }


SLEEP_EFFICIENCY_TIERS = TierTable(
    name="sleep_efficiency",
    inclusive=False,
    tiers=[
        Tier(
            "Poor",
            85,
            "You spend a large share of time in bed awake.",
            recommendations=(
                "Only go to bed when sleepy",
                "Get out of bed after 20 minutes awake",
            ),
            warnings=("Persistently low efficiency can indicate insomnia",),
        ),
        Tier(
            "Fair",
            90,
            "Sleep efficiency is slightly below the healthy range.",
            recommendations=("Keep a consistent wake time, including weekends",),
        ),
        Tier("Good", 95, "Sleep efficiency is in the healthy range."),
        Tier("Excellent", None, "You fall asleep quickly and rarely wake."),
    ],
)


# =============================================================================
# MAXIMUM LACTATE STEADY STATE
# =============================================================================


class FitnessLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    elite = "elite"


class Sport(str, Enum):
    running = "running"
    cycling = "cycling"
    swimming = "swimming"
    rowing = "rowing"
    cross_training = "cross_training"


MLSS_FITNESS_MULTIPLIERS = {
    FitnessLevel.beginner: 0.8,
    FitnessLevel.intermediate: 0.85,
    FitnessLevel.advanced: 0.9,
    FitnessLevel.elite: 0.95,
}

MLSS_SPORT_MULTIPLIERS = {
    Sport.running: 1.0,
    Sport.cycling: 1.1,
    Sport.swimming: 0.9,
    Sport.rowing: 1.05,
    Sport.cross_training: 0.95,
}


class MLSSInputs(BaseModel):
    max_heart_rate: float = Field(..., gt=0, le=250)
    resting_heart_rate: float = Field(..., gt=0, le=150)
    fitness_level: FitnessLevel
    sport: Sport

    @model_validator(mode="after")
    def resting_below_max(self):
        if self.resting_heart_rate >= self.max_heart_rate:
            raise ValueError("Resting heart rate must be below max heart rate")
        return self


def compute_mlss(inputs: MLSSInputs) -> Dict:
    reserve = inputs.max_heart_rate - inputs.resting_heart_rate
    mlss_hr = (inputs.resting_heart_rate + reserve * 0.85) * MLSS_FITNESS_MULTIPLIERS[
        inputs.fitness_level
    ]
    mlss_percent = mlss_hr / inputs.max_heart_rate * 100
    return {
        "score": mlss_percent * MLSS_SPORT_MULTIPLIERS[inputs.sport],
        "mlss_heart_rate": mlss_hr,
        "mlss_percent": mlss_percent,
        "heart_rate_reserve": reserve,
        "training_zones": {
            "aerobic": (
                inputs.resting_heart_rate + reserve * 0.6,
                inputs.resting_heart_rate + reserve * 0.75,
            ),
            "threshold": (
                inputs.resting_heart_rate + reserve * 0.8,
                inputs.resting_heart_rate + reserve * 0.9,
            ),
            "vo2max": (inputs.resting_heart_rate + reserve * 0.9, inputs.max_heart_rate),
        },
    }


MLSS_TIERS = TierTable(
    name="mlss",
    tiers=[
        Tier(
            "Developing MLSS",
            65,
            "Developing lactate steady state. Focus on building aerobic foundation first.",
            recommendations=(
                "Prioritize aerobic base building",
                "Gradually introduce tempo work",
            ),
        ),
        Tier(
            "Moderate MLSS",
            75,
            "Moderate lactate steady state. Focus on building aerobic endurance.",
            recommendations=(
                "Increase aerobic base training",
                "Build up to MLSS training gradually",
            ),
        ),
        Tier(
            "Good MLSS",
            85,
            "Good lactate steady state. You have solid endurance capacity for sustained efforts.",
            recommendations=(
                "Include MLSS intervals in training",
                "Gradually increase interval duration",
            ),
        ),
        Tier(
            "Excellent MLSS",
            None,
            "Outstanding lactate steady state. You can maintain high intensity for extended periods.",
            recommendations=(
                "Incorporate longer intervals (15-30 minutes)",
                "Monitor recovery between high-intensity sessions",
            ),
        ),
    ],
)


# =============================================================================
# EXTRA PAYMENT SAVINGS
# =============================================================================


class ExtraPaymentInputs(BaseModel):
    loan_amount: float = Field(..., gt=0)
    annual_rate_percent: float = Field(..., ge=0, le=50)
    term_years: int = Field(..., ge=1, le=50)
    extra_payment: float = Field(0.0, ge=0)
    extra_payment_frequency: str = Field(
        "monthly", pattern="^(monthly|yearly|one-time)$"
    )


def compute_extra_payment_savings(inputs: ExtraPaymentInputs) -> Dict:
    comparison = amortization.compare_extra_payments(
        inputs.loan_amount,
        inputs.annual_rate_percent / 100,
        inputs.term_years * 12,
        amortization.ExtraPayment(inputs.extra_payment, inputs.extra_payment_frequency),
    )
    accelerated = comparison["accelerated"].totals
    return {
        "score": comparison["periods_saved"],
        "periods_saved": comparison["periods_saved"],
        "interest_savings": comparison["interest_savings"],
        "monthly_payment": accelerated["payment"],
        "total_interest": accelerated["total_interest"],
        "total_extra_payments": accelerated["total_extra_payments"],
        "payoff_periods": accelerated["payoff_periods"],
    }


EXTRA_PAYMENT_TIERS = TierTable(
    name="extra_payment_savings",
    tiers=[
        Tier(
            "Standard Amortization",
            0,
            "Regular loan payment schedule.",
            recommendations=(
                "Even $50-100 extra per month can make a significant difference",
                "Consider making one extra payment per year",
            ),
        ),
        Tier(
            "Moderate Savings",
            24,
            "Some interest savings and time reduction.",
            recommendations=("Consider increasing extra payments if your budget allows",),
        ),
        Tier(
            "Good Savings",
            60,
            "Moderate interest savings and time reduction.",
            recommendations=("Monitor your progress and adjust as needed",),
        ),
        Tier(
            "Excellent Savings",
            None,
            "Significant interest savings and time reduction.",
            warnings=("Build an emergency fund before making extra payments",),
        ),
    ],
)


# =============================================================================
# ARM PAYMENT VOLATILITY
# =============================================================================


class ARMInputs(BaseModel):
    loan_amount: float = Field(..., gt=0)
    initial_rate_percent: float = Field(..., ge=0, le=100)
    fixed_years: int = Field(..., ge=0)
    term_years: int = Field(..., ge=1, le=50)
    index_rate_percent: float = Field(..., ge=0, le=100)
    margin_percent: float = Field(..., ge=0, le=100)
    adjust_interval_years: int = Field(1, ge=1)
    periodic_cap_percent: float = Field(2.0, ge=0, le=100)
    lifetime_cap_percent: float = Field(5.0, ge=0, le=100)


def compute_arm_volatility(inputs: ARMInputs) -> Dict:
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
    )
    payments = [row["payment"] for row in projection["yearly"]]
    return {
        "score": projection["volatility"],
        "volatility": projection["volatility"],
        "initial_payment": projection["schedule"].totals["payment"],
        "max_payment": max(payments),
        "total_interest": projection["schedule"].totals["total_interest"],
    }


# =============================================================================
# FUTURE VALUE GROWTH
# =============================================================================


class FutureValueInputs(BaseModel):
    present_value: float = Field(0.0, ge=0)
    payment: float = Field(0.0, ge=0)
    annual_rate_percent: float = Field(..., ge=0, le=100)
    years: int = Field(..., ge=1, le=100)
    compounding: str = "annually"


def compute_future_value_growth(inputs: FutureValueInputs) -> Dict:
    rows = annuity.project_growth(
        inputs.present_value,
        inputs.payment,
        inputs.annual_rate_percent / 100,
        inputs.years,
        inputs.compounding,
    )
    final = rows[-1]
    contributions = final["contributions"]
    interest_percent = final["interest"] / contributions * 100 if contributions else 0.0
    return {
        "score": interest_percent,
        "future_value": final["balance"],
        "total_contributions": contributions,
        "total_interest": final["interest"],
        "interest_percent_of_contributions": interest_percent,
    }


FUTURE_VALUE_TIERS = TierTable(
    name="future_value_growth",
    tiers=[
        Tier(
            "Conservative",
            50,
            "Conservative growth with steady compound interest accumulation.",
            warnings=("Returns may not keep pace with inflation",),
        ),
        Tier("Good", 100, "Good growth potential with moderate compound interest effects."),
        Tier("Strong", 200, "Strong growth potential with significant compound interest benefits."),
        Tier(
            "Excellent",
            None,
            "Excellent growth potential with compound interest working powerfully over time.",
            warnings=("Check that the assumed return is realistic",),
        ),
    ],
)


# =============================================================================
# REGISTRY
# =============================================================================

CALCULATORS: Dict[str, ScoredCalculator] = {
    calc.name: calc
    for calc in [
        ScoredCalculator("bmi", "Body Mass Index", BMIInputs, compute_bmi, BMI_TIERS),
        ScoredCalculator("ltv", "Loan-to-Value Ratio", LTVInputs, compute_ltv, LTV_TIERS),
        ScoredCalculator(
            "cltv", "Combined Loan-to-Value / HELOC", CLTVInputs, compute_cltv, cltv_tiers
        ),
        ScoredCalculator(
            "orac", "Daily Antioxidant (ORAC) Goal", ORACInputs, compute_orac, orac_tiers
        ),
        ScoredCalculator(
            "sleep_efficiency",
            "Sleep Efficiency",
            SleepEfficiencyInputs,
            compute_sleep_efficiency,
            SLEEP_EFFICIENCY_TIERS,
        ),
        ScoredCalculator(
            "mlss", "Maximum Lactate Steady State", MLSSInputs, compute_mlss, MLSS_TIERS
        ),
        ScoredCalculator(
            "extra_payment_savings",
            "Loan Amortization with Extra Payments",
            ExtraPaymentInputs,
            compute_extra_payment_savings,
            EXTRA_PAYMENT_TIERS,
        ),
        ScoredCalculator(
            "arm_volatility",
            "ARM Payment Projection",
            ARMInputs,
            compute_arm_volatility,
            arm.VOLATILITY_TIERS,
        ),
        ScoredCalculator(
            "future_value_growth",
            "Future Value",
            FutureValueInputs,
            compute_future_value_growth,
            FUTURE_VALUE_TIERS,
        ),
    ]
}


def list_calculators() -> List[Dict]:
    """Names, titles and tier labels of every scored calculator."""
    return [
        {
            "name": calc.name,
            "title": calc.title,
            "tiers": calc.tiers.labels if isinstance(calc.tiers, TierTable) else None,
        }
        for calc in CALCULATORS.values()
    ]


def get_calculator(name: str) -> ScoredCalculator:
    """Look up a calculator by name; raises KeyError if unknown."""
    return CALCULATORS[name]


def run_calculator(name: str, payload: Optional[Dict] = None) -> Dict:
    """Validate, compute and interpret in one call."""
    return get_calculator(name).run(payload or {})
