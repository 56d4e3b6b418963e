"""
Calculation Engine

Core calculation modules for the calculator suite: loan amortization,
adjustable-rate projections, time value of money, and tiered score
interpretation.
"""

from calcsuite.calculations import amortization, annuity, arm, catalog, tiers

__all__ = ["amortization", "annuity", "arm", "catalog", "tiers"]
