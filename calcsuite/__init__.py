"""Calculator Suite: stateless finance, health and conversion calculators."""

__version__ = "0.1.0"
