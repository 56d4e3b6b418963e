"""
Scored calculator API endpoints.

One generic endpoint serves every calculator in the catalog: inputs are
validated against the calculator's model, computed, and interpreted
against its tier ladder.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from calcsuite.calculations import catalog

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_scored_calculators():
    """List available scored calculators."""
    return catalog.list_calculators()


@router.post("/{name}")
async def run_scored_calculator(name: str, payload: Dict[str, Any] = Body(...)):
    """Compute and interpret a scored calculator."""
    try:
        calculator = catalog.get_calculator(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown calculator '{name}'")

    try:
        return calculator.run(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=e.errors(include_url=False, include_context=False)
        )
    except (ValueError, OverflowError) as e:
        logger.info(f"Rejected {name} inputs: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
