"""
Formula API Endpoints

Formula builder support: function catalog, formula test runs against
catalog indicators, evaluation over caller-supplied data, and saved
calculations.
"""

import logging
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from calculations import CalculationResult, calculation_service
from registry import registry

logger = logging.getLogger(__name__)

formula_router = APIRouter()


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class FormulaTestRequest(BaseModel):
    """Formula test run against catalog indicators."""
    formula: str
    indicators: Optional[List[str]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class FormulaEvaluateRequest(BaseModel):
    """Formula evaluation over data supplied in the request."""
    formula: str
    data: Dict[str, List[Tuple[str, Optional[float]]]] = {}  # {name: [[date, value], ...]}


def _result_response(result: CalculationResult) -> JSONResponse:
    if result.ok:
        return JSONResponse(result.to_dict())
    return JSONResponse(status_code=400, content=result.to_dict())


# =============================================================================
# FORMULA ENDPOINTS
# =============================================================================

@formula_router.get("/api/formula/functions")
async def list_functions():
    """Functions available to formulas, grouped by category."""
    return JSONResponse({"functions": calculation_service.available_functions()})


@formula_router.post("/api/formula/test")
def test_formula(body: FormulaTestRequest):
    """
    Validate and run a formula against catalog indicators.

    Indicators are inferred from the formula when the request does not
    list them.
    """
    result = calculation_service.test_formula(
        body.formula, body.indicators, body.start_date, body.end_date
    )
    return _result_response(result)


@formula_router.post("/api/formula/evaluate")
async def evaluate_formula(body: FormulaEvaluateRequest):
    """Evaluate a formula over {name: [[date, value], ...]} data. Nothing is fetched."""
    context = {name.lower(): value for name, value in body.data.items()}
    result = calculation_service.execute_formula(body.formula, context)
    return _result_response(result)


# =============================================================================
# SAVED CALCULATIONS
# =============================================================================

@formula_router.get("/api/calculations")
async def list_calculations(limit: int = 100, offset: int = 0):
    return JSONResponse({
        "calculations": [c.to_dict() for c in registry.list_calculations(limit, offset)]
    })


@formula_router.get("/api/calculations/{slug}")
def get_calculation(slug: str, start_date: Optional[str] = None, end_date: Optional[str] = None):
    """Run a saved calculation over the requested date range."""
    result = calculation_service.get_calculation_result(slug, start_date, end_date)
    if result is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Calculation not found: {slug}", "code": "not_found"},
        )
    return _result_response(result)
