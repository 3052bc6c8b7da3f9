"""
Calculation Service - Runs formulas against real indicator data.

Builds the data context for a formula by fetching each referenced
indicator, hands it to the formula engine, and packages the outcome.
Formula errors never escape from here: they come back in
CalculationResult.error with the engine's message untouched.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from config import config
from formula import FormulaEngine, FormulaError, available_functions
from formula.values import Series, Value
from processing import format_result, normalize_date_bound
from registry import CalculationInfo, CatalogRegistry, registry as default_registry
from sources import DataSourceManager, source_manager as default_source_manager

logger = logging.getLogger(__name__)


@dataclass
class CalculationResult:
    """Outcome of running one formula."""

    formula: str
    result: Optional[Value] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    indicators_used: List[str] = field(default_factory=list)
    fetch_errors: Dict[str, str] = field(default_factory=dict)
    calculation: Optional[CalculationInfo] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'formula': self.formula,
            'indicators_used': self.indicators_used,
        }
        if self.calculation is not None:
            payload['calculation'] = {
                'name': self.calculation.name,
                'slug': self.calculation.slug,
                'formula': self.calculation.formula,
                'output_type': self.calculation.output_type,
            }
        if self.ok:
            payload['result'] = format_result(self.result)
        else:
            payload['error'] = self.error
            payload['code'] = self.error_code
        if self.fetch_errors:
            payload['fetch_errors'] = self.fetch_errors
        return payload


class CalculationService:
    """Glue between the catalog, the data sources and the formula engine."""

    def __init__(
        self,
        engine: Optional[FormulaEngine] = None,
        catalog: Optional[CatalogRegistry] = None,
        sources: Optional[DataSourceManager] = None,
        test_points: Optional[int] = None,
    ):
        self.engine = engine or FormulaEngine(max_depth=config.formula_max_depth)
        self.catalog = catalog or default_registry
        self.sources = sources or default_source_manager
        self.test_points = test_points if test_points is not None else config.formula_test_points

    def execute_formula(self, formula: str, data_context: Optional[Dict[str, Series]] = None) -> CalculationResult:
        """Evaluate a formula over an already built data context."""
        data_context = data_context or {}
        try:
            value = self.engine.evaluate(formula, data_context)
        except FormulaError as e:
            logger.info(f"Formula failed ({e.code}): {e.message}")
            return CalculationResult(
                formula=formula, error=e.message, error_code=e.code,
                indicators_used=sorted(data_context),
            )
        return CalculationResult(formula=formula, result=value, indicators_used=sorted(data_context))

    def build_data_context(self, slugs: List[str], start_date: Optional[str] = None,
                           end_date: Optional[str] = None,
                           limit: Optional[int] = None) -> Tuple[Dict[str, Series], Dict[str, str]]:
        """
        Fetch each indicator into a {slug: series} mapping.

        Indicators that are unknown or fail to fetch are left out and their
        errors returned alongside; the engine will then report them as not found.
        A positive `limit` keeps only the most recent points of each series.
        """
        context: Dict[str, Series] = {}
        errors: Dict[str, str] = {}

        for slug in slugs:
            key = slug.lower()
            indicator = self.catalog.get_indicator(key)
            if indicator is None:
                errors[key] = f"Indicator not found: {key}"
                continue
            data = self.sources.fetch_sync(indicator, start_date, end_date)
            if data.error:
                errors[key] = data.error
                continue
            series = data.to_series()
            if limit and limit > 0:
                series = series[-limit:]
            context[key] = series

        return context, errors

    def test_formula(self, formula: str, indicators: Optional[List[str]] = None,
                     start_date: Optional[str] = None, end_date: Optional[str] = None) -> CalculationResult:
        """
        Check and run a formula the way a formula builder does.

        Syntax and function signatures are checked before any data is
        fetched. When `indicators` is not given, every identifier in the
        formula is treated as an indicator slug. Each series is cut to its
        last `test_points` points.
        """
        return self._run(formula, indicators, start_date, end_date, self.test_points)

    def _run(self, formula: str, indicators: Optional[List[str]], start_date: Optional[str],
             end_date: Optional[str], limit: Optional[int]) -> CalculationResult:
        try:
            self.engine.validate(formula)
            slugs = indicators if indicators else self.engine.referenced_identifiers(formula)
        except FormulaError as e:
            return CalculationResult(formula=formula or '', error=e.message, error_code=e.code)

        try:
            start = normalize_date_bound(start_date)
            end = normalize_date_bound(end_date)
        except (ValueError, OverflowError):
            return CalculationResult(formula=formula, error="Invalid date range", error_code='invalid_date')

        context, fetch_errors = self.build_data_context(slugs, start, end, limit)
        result = self.execute_formula(formula, context)
        result.fetch_errors = fetch_errors
        return result

    def get_calculation_result(self, slug: str, start_date: Optional[str] = None,
                               end_date: Optional[str] = None) -> Optional[CalculationResult]:
        """Run a saved calculation over full series. Returns None when the slug is unknown."""
        calculation = self.catalog.get_calculation(slug)
        if calculation is None:
            return None

        result = self._run(calculation.formula, calculation.indicators or None, start_date, end_date, None)
        result.calculation = calculation
        return result

    @staticmethod
    def available_functions() -> dict:
        return available_functions()


# Global instance
calculation_service = CalculationService()
