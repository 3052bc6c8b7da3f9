"""Calculations module - Run formulas against catalog indicators."""

from .service import CalculationResult, CalculationService, calculation_service

__all__ = ['CalculationResult', 'CalculationService', 'calculation_service']
