"""Formula module - Parser, evaluator and built-in functions for derived series."""

from .errors import (
    FormulaError,
    EmptyFormula,
    UnknownFunction,
    UnknownIdentifier,
    InvalidExpression,
    WrongArity,
    InvalidPeriods,
    WrongArgumentKind,
    MaxDepthExceeded,
)
from .parser import parse, FunctionCall, Identifier, Literal
from .functions import FUNCTIONS, FunctionSpec, available_functions
from .evaluator import FormulaEngine, engine, evaluate

__all__ = [
    'FormulaError',
    'EmptyFormula',
    'UnknownFunction',
    'UnknownIdentifier',
    'InvalidExpression',
    'WrongArity',
    'InvalidPeriods',
    'WrongArgumentKind',
    'MaxDepthExceeded',
    'parse',
    'FunctionCall',
    'Identifier',
    'Literal',
    'FUNCTIONS',
    'FunctionSpec',
    'available_functions',
    'FormulaEngine',
    'engine',
    'evaluate',
]
