"""
Function Registry - The fixed library of formula functions.

Maps uppercase names to FunctionSpec entries. The registry is built once at
import time and is read-only afterwards, so it can be shared freely across
threads.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple

from .aggregates import func_avg, func_count, func_max, func_min, func_sum
from .errors import WrongArity
from .indicators import func_ma, func_momentum, func_roc, func_rsi
from .statistics import func_correlation, func_regression
from .values import Value


@dataclass(frozen=True)
class FunctionSpec:
    """One built-in function: its signature, catalog text and implementation."""

    name: str
    params: Tuple[str, ...]
    category: str
    description: str
    example: str
    implementation: Callable[[List[Value]], Value]

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def syntax(self) -> str:
        return f"{self.name}({', '.join(self.params)})"

    def __call__(self, params: List[Value]) -> Value:
        if len(params) != self.arity:
            raise WrongArity(self.name, self.arity, len(params), ', '.join(self.params))
        return self.implementation(params)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'description': self.description,
            'syntax': self.syntax,
            'example': self.example,
            'arity': self.arity,
        }


_SPECS = [
    # Basic
    FunctionSpec('SUM', ('series',), 'basic',
                 'Sum of all values in a series', 'SUM(GDP_US)', func_sum),
    FunctionSpec('AVG', ('series',), 'basic',
                 'Average of all values in a series', 'AVG(GDP_US)', func_avg),
    FunctionSpec('MIN', ('series',), 'basic',
                 'Minimum value in a series', 'MIN(GDP_US)', func_min),
    FunctionSpec('MAX', ('series',), 'basic',
                 'Maximum value in a series', 'MAX(GDP_US)', func_max),
    FunctionSpec('COUNT', ('series',), 'basic',
                 'Count of non-null values in a series', 'COUNT(GDP_US)', func_count),

    # Technical indicators
    FunctionSpec('ROC', ('series', 'periods'), 'technical',
                 'Rate of Change over specified periods', 'ROC(GDP_US, 4)', func_roc),
    FunctionSpec('MA', ('series', 'periods'), 'technical',
                 'Moving Average over specified periods', 'MA(GDP_US, 12)', func_ma),
    FunctionSpec('RSI', ('series', 'periods'), 'technical',
                 'Relative Strength Index', 'RSI(GDP_US, 14)', func_rsi),
    FunctionSpec('MOMENTUM', ('series', 'periods'), 'technical',
                 'Momentum indicator', 'MOMENTUM(GDP_US, 10)', func_momentum),

    # Advanced
    FunctionSpec('CORRELATION', ('series1', 'series2'), 'advanced',
                 'Correlation between two series', 'CORRELATION(GDP_US, UNEMPLOYMENT_US)', func_correlation),
    FunctionSpec('REGRESSION', ('series',), 'advanced',
                 'Linear regression of series', 'REGRESSION(GDP_US)', func_regression),
]

FUNCTIONS: Mapping[str, FunctionSpec] = MappingProxyType({spec.name: spec for spec in _SPECS})

CATEGORIES = ('basic', 'technical', 'advanced')


def available_functions(registry: Mapping[str, FunctionSpec] = FUNCTIONS) -> Dict[str, Dict[str, dict]]:
    """Function catalog grouped by category, for formula builders."""
    catalog: Dict[str, Dict[str, dict]] = {category: {} for category in CATEGORIES}
    for name, spec in registry.items():
        catalog.setdefault(spec.category, {})[name] = spec.to_dict()
    return catalog
