"""
Formula Evaluator - Runs a formula against a data context.

The data context maps lowercase indicator slugs to series and is owned by
the caller; it is never modified here. Each call parses the formula afresh
and evaluates it depth-first, arguments left to right, before the function
they belong to runs.
"""

import logging
from typing import Any, List, Mapping, Optional

from .errors import EmptyFormula, UnknownFunction, UnknownIdentifier, WrongArity
from .functions import FUNCTIONS, FunctionSpec
from .parser import (
    DEFAULT_MAX_DEPTH,
    FunctionCall,
    Identifier,
    Literal,
    Node,
    iter_calls,
    parse,
    referenced_identifiers,
)
from .values import Value

logger = logging.getLogger(__name__)


class FormulaEngine:
    """Evaluates formulas using a function registry."""

    def __init__(
        self,
        functions: Mapping[str, FunctionSpec] = FUNCTIONS,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self._functions = functions
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def parse(self, formula: str) -> Node:
        if formula is None or not formula.strip():
            raise EmptyFormula()
        return parse(formula.strip(), self._max_depth)

    def evaluate(self, formula: str, context: Optional[Mapping[str, Any]] = None) -> Value:
        """
        Evaluate a formula.

        Returns a float for aggregates and CORRELATION, a list of
        (date, value) pairs for everything else. Raises FormulaError.
        """
        tree = self.parse(formula)
        logger.debug(f"Evaluating {tree.to_formula()}")
        return self._eval(tree, context or {})

    def validate(self, formula: str) -> Node:
        """
        Check a formula without any data: syntax, function names and
        argument counts. Returns the parsed tree.
        """
        tree = self.parse(formula)
        for call in iter_calls(tree):
            spec = self._lookup(call.name)
            if len(call.args) != spec.arity:
                raise WrongArity(spec.name, spec.arity, len(call.args), ', '.join(spec.params))
        return tree

    def referenced_identifiers(self, formula: str) -> List[str]:
        """Lowercase indicator slugs a formula refers to."""
        return referenced_identifiers(self.parse(formula))

    def _lookup(self, name: str) -> FunctionSpec:
        spec = self._functions.get(name)
        if spec is None:
            raise UnknownFunction(name)
        return spec

    def _eval(self, node: Node, context: Mapping[str, Any]) -> Value:
        if isinstance(node, FunctionCall):
            spec = self._lookup(node.name)
            params = [self._eval(arg, context) for arg in node.args]
            return spec(params)

        if isinstance(node, Identifier):
            if node.key not in context:
                raise UnknownIdentifier(node.key)
            return context[node.key]

        if isinstance(node, Literal):
            return node.value

        raise TypeError(f"Unexpected node: {node!r}")


# Shared default engine
engine = FormulaEngine()


def evaluate(
    formula: str,
    context: Optional[Mapping[str, Any]] = None,
    max_depth: Optional[int] = None,
) -> Value:
    """Evaluate with the built-in functions."""
    if max_depth is None:
        return engine.evaluate(formula, context)
    return FormulaEngine(max_depth=max_depth).evaluate(formula, context)
