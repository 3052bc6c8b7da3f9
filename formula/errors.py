"""
Formula Errors - Every way an evaluation can fail.

All errors are terminal for the evaluation that raised them. The message
(str(err)) is meant to be shown to the end user verbatim.
"""

from typing import Optional


class FormulaError(Exception):
    """Base class for formula failures."""

    code = 'formula_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code}


class EmptyFormula(FormulaError):
    code = 'empty_formula'

    def __init__(self):
        super().__init__("Formula cannot be empty")


class UnknownFunction(FormulaError):
    code = 'unknown_function'

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown function: {name}")


class UnknownIdentifier(FormulaError):
    code = 'unknown_identifier'

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Indicator not found: {name}")


class InvalidExpression(FormulaError):
    code = 'invalid_expression'

    def __init__(self, fragment: str):
        self.fragment = fragment
        super().__init__(f"Invalid expression: {fragment}")


class WrongArity(FormulaError):
    code = 'wrong_arity'

    def __init__(self, function: str, expected: int, got: int, params: Optional[str] = None):
        self.function = function
        self.expected = expected
        self.got = got
        noun = 'parameter' if expected == 1 else 'parameters'
        message = f"{function} function requires exactly {expected} {noun}"
        if params:
            message += f": {params}"
        super().__init__(f"{message} (got {got})")


class InvalidPeriods(FormulaError):
    code = 'invalid_periods'

    def __init__(self, function: str):
        self.function = function
        super().__init__(f"{function} periods must be positive")


class WrongArgumentKind(FormulaError):
    code = 'wrong_argument_kind'

    def __init__(self, function: str, position: int, expected: str):
        self.function = function
        self.position = position
        self.expected = expected
        super().__init__(f"{function} argument {position} must be a {expected}")


class MaxDepthExceeded(FormulaError):
    code = 'max_depth_exceeded'

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Formula nesting exceeds the maximum depth of {limit}")
