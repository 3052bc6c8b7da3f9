"""
Formula Parser - Turns a formula string into an expression tree.

The grammar is decided by the shape of each whitespace-stripped fragment:

    NAME(arg, arg, ...)     function call, NAME matches [A-Z_]+
    NAME                    series identifier, [A-Z_][A-Z0-9_]*
    12.5                    numeric literal

Arguments are split with a single left-to-right scan that tracks quote
state and parenthesis depth, so nested calls keep their commas.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

from .errors import InvalidExpression, MaxDepthExceeded
from .values import is_numeric_string

DEFAULT_MAX_DEPTH = 64

FUNCTION_RE = re.compile(r'^([A-Z_]+)\((.*)\)$')
IDENTIFIER_RE = re.compile(r'^[A-Z_][A-Z0-9_]*$')
WHITESPACE_RE = re.compile(r'\s+')


@dataclass(frozen=True)
class Literal:
    value: float

    def to_formula(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)


@dataclass(frozen=True)
class Identifier:
    name: str

    @property
    def key(self) -> str:
        """Lookup key in the data context."""
        return self.name.lower()

    def to_formula(self) -> str:
        return self.name


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: Tuple['Node', ...]

    def to_formula(self) -> str:
        return f"{self.name}({','.join(arg.to_formula() for arg in self.args)})"


Node = Union[FunctionCall, Identifier, Literal]


def strip_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub('', text)


def split_parameters(params: str) -> List[str]:
    """
    Split a parameter list on top-level commas.

    A trailing empty parameter is dropped, so "A," yields ["A"]; an empty
    string yields no parameters at all.
    """
    if not params:
        return []

    parts = []
    current = ''
    depth = 0
    in_quotes = False

    for i, char in enumerate(params):
        if char == '"' and (i == 0 or params[i - 1] != '\\'):
            in_quotes = not in_quotes
            current += char
        elif not in_quotes and char == '(':
            depth += 1
            current += char
        elif not in_quotes and char == ')':
            depth -= 1
            current += char
        elif not in_quotes and char == ',' and depth == 0:
            parts.append(current.strip())
            current = ''
        else:
            current += char

    if current:
        parts.append(current.strip())

    return parts


def parse(formula: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Node:
    """Parse a formula into a tree. Raises FormulaError subclasses."""
    return _parse_expression(formula, 0, max_depth)


def _parse_expression(expression: str, depth: int, max_depth: int) -> Node:
    expression = strip_whitespace(expression)

    match = FUNCTION_RE.match(expression)
    if match:
        if depth >= max_depth:
            raise MaxDepthExceeded(max_depth)
        name, params = match.groups()
        args = tuple(_parse_expression(param, depth + 1, max_depth) for param in split_parameters(params))
        return FunctionCall(name=name, args=args)

    if IDENTIFIER_RE.match(expression):
        return Identifier(name=expression)

    if is_numeric_string(expression):
        return Literal(value=float(expression))

    raise InvalidExpression(expression)


def iter_calls(node: Node) -> Iterator[FunctionCall]:
    """Every function call in the tree, outermost first."""
    if isinstance(node, FunctionCall):
        yield node
        for arg in node.args:
            yield from iter_calls(arg)


def referenced_identifiers(node: Node) -> List[str]:
    """Lowercase identifiers used by the tree, in order of first use."""
    seen = []

    def walk(current: Node) -> None:
        if isinstance(current, Identifier):
            if current.key not in seen:
                seen.append(current.key)
        elif isinstance(current, FunctionCall):
            for arg in current.args:
                walk(arg)

    walk(node)
    return seen
