"""
Expression evaluation for the ``=`` button.

Wraps numexpr behind a ``text -> float`` function. Input is validated before
it reaches numexpr: only digits, decimal points, exponents, the four
arithmetic operators, parentheses and spaces are accepted.
"""

import math
import re

import numexpr as ne
import numpy as np

from webcalc.config import settings


class CalculatorError(Exception):
    """Base exception for calculator errors."""
    pass


class EvaluationError(CalculatorError):
    """Raised when an expression cannot be evaluated."""
    pass


_ALLOWED_CHARS = set("0123456789.eE+-*/() ")

_NUMBER = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def bind_literals(expr: str) -> tuple[str, dict[str, np.ndarray]]:
    """
    Replace every numeric literal with a name bound to a float64 value.

    numexpr folds constant-only expressions with Python ints, which raises on
    division by zero and overflows past int64. Bound names keep the whole
    computation in numexpr's float64 engine. Literals such as "05" parse
    like any other number.
    """
    values: dict[str, np.ndarray] = {}

    def _bind(match: re.Match) -> str:
        name = f"n{len(values)}"
        values[name] = np.asarray(float(match.group()), dtype=np.float64)
        return f" {name} "

    return _NUMBER.sub(_bind, expr), values


def evaluate_expression(expr: str) -> float:
    """
    Evaluate an arithmetic expression and return its value as a float.

    Supports: +, -, *, /, parentheses, and numbers. Division by zero yields
    ``inf`` or ``nan`` rather than an error.
    """
    if len(expr) > settings.max_expression_length:
        raise EvaluationError(
            f"Expression exceeds {settings.max_expression_length} characters"
        )

    expr = expr.replace(" ", "")
    if not expr:
        raise EvaluationError("Empty expression")

    # Validate characters
    if not all(c in _ALLOWED_CHARS for c in expr):
        raise EvaluationError(f"Invalid characters in expression: {expr}")

    # Check balanced parentheses
    depth = 0
    for c in expr:
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
        if depth < 0:
            raise EvaluationError("Unbalanced parentheses")
    if depth != 0:
        raise EvaluationError("Unbalanced parentheses")

    bound_expr, values = bind_literals(expr)

    try:
        # Explicit dicts keep numexpr from resolving names in the caller's frame
        value = ne.evaluate(bound_expr, local_dict=values, global_dict={}, truediv=True)
        return float(value)
    except Exception as e:
        raise EvaluationError(f"Invalid expression: {e}") from e


def format_number(value: float) -> str:
    """
    Render a number the way the calculator displays it.

    Integral values drop the fractional part, infinities render as
    ``Infinity``/``-Infinity``. ``float()`` parses every form produced here.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)
