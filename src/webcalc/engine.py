"""
Calculator engine for WebCalc.

Turns one button press into a change of ``CalculatorState``. Digit and
operator presses keep a running pairwise result; ``=`` hands the whole typed
expression to the expression evaluator.
"""

import math
from typing import Callable

import structlog

from webcalc.evaluator import CalculatorError, evaluate_expression, format_number
from webcalc.models import (
    BACKSPACE_BUTTON,
    CLEAR_BUTTON,
    DIGIT_BUTTONS,
    EQUALS_BUTTON,
    INVALID_EXPRESSION,
    OPERATOR_BUTTONS,
    CalculatorState,
    Operation,
    TransitionResult,
)

logger = structlog.get_logger()

Evaluator = Callable[[str], float]


def press(
    state: CalculatorState,
    button: str,
    evaluator: Evaluator = evaluate_expression,
) -> TransitionResult:
    """
    Apply a button press to ``state`` in place.

    Evaluator failures on ``=`` are recovered inside the engine. Any other
    failure is returned as an unsuccessful result whose state has the error
    written to ``display`` and every other field left as it was.
    """
    try:
        if button in DIGIT_BUTTONS:
            handle_digit(state, button)
        elif button in OPERATOR_BUTTONS:
            handle_operation(state, Operation(button))
        elif button == EQUALS_BUTTON:
            evaluate_combined_display(state, evaluator)
        elif button == CLEAR_BUTTON:
            clear(state)
        elif button == BACKSPACE_BUTTON:
            backspace(state)
        else:
            logger.warning("Invalid button pressed", button=button)
    except Exception as e:
        logger.exception("Error processing button press", button=button, error=str(e))
        state.display = f"Error: {e}"
        return TransitionResult(state=state, success=False, error=str(e))

    return TransitionResult(state=state)


def handle_digit(state: CalculatorState, digit: str) -> None:
    """Start a new number or extend the current one."""
    if state.is_new_input:
        state.display = digit
        state.combined_display += digit
        state.is_new_input = False
        return

    # One decimal point per number
    if digit == "." and "." in state.display:
        return

    state.display += digit
    state.combined_display += digit


def handle_operation(state: CalculatorState, operation: Operation) -> None:
    """Fold the current entry into the running result and queue ``operation``."""
    if not state.is_new_input:
        perform_calculation(state)

    state.result = float(state.display)
    state.operation = operation
    state.is_new_input = True
    state.combined_display += operation.value


def perform_calculation(state: CalculatorState) -> None:
    """Combine ``display`` into ``result`` using the pending operation."""
    current = float(state.display)

    if state.operation is Operation.ADD:
        state.result += current
    elif state.operation is Operation.SUBTRACT:
        state.result -= current
    elif state.operation is Operation.MULTIPLY:
        state.result *= current
    elif state.operation is Operation.DIVIDE:
        state.result = _divide(state.result, current)
    else:
        state.result = current

    state.display = format_number(state.result)
    state.operation = Operation.NONE
    state.is_new_input = True


def evaluate_combined_display(state: CalculatorState, evaluator: Evaluator = evaluate_expression) -> None:
    """Evaluate the whole typed expression, resetting to an error marker on failure."""
    try:
        value = evaluator(state.combined_display)
    except CalculatorError as e:
        logger.error("Error evaluating expression", expression=state.combined_display, error=str(e))
        state.display = INVALID_EXPRESSION
        state.combined_display = INVALID_EXPRESSION
        state.result = 0.0
        state.operation = Operation.NONE
        state.is_new_input = True
        return

    state.display = format_number(value)
    state.combined_display = state.display
    state.result = value
    state.operation = Operation.NONE
    state.is_new_input = True


def clear(state: CalculatorState) -> None:
    """Reset ``state`` to its defaults."""
    state.display = "0"
    state.result = 0.0
    state.operation = Operation.NONE
    state.is_new_input = True
    state.combined_display = ""


def backspace(state: CalculatorState) -> None:
    """
    Drop the last character of the typed expression.

    Only ``combined_display`` is edited; ``display``, ``result`` and
    ``operation`` keep their values until the next digit, operator or ``=``.
    """
    if len(state.combined_display) > 1:
        state.combined_display = state.combined_display[:-1]
    else:
        state.combined_display = "0"

    if state.combined_display in ("", "0"):
        state.is_new_input = True


def _divide(dividend: float, divisor: float) -> float:
    """IEEE 754 division: x/0 is a signed infinity and 0/0 is NaN."""
    if divisor == 0:
        if dividend == 0 or math.isnan(dividend):
            return math.nan
        return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)
    return dividend / divisor
