"""
Core data models for WebCalc.

Defines the per-user calculator state, the outcome of a single button
press, and the request/response schemas of the HTTP API.
"""

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class Operation(str, Enum):
    """Pending binary operation, valued by its button symbol."""
    NONE = ""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


DIGIT_BUTTONS = frozenset("0123456789.")
OPERATOR_BUTTONS = frozenset(op.value for op in Operation if op is not Operation.NONE)
EQUALS_BUTTON = "="
CLEAR_BUTTON = "C"
BACKSPACE_BUTTON = "Backspace"

INVALID_EXPRESSION = "Invalid Expression"


# =============================================================================
# Calculator State
# =============================================================================

class CalculatorState(BaseModel):
    """
    Calculator state for one user.

    ``display`` holds the number being typed (or the last computed value),
    ``combined_display`` the whole expression typed since the last clear.
    Mutated in place by the engine, one button press at a time.
    """
    display: str = "0"
    result: float = 0.0
    operation: Operation = Operation.NONE
    is_new_input: bool = True
    combined_display: str = ""


@dataclass
class TransitionResult:
    """Result of applying one button press to a state."""
    state: CalculatorState
    success: bool = True
    error: str | None = None


# =============================================================================
# API Models
# =============================================================================

class PressRequest(BaseModel):
    """Request model for pressing a calculator button."""
    button: str = Field(..., max_length=16, description="Button token, e.g. '7', '+', '=', 'C', 'Backspace'")


class CalculatorView(BaseModel):
    """
    Renderable calculator state returned by the API.

    JSON has no infinity or NaN, so a non-finite ``result`` is sent as null;
    ``display`` still carries its text form.
    """
    display: str
    combined_display: str
    result: float | None
    operation: Operation
    is_new_input: bool
    error: str | None = None

    @classmethod
    def from_state(cls, state: CalculatorState, error: str | None = None) -> "CalculatorView":
        return cls(
            display=state.display,
            combined_display=state.combined_display,
            result=state.result if math.isfinite(state.result) else None,
            operation=state.operation,
            is_new_input=state.is_new_input,
            error=error,
        )
