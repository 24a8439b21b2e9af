from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.models.result_types import NeutralAxisResult


class InvalidBarSizeError(ValueError):
    """Raised when a bar designation is not in the rebar catalog."""


class EmptyTensionSteelError(ValueError):
    """Raised when flexural capacity is requested for a section without tension steel."""


class NoNeutralAxisError(ArithmeticError):
    """Raised when the equilibrium solver finds no sign change in its sampled domain."""

    def __init__(self, message: str, solution: NeutralAxisResult | None = None) -> None:
        super().__init__(message)
        self.solution = solution
