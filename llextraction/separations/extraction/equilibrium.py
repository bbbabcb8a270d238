"""Liquid-liquid equilibrium data on rectangular (solute, solvent) coordinates"""

from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple
import numpy as np

from llextraction.core.validation import (
    InputError, as_float_list, check_same_length
)


class CompositionPoint(NamedTuple):
    """
    Ternary composition on a rectangular diagram.

    Only solute (S) and solvent (D) mass fractions are carried; the
    diluent is x_B = 1 - x_S - x_D.
    """
    solute: float
    solvent: float

    @property
    def diluent(self) -> float:
        return 1.0 - self.solute - self.solvent


@dataclass(frozen=True, eq=False)
class LLEquilibriumData:
    """
    Tabulated liquid-liquid equilibrium data for a ternary system.

    Row i of the raffinate table (x_S, x_D) and row i of the extract
    table (y_S, y_D) are the two ends of one experimental tie line:

        x_S + x_D + x_B = 1.0
        y_S + y_D + y_B = 1.0

    Args:
        x_S: Solute mass fraction in the raffinate phase
        x_D: Solvent mass fraction in the raffinate phase
        y_S: Solute mass fraction in the extract phase
        y_D: Solvent mass fraction in the extract phase
    """
    x_S: Sequence[float]
    x_D: Sequence[float]
    y_S: Sequence[float]
    y_D: Sequence[float]

    def __post_init__(self) -> None:
        check_same_length("x_S", self.x_S, "x_D", self.x_D, min_length=3)
        check_same_length("y_S", self.y_S, "y_D", self.y_D, min_length=3)
        check_same_length("x_S", self.x_S, "y_S", self.y_S)

        for name in ("x_S", "x_D", "y_S", "y_D"):
            arr = np.array(as_float_list(name, getattr(self, name)))
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

        for i, (xS, xD, xB) in enumerate(zip(self.x_S, self.x_D, self.x_B)):
            if not (0 <= xS <= 1 and 0 <= xD <= 1 and xB >= -1e-10):
                raise InputError(f"Raffinate composition at index {i} invalid")

        for i, (yS, yD, yB) in enumerate(zip(self.y_S, self.y_D, self.y_B)):
            if not (0 <= yS <= 1 and 0 <= yD <= 1 and yB >= -1e-10):
                raise InputError(f"Extract composition at index {i} invalid")

    @property
    def x_B(self) -> np.ndarray:
        """Diluent mass fraction in the raffinate phase"""
        return 1.0 - self.x_S - self.x_D

    @property
    def y_B(self) -> np.ndarray:
        """Diluent mass fraction in the extract phase"""
        return 1.0 - self.y_S - self.y_D

    @property
    def n_points(self) -> int:
        return len(self.x_S)

    def tie_line(self, idx: int) -> Tuple[CompositionPoint, CompositionPoint]:
        """Get (raffinate, extract) ends of tie line ``idx``"""
        if not -self.n_points <= idx < self.n_points:
            raise IndexError(f"Only {self.n_points} tie lines available")
        raffinate = CompositionPoint(float(self.x_S[idx]), float(self.x_D[idx]))
        extract = CompositionPoint(float(self.y_S[idx]), float(self.y_D[idx]))
        return raffinate, extract

    def tie_lines(self) -> Tuple[Tuple[CompositionPoint, CompositionPoint], ...]:
        return tuple(self.tie_line(i) for i in range(self.n_points))
