"""Polynomial equilibrium correlations fitted from tabulated LLE data"""

from dataclasses import dataclass
from typing import Dict, Any, Sequence, Tuple, Union
import numpy as np

from llextraction.core.validation import IllDefinedFit
from llextraction.core.numerical import polyfit_lstsq, polyval
from .equilibrium import CompositionPoint, LLEquilibriumData


class EquilibriumCorrelation:
    """
    Polynomial y = p(x) fitted by least squares.

    Coefficients are stored highest power first and never change after
    fitting.
    """

    def __init__(self, coefficients: Sequence[float]):
        coeffs = np.array(coefficients, dtype=float)
        if coeffs.ndim != 1 or coeffs.size < 2:
            raise IllDefinedFit(f"Need at least 2 coefficients, got {coeffs.size}")
        coeffs.setflags(write=False)
        self._coefficients = coeffs

    @classmethod
    def fit(
        cls,
        xs: Sequence[float],
        ys: Sequence[float],
        degree: int = 2,
    ) -> "EquilibriumCorrelation":
        return cls(polyfit_lstsq(xs, ys, degree))

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients

    @property
    def degree(self) -> int:
        return self._coefficients.size - 1

    def evaluate(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        return polyval(self._coefficients, x)

    __call__ = evaluate

    def residuals(self, xs: Sequence[float], ys: Sequence[float]) -> np.ndarray:
        """Fit residuals y - p(x) at the given points"""
        return np.asarray(ys, dtype=float) - self.evaluate(np.asarray(xs, dtype=float))

    def __repr__(self) -> str:
        coeffs = ", ".join(f"{c:.6g}" for c in self._coefficients)
        return f"{type(self).__name__}([{coeffs}])"


@dataclass(frozen=True)
class EquilibriumModel:
    """
    The three correlations used by the stage construction:

        raffinate curve     x_D = f(x_S)
        extract curve       y_D = g(y_S)
        tie-line relation   x_S = h(y_S)
    """
    raffinate: EquilibriumCorrelation
    extract: EquilibriumCorrelation
    tie_line: EquilibriumCorrelation

    @classmethod
    def fit(cls, data: LLEquilibriumData, degree: int = 2) -> "EquilibriumModel":
        """Fit all three correlations; IllDefinedFit if the data cannot support ``degree``"""
        return cls(
            raffinate=EquilibriumCorrelation.fit(data.x_S, data.x_D, degree),
            extract=EquilibriumCorrelation.fit(data.y_S, data.y_D, degree),
            tie_line=EquilibriumCorrelation.fit(data.y_S, data.x_S, degree),
        )

    def equilibrium_pair(self, ys: float) -> Tuple[CompositionPoint, CompositionPoint]:
        """
        Raffinate and extract compositions on the tie line through y_S = ys.

        Returns:
            (raffinate, extract)
        """
        yd = self.extract(ys)
        xs = self.tie_line(ys)
        xd = self.raffinate(xs)
        return CompositionPoint(xs, xd), CompositionPoint(float(ys), yd)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raffinate": self.raffinate.coefficients.tolist(),
            "extract": self.extract.coefficients.tolist(),
            "tie_line": self.tie_line.coefficients.tolist(),
        }
