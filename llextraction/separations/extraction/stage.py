"""Per-stage construction: objective function and bounded 1-D solve"""

from abc import ABC, abstractmethod
from typing import Callable, Tuple
import logging

from scipy.optimize import minimize_scalar

from llextraction.core.validation import InputError, check_positive
from llextraction.core.numerical import golden_section
from .correlation import EquilibriumModel
from .equilibrium import CompositionPoint
from .geometry import intersect, squared_distance

logger = logging.getLogger(__name__)


class ScalarMinimizer(ABC):
    """Minimize f(x) over a closed interval, returning (x*, f(x*))"""

    @abstractmethod
    def minimize(
        self, f: Callable[[float], float], lower: float, upper: float
    ) -> Tuple[float, float]:
        pass


class BoundedBrentMinimizer(ScalarMinimizer):
    """Brent's bounded method (scipy ``minimize_scalar(method="bounded")``)"""

    def __init__(self, xatol: float = 1e-5, maxiter: int = 500):
        self.xatol = check_positive("xatol", xatol)
        self.maxiter = int(check_positive("maxiter", maxiter))

    def minimize(self, f, lower, upper):
        res = minimize_scalar(
            f,
            bounds=(lower, upper),
            method="bounded",
            options={"xatol": self.xatol, "maxiter": self.maxiter},
        )
        if not res.success:
            logger.warning("Bounded minimizer stopped early on [%g, %g]: %s", lower, upper, res.message)
        return float(res.x), float(res.fun)

    def __repr__(self) -> str:
        return f"BoundedBrentMinimizer(xatol={self.xatol}, maxiter={self.maxiter})"


class GoldenSectionMinimizer(ScalarMinimizer):
    """Plain golden-section search, no derivative or parabolic steps"""

    def __init__(self, tol: float = 1e-8, maxiter: int = 200):
        self.tol = check_positive("tol", tol)
        self.maxiter = int(check_positive("maxiter", maxiter))

    def minimize(self, f, lower, upper):
        x, fx = golden_section(f, lower, upper, tol=self.tol, maxiter=self.maxiter)
        return float(x), float(fx)

    def __repr__(self) -> str:
        return f"GoldenSectionMinimizer(tol={self.tol}, maxiter={self.maxiter})"


class StageObjective:
    """
    Discrepancy between a trial extract composition and the stage mixing point.

    For a trial extract solute fraction ys the tie line through
    E = (ys, g(ys)) and R = (h(ys), f(h(ys))) is intersected with the
    operating line through the fresh extract feed and the stage raffinate
    R[n]. The squared distance from that intersection to M[n] is zero only
    when the tie line passes through the mixing point.
    """

    def __init__(
        self,
        model: EquilibriumModel,
        raffinate: CompositionPoint,
        extract_feed: CompositionPoint,
        mixing_point: CompositionPoint,
        tol: float = 1e-12,
    ):
        self.model = model
        self.raffinate = raffinate
        self.extract_feed = extract_feed
        self.mixing_point = mixing_point
        self.tol = tol

    def intersection(self, ys: float) -> CompositionPoint:
        R_eq, E_eq = self.model.equilibrium_pair(ys)
        return intersect(E_eq, R_eq, self.extract_feed, self.raffinate, self.tol)

    def __call__(self, ys: float) -> float:
        return squared_distance(self.intersection(ys), self.mixing_point)


class StageSolver:
    """
    Bounded search for the extract solute fraction of one stage.

    The first stage searches [0, 1]; every later stage searches
    [0, y_S] of the previous extract, since extract solute only falls
    from stage to stage.
    """

    def __init__(self, minimizer: ScalarMinimizer = None):
        self.minimizer = minimizer if minimizer is not None else BoundedBrentMinimizer()

    @staticmethod
    def bounds(stage: int, previous_extract_solute: float) -> Tuple[float, float]:
        """Search interval for building stage ``stage`` (1-based)"""
        if stage <= 1:
            return 0.0, 1.0
        return 0.0, float(previous_extract_solute)

    def solve(
        self, objective: Callable[[float], float], lower: float, upper: float
    ) -> Tuple[float, float]:
        if lower > upper:
            raise InputError(f"Search interval is empty: [{lower}, {upper}]")
        ys, residual = self.minimizer.minimize(objective, lower, upper)
        logger.debug("ys=%.6f residual=%.3e on [%.6f, %.6f]", ys, residual, lower, upper)
        return ys, residual
