"""Stage-by-stage liquid-liquid extraction with fresh solvent at every stage"""

from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Sequence, Tuple
import logging
import numpy as np

from llextraction.core.base import SolverBase, SpecificationBase
from llextraction.core.validation import (
    ChemEngError, ConvergenceFailure, DegenerateMassBalance, InputError,
    check_finite, check_fraction_pair, check_in_closed_01, check_positive,
)
from .correlation import EquilibriumModel
from .equilibrium import CompositionPoint, LLEquilibriumData
from .geometry import mixing_point
from .stage import ScalarMinimizer, StageObjective, StageSolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedStream(SpecificationBase):
    """Feed stream: mass flow rate with solute and solvent mass fractions"""
    flow: float
    solute: float
    solvent: float

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        check_finite("flow", self.flow)
        check_positive("flow", self.flow)
        check_fraction_pair("feed", self.solute, self.solvent)

    @property
    def point(self) -> CompositionPoint:
        return CompositionPoint(float(self.solute), float(self.solvent))


@dataclass(frozen=True)
class StreamRecord:
    """Streams leaving stage ``stage`` (stage 0 holds the feeds)"""
    stage: int
    R: CompositionPoint       # Raffinate composition
    E: CompositionPoint       # Extract composition
    M: CompositionPoint       # Mixing point for the next contact
    R_flow: float             # Raffinate mass flow
    E_flow: float             # Extract mass flow
    objective: Optional[float] = None


@dataclass(frozen=True)
class CascadeSpec(SpecificationBase):
    """Specification for the liquid-liquid stage calculation"""
    equilibrium: LLEquilibriumData
    raffinate_feed: FeedStream
    extract_feed: FeedStream
    xS_target: float             # Final raffinate solute mass fraction
    degree: int = 2              # Polynomial degree for all correlations
    max_stages: int = 130
    tol: float = 1e-12
    minimizer: Optional[ScalarMinimizer] = None
    raise_on_failure: bool = True

    def validate(self) -> None:
        check_in_closed_01("xS_target", self.xS_target)
        if self.xS_target >= self.raffinate_feed.solute:
            raise InputError(
                f"xS_target ({self.xS_target}) must be below the raffinate feed "
                f"solute fraction ({self.raffinate_feed.solute})"
            )
        if int(self.degree) != self.degree or self.degree < 1:
            raise InputError(f"degree must be an integer >= 1, got {self.degree}")
        if self.degree >= self.equilibrium.n_points:
            raise InputError(
                f"degree ({self.degree}) must be below the number of equilibrium "
                f"points ({self.equilibrium.n_points})"
            )
        check_finite("max_stages", self.max_stages)
        if int(self.max_stages) != self.max_stages or self.max_stages < 1:
            raise InputError(f"max_stages must be an integer >= 1, got {self.max_stages}")
        check_finite("tol", self.tol)
        check_positive("tol", self.tol)


@dataclass(frozen=True)
class CascadeResult:
    """Ordered stage records plus the fitted equilibrium model"""
    spec: CascadeSpec
    model: EquilibriumModel
    records: Tuple[StreamRecord, ...]
    converged: bool

    @property
    def N(self) -> int:
        """Number of equilibrium stages"""
        return len(self.records) - 1

    @property
    def R(self) -> np.ndarray:
        return np.array([r.R for r in self.records], dtype=float)

    @property
    def E(self) -> np.ndarray:
        return np.array([r.E for r in self.records], dtype=float)

    @property
    def M(self) -> np.ndarray:
        return np.array([r.M for r in self.records], dtype=float)

    @property
    def R_flow(self) -> np.ndarray:
        return np.array([r.R_flow for r in self.records], dtype=float)

    @property
    def E_flow(self) -> np.ndarray:
        return np.array([r.E_flow for r in self.records], dtype=float)

    @property
    def objective_history(self) -> List[float]:
        return [r.objective for r in self.records[1:]]

    def mass_balance_errors(self) -> np.ndarray:
        """Rf[n] + E0 - (Rf[n+1] + Ef[n+1]) for every stage"""
        Rf, Ef = self.R_flow, self.E_flow
        return Rf[:-1] + self.spec.extract_feed.flow - (Rf[1:] + Ef[1:])

    def solute_balance_errors(self) -> np.ndarray:
        """Solute in minus solute out for every stage"""
        Rf, Ef = self.R_flow, self.E_flow
        xs, ys = self.R[:, 0], self.E[:, 0]
        feed = self.spec.extract_feed
        return Rf[:-1] * xs[:-1] + feed.flow * feed.solute - (Rf[1:] * xs[1:] + Ef[1:] * ys[1:])

    def performance(self) -> Dict[str, float]:
        """Overall solute recovery and solvent usage"""
        feed = self.spec.raffinate_feed
        solute_in = feed.flow * feed.solute
        solute_left = self.records[-1].R_flow * self.records[-1].R.solute
        return {
            "final_raffinate_solute": self.records[-1].R.solute,
            "final_raffinate_flow": self.records[-1].R_flow,
            "extraction_efficiency": 1.0 - solute_left / solute_in,
            "total_solvent": self.N * self.spec.extract_feed.flow,
            "total_extract_flow": float(np.sum(self.E_flow[1:])),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": {
                "raffinate_feed": self.spec.raffinate_feed.to_dict(),
                "extract_feed": self.spec.extract_feed.to_dict(),
                "xS_target": self.spec.xS_target,
                "degree": self.spec.degree,
                "max_stages": self.spec.max_stages,
            },
            "converged": self.converged,
            "N_stages": self.N,
            "correlations": self.model.to_dict(),
            "stages": [
                {
                    "stage": r.stage,
                    "R": {"xS": r.R.solute, "xD": r.R.solvent},
                    "E": {"yS": r.E.solute, "yD": r.E.solvent},
                    "M": {"zS": r.M.solute, "zD": r.M.solvent},
                    "objective": r.objective,
                }
                for r in self.records
            ],
            "flows": {
                "R": self.R_flow.tolist(),
                "E": self.E_flow.tolist(),
            },
            "performance": self.performance(),
            "verification": {
                "max_mass_balance_error": float(np.max(np.abs(self.mass_balance_errors()), initial=0.0)),
                "max_solute_balance_error": float(np.max(np.abs(self.solute_balance_errors()), initial=0.0)),
            },
        }


class StageCascade(SolverBase):
    """
    Stage construction on the rectangular (x_S, x_D) diagram.

    The raffinate leaving each stage is contacted with a fresh charge of
    the extract feed. For every stage:

    1. find y_S on the extract curve whose tie line passes through the
       mixing point M[n] (bounded 1-D minimization);
    2. read R[n+1] and E[n+1] off the correlations;
    3. close the solute balance for the extract flow

           E[n+1] = (R[n] xS[n] + E0 yS0 - (R[n] + E0) xS[n+1]) / (yS[n+1] - xS[n+1])
           R[n+1] = R[n] + E0 - E[n+1]

    4. mix R[n+1] with fresh extract feed to get M[n+1].

    Stages are added until the raffinate solute fraction reaches the
    target or ``max_stages`` is hit.
    """

    def __init__(self, spec: CascadeSpec):
        self.spec = spec
        self.validate()
        self.model = EquilibriumModel.fit(spec.equilibrium, spec.degree)
        self.stage_solver = StageSolver(spec.minimizer)

    def validate(self) -> None:
        self.spec.validate()

    def _initial_record(self) -> StreamRecord:
        raf, ext = self.spec.raffinate_feed, self.spec.extract_feed
        return StreamRecord(
            stage=0,
            R=raf.point,
            E=ext.point,
            M=mixing_point(raf.flow, raf.point, ext.flow, ext.point),
            R_flow=float(raf.flow),
            E_flow=float(ext.flow),
        )

    def _next_stage(self, prev: StreamRecord) -> StreamRecord:
        """Build stage prev.stage + 1 from the streams leaving prev"""
        stage = prev.stage + 1
        ext = self.spec.extract_feed
        E0, feed = float(ext.flow), ext.point

        objective = StageObjective(self.model, prev.R, feed, prev.M, self.spec.tol)
        lower, upper = self.stage_solver.bounds(stage, prev.E.solute)
        ys, residual = self.stage_solver.solve(objective, lower, upper)

        R_new, E_new = self.model.equilibrium_pair(ys)

        denom = E_new.solute - R_new.solute
        if abs(denom) <= self.spec.tol:
            raise DegenerateMassBalance(
                f"Extract and raffinate solute fractions coincide (yS = xS = {ys:.6g})"
            )
        E_flow = (
            prev.R_flow * prev.R.solute + E0 * feed.solute
            - (prev.R_flow + E0) * R_new.solute
        ) / denom
        R_flow = prev.R_flow + E0 - E_flow

        if R_flow + E0 <= self.spec.tol:
            raise DegenerateMassBalance(f"Raffinate flow collapsed to {R_flow:.6g}")

        record = StreamRecord(
            stage=stage,
            R=R_new,
            E=E_new,
            M=mixing_point(R_flow, R_new, E0, feed),
            R_flow=float(R_flow),
            E_flow=float(E_flow),
            objective=residual,
        )
        logger.debug(
            "stage %d: R=(%.5f, %.5f) E=(%.5f, %.5f) R_flow=%.4g E_flow=%.4g",
            stage, R_new.solute, R_new.solvent, E_new.solute, E_new.solvent, R_flow, E_flow,
        )
        return record

    def run(self) -> CascadeResult:
        """Step off stages until the target raffinate composition is reached"""
        records = [self._initial_record()]
        target = self.spec.xS_target

        while True:
            try:
                records.append(self._next_stage(records[-1]))
            except ChemEngError as exc:
                exc.stage = records[-1].stage + 1
                raise

            if records[-1].R.solute <= target:
                result = CascadeResult(self.spec, self.model, tuple(records), converged=True)
                logger.info("Converged in %d stages (xS = %.5f)", result.N, records[-1].R.solute)
                return result

            if records[-1].stage >= self.spec.max_stages:
                break

        result = CascadeResult(self.spec, self.model, tuple(records), converged=False)
        message = (
            f"Target xS = {target} not reached within {self.spec.max_stages} stages "
            f"(last xS = {records[-1].R.solute:.6g})"
        )
        if self.spec.raise_on_failure:
            raise ConvergenceFailure(message, stage=records[-1].stage, result=result)
        logger.warning("%s; returning partial results", message)
        return result

    def solve(self) -> Dict[str, Any]:
        """Run the cascade and return a summary dictionary"""
        return self.run().to_dict()


def ll_stages(
    xS_eq: Sequence[float],
    xD_eq: Sequence[float],
    yS_eq: Sequence[float],
    yD_eq: Sequence[float],
    xS_target: float,
    R0: float,
    xS0: float,
    xD0: float,
    E0: float,
    yS0: float,
    yD0: float,
    degree: int = 2,
    **options: Any,
) -> CascadeResult:
    """
    Convenience function: number of stages and stream trajectories.

    Args:
        xS_eq, xD_eq: Raffinate equilibrium data (solute, solvent)
        yS_eq, yD_eq: Extract equilibrium data (solute, solvent)
        xS_target: Desired final raffinate solute mass fraction
        R0, xS0, xD0: Raffinate feed flow and composition
        E0, yS0, yD0: Extract feed flow and composition
        degree: Polynomial degree for the correlations
        **options: Extra CascadeSpec fields (max_stages, tol, minimizer, ...)

    Returns:
        CascadeResult
    """
    spec = CascadeSpec(
        equilibrium=LLEquilibriumData(xS_eq, xD_eq, yS_eq, yD_eq),
        raffinate_feed=FeedStream(R0, xS0, xD0),
        extract_feed=FeedStream(E0, yS0, yD0),
        xS_target=xS_target,
        degree=degree,
        **options,
    )
    return StageCascade(spec).run()
