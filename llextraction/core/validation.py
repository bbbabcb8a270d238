# llextraction/core/validation.py
"""Unified validation and error taxonomy for all modules"""
from typing import Union, Sequence, List, Optional, Any
import math


class ChemEngError(Exception):
    """
    Base exception for all chemical engineering calculations.

    ``stage`` is filled in by the stage cascade when the failure happens
    while a stage is being built; it stays ``None`` otherwise.
    """

    def __init__(self, message: str = "", stage: Optional[int] = None):
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stage is not None:
            return f"{msg} (stage {self.stage})"
        return msg


class InputError(ChemEngError):
    """Invalid input parameters"""
    pass


class IllDefinedFit(InputError):
    """Not enough (or degenerate) data for the requested polynomial degree"""
    pass


class GeometryError(ChemEngError):
    """Graphical construction cannot be carried out"""
    pass


class ParallelLines(GeometryError):
    """Two lines have the same slope and no unique intersection"""
    pass


class DegenerateLine(GeometryError):
    """A line was defined by two coincident points"""
    pass


class DegenerateMassBalance(ChemEngError):
    """Stage mass balance has a vanishing denominator"""
    pass


class ConvergenceError(ChemEngError):
    """Numerical method failed to converge"""
    pass


class ConvergenceFailure(ConvergenceError):
    """
    Stage cap reached before the target composition.

    ``result`` holds the partial cascade result built so far.
    """

    def __init__(self, message: str = "", stage: Optional[int] = None, result: Any = None):
        super().__init__(message, stage=stage)
        self.result = result


def check_positive(name: str, value: Union[float, int]) -> float:
    """Check value is positive"""
    v = float(value)
    if not v > 0:
        raise InputError(f"{name} must be > 0, got {v}")
    return v


def check_in_closed_01(name: str, value: float) -> float:
    """Check value in [0, 1]"""
    v = float(value)
    if not (0.0 <= v <= 1.0):
        raise InputError(f"{name} must be in [0, 1], got {v}")
    return v


def check_finite(name: str, value: float) -> float:
    """Check value is a finite number"""
    v = float(value)
    if not math.isfinite(v):
        raise InputError(f"{name} must be finite, got {v}")
    return v


def check_fraction_pair(name: str, solute: float, solvent: float, tolerance: float = 1e-10) -> None:
    """Check a (solute, solvent) pair leaves a non-negative diluent fraction"""
    check_in_closed_01(f"{name} solute", solute)
    check_in_closed_01(f"{name} solvent", solvent)
    if solute + solvent > 1.0 + tolerance:
        raise InputError(
            f"{name}: solute + solvent must be <= 1, got {solute + solvent}"
        )


def check_same_length(
    name_a: str,
    a: Sequence[float],
    name_b: str,
    b: Sequence[float],
    min_length: Optional[int] = None,
) -> int:
    """Check two sequences have equal length (and optionally a minimum length)"""
    if len(a) != len(b):
        raise InputError(f"{name_a} and {name_b} must have same length, got {len(a)} and {len(b)}")
    n = len(a)
    if min_length is not None and n < min_length:
        raise InputError(f"{name_a} must have length >= {min_length}, got {n}")
    return n


def as_float_list(name: str, values: Sequence[float]) -> List[float]:
    """Convert a sequence to a list of finite floats"""
    out = [float(v) for v in values]
    for i, v in enumerate(out):
        if not math.isfinite(v):
            raise InputError(f"{name}[{i}] must be finite, got {v}")
    return out
