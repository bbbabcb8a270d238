"""Unified numerical methods"""
from typing import Callable, Sequence, Tuple, Union
import math
import numpy as np

from .validation import IllDefinedFit, InputError, check_positive


_INV_PHI = (math.sqrt(5.0) - 1.0) / 2.0


def polyfit_lstsq(
    x: Sequence[float],
    y: Sequence[float],
    degree: int,
) -> np.ndarray:
    """
    Least-squares polynomial fit.

    Solves the Vandermonde system with ``numpy.linalg.lstsq`` and refuses
    rank-deficient design matrices instead of returning a minimum-norm
    solution.

    Args:
        x: Abscissae
        y: Ordinates
        degree: Polynomial degree (>= 1)

    Returns:
        Coefficients, highest power first (``numpy.polyval`` order)
    """
    if int(degree) != degree or degree < 1:
        raise IllDefinedFit(f"degree must be an integer >= 1, got {degree}")
    degree = int(degree)

    xa = np.asarray(x, dtype=float)
    ya = np.asarray(y, dtype=float)
    if xa.ndim != 1 or xa.shape != ya.shape:
        raise IllDefinedFit(f"x and y must be 1-D of same length, got {xa.shape} and {ya.shape}")
    if xa.size <= degree:
        raise IllDefinedFit(
            f"Degree {degree} fit needs more than {degree} points, got {xa.size}"
        )
    if not (np.all(np.isfinite(xa)) and np.all(np.isfinite(ya))):
        raise IllDefinedFit("Fit data must be finite")

    A = np.vander(xa, degree + 1)
    coeffs, _, rank, _ = np.linalg.lstsq(A, ya, rcond=None)
    if rank < degree + 1:
        raise IllDefinedFit(
            f"Design matrix is singular for degree {degree} "
            f"(rank {rank}, {np.unique(xa).size} distinct x values)"
        )
    return coeffs


def horner(coeffs: Sequence[float], x: float) -> float:
    """Evaluate polynomial (highest power first) at scalar x"""
    result = 0.0
    for c in coeffs:
        result = result * x + c
    return float(result)


def polyval(coeffs: Sequence[float], x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Evaluate polynomial at a scalar or an array"""
    if np.ndim(x) == 0:
        return horner(coeffs, float(x))
    return np.polyval(np.asarray(coeffs, dtype=float), np.asarray(x, dtype=float))


def golden_section(
    f: Callable[[float], float],
    a: float,
    b: float,
    args: tuple = (),
    tol: float = 1e-8,
    maxiter: int = 200,
) -> Tuple[float, float]:
    """
    Golden-section search for the minimum of a unimodal function on [a, b].

    Stops when the bracket is narrower than ``tol`` or after ``maxiter``
    reductions, whichever comes first, so the number of function
    evaluations is bounded.

    Returns:
        (x_min, f(x_min))
    """
    check_positive("tol", tol)
    check_positive("maxiter", maxiter)
    if a > b:
        raise InputError(f"Require a <= b, got a={a}, b={b}")

    def f_wrapped(x: float) -> float:
        return f(x, *args) if args else f(x)

    lo, hi = float(a), float(b)
    c = hi - _INV_PHI * (hi - lo)
    d = lo + _INV_PHI * (hi - lo)
    fc, fd = f_wrapped(c), f_wrapped(d)

    for _ in range(int(maxiter)):
        if hi - lo <= tol:
            break
        if fc <= fd:
            hi, d, fd = d, c, fc
            c = hi - _INV_PHI * (hi - lo)
            fc = f_wrapped(c)
        else:
            lo, c, fc = c, d, fd
            d = lo + _INV_PHI * (hi - lo)
            fd = f_wrapped(d)

    if fc <= fd:
        return c, fc
    return d, fd
