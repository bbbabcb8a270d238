"""Straight-line constructions on the rectangular diagram"""

from typing import Sequence, Tuple
import math

from llextraction.core.validation import (
    DegenerateLine, InputError, ParallelLines
)
from .equilibrium import CompositionPoint

Point = Sequence[float]


def line_through(p1: Point, p2: Point, tol: float = 1e-12) -> Tuple[float, float]:
    """
    Slope and intercept of the line through p1 and p2.

    A vertical line is returned as (inf, x).
    """
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])

    if math.hypot(x2 - x1, y2 - y1) <= tol:
        raise DegenerateLine(f"Points ({x1:.6g}, {y1:.6g}) and ({x2:.6g}, {y2:.6g}) coincide")
    if abs(x2 - x1) <= tol:
        return float('inf'), x1

    m = (y2 - y1) / (x2 - x1)
    b = y1 - m * x1
    return m, b


def intersect_lines(
    m1: float, b1: float, m2: float, b2: float, tol: float = 1e-12
) -> Tuple[float, float]:
    """Find intersection of two lines given as (slope, intercept)"""
    if not math.isfinite(m1) and not math.isfinite(m2):
        raise ParallelLines("Both lines vertical")
    if not math.isfinite(m1):
        x = b1
        y = m2 * x + b2
        return x, y
    if not math.isfinite(m2):
        x = b2
        y = m1 * x + b1
        return x, y
    if abs(m1 - m2) <= tol:
        raise ParallelLines(f"Lines are parallel (slopes {m1:.6g} and {m2:.6g})")

    x = (b2 - b1) / (m1 - m2)
    y = m1 * x + b1
    return x, y


def intersect(
    p1: Point, p2: Point, p3: Point, p4: Point, tol: float = 1e-12
) -> CompositionPoint:
    """Intersection of line p1-p2 with line p3-p4"""
    m1, b1 = line_through(p1, p2, tol)
    m2, b2 = line_through(p3, p4, tol)
    x, y = intersect_lines(m1, b1, m2, b2, tol)
    return CompositionPoint(x, y)


def mixing_point(
    flow_a: float, point_a: Point, flow_b: float, point_b: Point
) -> CompositionPoint:
    """
    Lever rule: mass-weighted average of two streams.

    z = (A x_a + B x_b) / (A + B)
    """
    total = flow_a + flow_b
    if total <= 0:
        raise InputError(f"Total mixed flow must be > 0, got {total}")

    z_s = (flow_a * point_a[0] + flow_b * point_b[0]) / total
    z_d = (flow_a * point_a[1] + flow_b * point_b[1]) / total
    return CompositionPoint(z_s, z_d)


def squared_distance(p: Point, q: Point) -> float:
    return (p[0] - q[0]) ** 2 + (p[1] - q[1]) ** 2
