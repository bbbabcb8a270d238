"""Liquid-liquid extraction: equilibrium correlations and stage construction"""

from .equilibrium import CompositionPoint, LLEquilibriumData
from .correlation import EquilibriumCorrelation, EquilibriumModel
from .geometry import line_through, intersect_lines, intersect, mixing_point
from .stage import (
    ScalarMinimizer, BoundedBrentMinimizer, GoldenSectionMinimizer,
    StageObjective, StageSolver,
)
from .cascade import (
    FeedStream, StreamRecord, CascadeSpec, CascadeResult, StageCascade, ll_stages
)

__all__ = [
    # Equilibrium data
    'CompositionPoint', 'LLEquilibriumData',

    # Correlations
    'EquilibriumCorrelation', 'EquilibriumModel',

    # Geometry
    'line_through', 'intersect_lines', 'intersect', 'mixing_point',

    # Stage solve
    'ScalarMinimizer', 'BoundedBrentMinimizer', 'GoldenSectionMinimizer',
    'StageObjective', 'StageSolver',

    # Cascade
    'FeedStream', 'StreamRecord', 'CascadeSpec', 'CascadeResult',
    'StageCascade', 'll_stages',
]
