"""Stage calculations for liquid-liquid extraction"""
import logging

from .core import (
    ChemEngError, InputError, IllDefinedFit, GeometryError, ParallelLines,
    DegenerateLine, DegenerateMassBalance, ConvergenceError, ConvergenceFailure,
)
from .separations.extraction import (
    CompositionPoint, LLEquilibriumData, EquilibriumCorrelation, EquilibriumModel,
    FeedStream, StreamRecord, CascadeSpec, CascadeResult, StageCascade, ll_stages,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    'ChemEngError', 'InputError', 'IllDefinedFit', 'GeometryError', 'ParallelLines',
    'DegenerateLine', 'DegenerateMassBalance', 'ConvergenceError', 'ConvergenceFailure',
    'CompositionPoint', 'LLEquilibriumData', 'EquilibriumCorrelation', 'EquilibriumModel',
    'FeedStream', 'StreamRecord', 'CascadeSpec', 'CascadeResult', 'StageCascade', 'll_stages',
]
