# llextraction/core/__init__.py
"""Core utilities for all chemical engineering calculations"""

from .validation import (
    check_positive,
    check_in_closed_01,
    check_finite,
    check_fraction_pair,
    check_same_length,
    as_float_list,
    ChemEngError,
    InputError,
    IllDefinedFit,
    GeometryError,
    ParallelLines,
    DegenerateLine,
    DegenerateMassBalance,
    ConvergenceError,
    ConvergenceFailure,
)

from .numerical import (
    polyfit_lstsq,
    horner,
    polyval,
    golden_section,
)

from .base import (
    SolverBase,
    SpecificationBase,
)

__all__ = [
    # Validation
    'check_positive', 'check_in_closed_01', 'check_finite',
    'check_fraction_pair', 'check_same_length', 'as_float_list',

    # Errors
    'ChemEngError', 'InputError', 'IllDefinedFit',
    'GeometryError', 'ParallelLines', 'DegenerateLine',
    'DegenerateMassBalance', 'ConvergenceError', 'ConvergenceFailure',

    # Numerical
    'polyfit_lstsq', 'horner', 'polyval', 'golden_section',

    # Base Classes
    'SolverBase', 'SpecificationBase',
]
