# llextraction/core/base.py
"""Base classes for all modules"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Dict, Any


class SolverBase(ABC):
    """Base class for all solvers"""

    @abstractmethod
    def solve(self) -> Dict[str, Any]:
        """Main solving method"""
        pass

    def validate(self) -> None:
        """Validate inputs before solving"""
        pass


@dataclass(frozen=True)
class SpecificationBase:
    """Base class for all specifications"""

    def validate(self) -> None:
        """Validate specification parameters"""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, expanding nested specifications"""
        out = {}
        for f in fields(self):
            if f.name.startswith('_'):
                continue
            value = getattr(self, f.name)
            if isinstance(value, SpecificationBase):
                value = value.to_dict()
            out[f.name] = value
        return out
