"""Exceptions raised by the linkage engine.

Missing data is never an error; these cover programming mistakes and
invalid configuration only.
"""
from __future__ import annotations


class LinkageError(Exception):
    """Base class for all linkage errors."""


class TypeMismatchError(LinkageError):
    """Structural comparison was asked to compare two different types."""

    def __init__(self, left_type: str, right_type: str) -> None:
        self.left_type = left_type
        self.right_type = right_type
        super().__init__(f"Cannot compare {left_type} with {right_type}")


class ChecksumError(LinkageError):
    """A detailed comparison's contributions do not add up to its score."""

    def __init__(self, calculator: str, residual: float) -> None:
        self.calculator = calculator
        self.residual = residual
        super().__init__(
            f"Checksum mismatch in {calculator}: residual={residual:.3e}"
        )


class ConfigurationError(LinkageError, ValueError):
    """Weights or thresholds are inconsistent."""
