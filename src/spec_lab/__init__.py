"""Forensic browsing over the revision history of a specification corpus."""

from .lab import DistanceReport, SnapshotComparison, SpecEvolutionLab, create_lab

__all__ = ["DistanceReport", "SnapshotComparison", "SpecEvolutionLab", "create_lab"]

__version__ = "0.1.0"
