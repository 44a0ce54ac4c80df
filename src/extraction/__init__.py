"""Dependency extraction for vendor library bundling."""

from .dependency_extractor import (
    DependencyExtractionProblem,
    DependencyExtractor,
    PackageKind,
    classify_package,
)
from .dependency_set import DependencySet

__all__ = [
    "DependencyExtractionProblem",
    "DependencyExtractor",
    "DependencySet",
    "PackageKind",
    "classify_package",
]
