"""Bundler configuration: data model and file reader."""

from .models import (
    AutoloadConfig,
    AutoloadTarget,
    DependenciesConfig,
    DependencyExtractionConfig,
    SbomConfig,
    VendorBundlerConfig,
)
from .reader import ConfigReader, map_config

__all__ = [
    "AutoloadConfig",
    "AutoloadTarget",
    "ConfigReader",
    "DependenciesConfig",
    "DependencyExtractionConfig",
    "SbomConfig",
    "VendorBundlerConfig",
    "map_config",
]
