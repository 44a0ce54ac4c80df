"""Immutable value objects produced by the bundlers."""

from .autoload import Autoload
from .class_map import ClassMap
from .dependencies import Dependencies
from .files import Files
from .manifest import Manifest
from .namespaces import Psr4Namespaces

__all__ = [
    "Autoload",
    "ClassMap",
    "Dependencies",
    "Files",
    "Manifest",
    "Psr4Namespaces",
]
