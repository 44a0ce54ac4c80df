"""Composer project access: packages, repositories, manifests and installs."""

from .composer import Composer, Locker, composer_version
from .manifest import JsonManifest
from .package import Package, RootPackage
from .repository import (
    ArrayRepository,
    ComposerRepository,
    PathRepository,
    RepositoryManager,
    is_platform_package,
)

__all__ = [
    "Composer",
    "Locker",
    "composer_version",
    "JsonManifest",
    "Package",
    "RootPackage",
    "ArrayRepository",
    "ComposerRepository",
    "PathRepository",
    "RepositoryManager",
    "is_platform_package",
]
