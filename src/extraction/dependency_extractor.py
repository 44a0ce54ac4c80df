"""Extraction of vendor library dependencies from a root package.

The extractor walks the root package's requirements, keeps plain libraries,
drops TYPO3 extensions and removes everything the TYPO3 framework packages
already ship. What remains is what has to be bundled with the extension.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from resolver.composer import Composer
from resolver.package import Package
from resolver.repository import is_platform_package
from versioning.selector import VersionSelector

from .dependency_set import DependencySet

logger = logging.getLogger(__name__)


class DependencyExtractionProblem(Enum):
    """Problems recorded while extracting dependencies.

    Args:
        Enum (string): Problem identifiers.
    """

    REQUIREMENT_NOT_RESOLVABLE = "requirement_not_resolvable"
    NO_MATCHING_VERSION_FOUND = "no_matching_version_found"

    def describe(self, package_name: str) -> str:
        if self is DependencyExtractionProblem.REQUIREMENT_NOT_RESOLVABLE:
            return f'Could not resolve a dedicated Composer package for the requirement "{package_name}".'
        return f'Could not find a matching version for the Composer package "{package_name}".'


class PackageKind(Enum):
    """Role of a resolved package during extraction.

    Args:
        Enum (string): Package roles.
    """

    FRAMEWORK = "framework"
    EXTENSION = "extension"
    LIBRARY = "library"


def classify_package(package: Package) -> PackageKind:
    """Classify a package by its Composer ``type``."""
    if package.is_framework_package:
        return PackageKind.FRAMEWORK
    if package.is_extension_package:
        return PackageKind.EXTENSION
    return PackageKind.LIBRARY


Problems = Dict[str, List[DependencyExtractionProblem]]


class DependencyExtractor:
    """Build a DependencySet from a Composer project.

    Args:
        package_kind: Classifier deciding whether a package is a framework
            package, a TYPO3 extension or a plain library.
    """

    def __init__(self, package_kind: Callable[[Package], PackageKind] = classify_package):
        self.package_kind = package_kind

    def extract(self, composer: Composer) -> DependencySet:
        """Extract the vendor libraries of ``composer``'s root package.

        Problems are collected in the returned set and never raised.
        """
        problems: Problems = {}
        # Packages already shipped by framework packages
        provided: Dict[str, Package] = {}
        # Packages reachable from the extracted libraries
        required: Dict[str, Package] = {}

        with Timer() as timer:
            packages, framework_packages = self._extract_direct_dependencies(composer, problems)

            for framework_package in framework_packages.values():
                self._collect_transitive_dependencies(composer, framework_package, provided)

            packages = {name: package for name, package in packages.items() if name not in provided}

            self._apply_best_matching_versions(composer, packages, problems)

            for package in packages.values():
                self._collect_transitive_dependencies(composer, package, required)

            excluded = {name: package for name, package in required.items() if name in provided}

        if is_debug_enabled(logger):
            logger.debug(
                "Dependency extraction finished",
                extra=extra_context(
                    event="function_exit",
                    component="dependency_extractor",
                    action="extract",
                    target=composer.package.name,
                    required=len(packages),
                    excluded=len(excluded),
                    problems=len(problems),
                    duration_ms=timer.duration_ms(),
                ),
            )

        return DependencySet(packages, excluded, problems)

    def _extract_direct_dependencies(
        self, composer: Composer, problems: Problems
    ) -> Tuple[Dict[str, Package], Dict[str, Package]]:
        packages: Dict[str, Package] = {}
        framework_packages: Dict[str, Package] = {}

        for target, constraint in composer.package.requires.items():
            name = target.lower()
            if is_platform_package(name):
                continue

            package = composer.repository_manager.find_package(name, constraint)
            if package is None:
                _add_problem(problems, name, DependencyExtractionProblem.REQUIREMENT_NOT_RESOLVABLE)
                continue

            kind = self.package_kind(package)
            if kind is PackageKind.FRAMEWORK:
                framework_packages[name] = package
            elif kind is PackageKind.LIBRARY:
                packages[name] = package

        return packages, framework_packages

    @staticmethod
    def _apply_best_matching_versions(
        composer: Composer, packages: Dict[str, Package], problems: Problems
    ) -> None:
        root = composer.package
        requirements = {target.lower(): constraint for target, constraint in root.requires.items()}
        selector = VersionSelector(
            composer.repository_manager,
            minimum_stability=root.minimum_stability,
            stability_flags=root.stability_flags,
            platform=root.platform,
        )

        for name in list(packages):
            resolved = selector.find_best_candidate(name, requirements.get(name))
            if resolved is None:
                _add_problem(problems, name, DependencyExtractionProblem.NO_MATCHING_VERSION_FOUND)
                del packages[name]
            else:
                packages[name] = resolved

    def _collect_transitive_dependencies(
        self, composer: Composer, package: Package, collected: Dict[str, Package]
    ) -> None:
        for target, constraint in package.requires.items():
            name = target.lower()
            if name in collected or is_platform_package(name):
                continue

            dependency = composer.repository_manager.find_package(name, constraint)
            if dependency is not None:
                collected[name] = dependency
                self._collect_transitive_dependencies(composer, dependency, collected)


def _add_problem(problems: Problems, name: str, problem: DependencyExtractionProblem) -> None:
    known = problems.setdefault(name, [])
    if problem not in known:
        known.append(problem)
