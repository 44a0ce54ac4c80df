"""Result of a dependency extraction and its composer.json materialization."""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from constants import Constants
from common.filesystem import dump_file
from resolver.manifest import JsonManifest
from resolver.package import Package
from resolver.repository import is_packagist_repository

if TYPE_CHECKING:
    from resolver.composer import Composer

    from .dependency_extractor import DependencyExtractionProblem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencySet:
    """Packages to require and to provide in the vendor libraries manifest.

    Attributes:
        required_packages: Version-selected direct requirements, keyed by name.
        excluded_packages: Packages already shipped by framework packages, keyed by name.
        extraction_problems: Problems per requirement name, in order of occurrence.
    """
    required_packages: Dict[str, Package]
    excluded_packages: Dict[str, Package] = field(default_factory=dict)
    extraction_problems: Dict[str, List["DependencyExtractionProblem"]] = field(default_factory=dict)

    def requirements(self) -> Dict[str, str]:
        """Return ``name => version`` for the ``require`` section, sorted by name."""
        requirements = {p.pretty_name: p.pretty_version for p in self.required_packages.values()}
        return dict(sorted(requirements.items()))

    def exclusions(self) -> Dict[str, str]:
        """Return ``name => *`` for the ``provide`` section, sorted by name."""
        return dict(sorted((p.pretty_name, "*") for p in self.excluded_packages.values()))

    def problems(self) -> List[str]:
        return [
            problem.describe(name)
            for name, problems in self.extraction_problems.items()
            for problem in problems
        ]

    def dump_to_file(self, filename: str, origin: Optional["Composer"] = None) -> None:
        """Write the set as composer.json of the vendor libraries package.

        Existing content of ``filename`` is kept; properties written here
        replace their previous values.

        Raises:
            DeclarationFileIsInvalid: If ``filename`` exists but is not a JSON object.
        """
        if not os.path.exists(filename):
            dump_file(filename, "{}")

        manifest = JsonManifest(filename)

        if origin is not None and origin.package.has_vendor_name:
            name = origin.package.name
        else:
            name = f"{Constants.GENERATED_NAME_PREFIX}/{uuid.uuid4().hex[:13]}"

        manifest.add_property("name", f"{name}-libs")
        manifest.add_config_setting("allow-plugins", False)
        manifest.add_config_setting("lock", False)

        for package_name, version in self.requirements().items():
            manifest.add_link("require", package_name, version)
        for package_name, constraint in self.exclusions().items():
            manifest.add_link("provide", package_name, constraint)

        for repository in origin.package.repositories if origin is not None else []:
            if isinstance(repository, dict) and not is_packagist_repository(repository):
                manifest.add_repository(repository)

        logger.info(
            "Wrote %d requirement(s) and %d exclusion(s) to %s.",
            len(self.required_packages),
            len(self.excluded_packages),
            filename,
        )
