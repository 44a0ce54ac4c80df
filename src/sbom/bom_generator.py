"""CycloneDX SBOM generation from a locked Composer project."""

from __future__ import annotations

import logging
from importlib import metadata
from typing import Dict, Iterator, List, Optional, Tuple

from cyclonedx.contrib.license.factories import LicenseFactory
from cyclonedx.model import (
    ExternalReference,
    ExternalReferenceType,
    HashAlgorithm,
    HashType,
    Property,
    XsUri,
)
from cyclonedx.model.bom import Bom
from cyclonedx.model.component import Component, ComponentType
from cyclonedx.model.license import LicenseAcknowledgement
from cyclonedx.model.tool import Tool
from packageurl import PackageURL

from constants import Constants
from common.exceptions import ComposerDependenciesAreNotInstalled
from common.filesystem import join
from common.logging_utils import extra_context, is_debug_enabled
from resolver.composer import Composer, composer_version
from resolver.package import Package
from resolver.repository import Repository

logger = logging.getLogger(__name__)

PROPERTY_DIST_REFERENCE = "cdx:composer:package:distReference"
PROPERTY_SOURCE_REFERENCE = "cdx:composer:package:sourceReference"
PROPERTY_PACKAGE_TYPE = "cdx:composer:package:type"

# (vendor, distribution name) of libraries reported as tools
TOOL_DISTRIBUTIONS = [
    ("CycloneDX", "cyclonedx-python-lib"),
    (None, Constants.PROGRAM_NAME),
]


def split_package_name(package_name: str) -> Tuple[Optional[str], str]:
    if "/" not in package_name:
        return None, package_name
    vendor, name = package_name.split("/", 1)
    return vendor, name


class BomGenerator:
    """Generate a Bill of Materials for the packages locked in a Composer project.

    Args:
        root_path: Directory of the project whose composer.json describes the
            BOM's main component.
    """

    def __init__(self, root_path: str):
        self.root_path = root_path
        self.license_factory = LicenseFactory()
        self._root_composer: Optional[Composer] = None

    @property
    def root_composer(self) -> Composer:
        if self._root_composer is None:
            self._root_composer = Composer.create(join(self.root_path, Constants.COMPOSER_JSON_FILE))
        return self._root_composer

    def generate(self, composer: Composer, include_dev: bool = True) -> Bom:
        """Build the BOM for ``composer``'s locked packages.

        Raises:
            ComposerDependenciesAreNotInstalled: If there is neither a composer.lock
                nor an installed.json.
        """
        locker = composer.locker()
        if not locker.is_locked():
            raise ComposerDependenciesAreNotInstalled(composer.root_path)

        repository = locker.locked_repository(include_dev)
        packages = repository.packages()
        root_package = self.root_composer.package
        root_component = self.create_component(root_package)

        bom = Bom()
        bom.metadata.component = root_component
        for tool in self.create_tools():
            bom.metadata.tools.tools.add(tool)

        components: Dict[str, Component] = {}
        for package in packages:
            components[package.name] = self.create_component(package)
        for component in components.values():
            bom.components.add(component)

        for package in packages:
            self._apply_dependency_tree(bom, package, repository, components)

        components[root_package.name] = root_component
        self._apply_dependency_tree(bom, root_package, repository, components)

        if is_debug_enabled(logger):
            logger.debug(
                "Generated BOM",
                extra=extra_context(
                    event="function_exit",
                    component="bom_generator",
                    action="generate",
                    target=composer.root_path,
                    count=len(packages),
                    include_dev=include_dev,
                ),
            )
        return bom

    def create_component(self, package: Package) -> Component:
        vendor, name = split_package_name(package.name)
        properties: List[Property] = []
        if package.dist_reference:
            properties.append(Property(name=PROPERTY_DIST_REFERENCE, value=package.dist_reference))
        if package.source_reference:
            properties.append(Property(name=PROPERTY_SOURCE_REFERENCE, value=package.source_reference))
        properties.append(Property(name=PROPERTY_PACKAGE_TYPE, value=package.type))

        return Component(
            type=ComponentType.LIBRARY,
            name=name,
            group=vendor,
            version=package.pretty_version,
            bom_ref=package.unique_name,
            description=package.description,
            author=self._author(package),
            licenses=[
                self.license_factory.make_from_string(
                    license_name, license_acknowledgement=LicenseAcknowledgement.DECLARED
                )
                for license_name in package.license
            ],
            external_references=list(self._external_references(package)),
            properties=properties,
            purl=PackageURL(type="composer", namespace=vendor, name=name, version=package.pretty_version),
        )

    @staticmethod
    def _author(package: Package) -> Optional[str]:
        names = [str(author.get("name") or "").strip() for author in package.authors]
        return ", ".join(n for n in names if n) or None

    @staticmethod
    def _external_references(package: Package) -> Iterator[ExternalReference]:
        dist = package.dist or {}
        if dist.get("url"):
            hashes = []
            if dist.get("shasum"):
                hashes.append(HashType(alg=HashAlgorithm.SHA_1, content=str(dist["shasum"])))
            yield ExternalReference(
                type=ExternalReferenceType.DISTRIBUTION,
                url=XsUri(str(dist["url"])),
                comment=package.dist_reference,
                hashes=hashes,
            )

        source = package.source or {}
        if source.get("url"):
            yield ExternalReference(
                type=ExternalReferenceType.VCS,
                url=XsUri(str(source["url"])),
                comment=package.source_reference,
            )

        if package.homepage:
            yield ExternalReference(type=ExternalReferenceType.WEBSITE, url=XsUri(package.homepage))

    @staticmethod
    def create_tools() -> Iterator[Tool]:
        """Yield composer and the SBOM libraries; tools without known versions are skipped."""
        version = composer_version()
        yield Tool(name="composer", version=version)

        for vendor, distribution in TOOL_DISTRIBUTIONS:
            try:
                dist_metadata = metadata.metadata(distribution)
            except metadata.PackageNotFoundError:
                logger.debug("Tool distribution %s is not installed", distribution)
                continue

            references = []
            homepage = dist_metadata.get("Home-page")
            if homepage:
                references.append(ExternalReference(type=ExternalReferenceType.WEBSITE, url=XsUri(homepage)))
            yield Tool(
                vendor=vendor,
                name=distribution,
                version=dist_metadata.get("Version"),
                external_references=references,
            )

    @staticmethod
    def _apply_dependency_tree(
        bom: Bom,
        package: Package,
        repository: Repository,
        components: Dict[str, Component],
    ) -> None:
        component = components.get(package.name)
        if component is None:
            return

        dependencies = []
        for target, constraint in package.requires.items():
            required = repository.find_package(target, constraint)
            if required is None:
                continue
            dependency = components.get(required.name)
            if dependency is not None:
                dependencies.append(dependency)

        bom.register_dependency(component, dependencies)
