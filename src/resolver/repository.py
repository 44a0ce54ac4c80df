"""Composer package repositories.

Implements the repository kinds a project's composer.json can declare and
which can be resolved without running Composer itself:

* ``package`` repositories (inline package definitions)
* ``path`` repositories (local directories, glob patterns allowed)
* ``composer`` repositories speaking the Packagist ``p2`` metadata protocol

Lookups walk the repositories in declaration order; Packagist is queried
last unless the project disables it with ``{"packagist.org": false}``.
"""
from __future__ import annotations

import glob
import json
import logging
import os
import re
from typing import Any, Dict, Iterable, List, Optional

from constants import Constants
from common.filesystem import make_absolute
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled
from versioning.constraint import ConstraintError, parse_constraint
from versioning.models import Stability

from .package import Package, RootPackage

logger = logging.getLogger(__name__)

_PLATFORM_PACKAGE = re.compile(
    r"^(?:php(?:-64bit|-ipv6|-zts|-debug)?|hhvm|(?:ext|lib)-[a-z0-9](?:[_.-]?[a-z0-9]+)*"
    r"|composer(?:-(?:plugin|runtime)-api)?)$",
    re.IGNORECASE,
)
_PACKAGIST_NAMES = ("packagist", "packagist.org")
_UNSET = "__unset"


def is_platform_package(name: str) -> bool:
    """Return True for pseudo packages describing the runtime (php, ext-*, composer, ...)."""
    return bool(_PLATFORM_PACKAGE.match(name))


def _matches(package: Package, constraint: Optional[str]) -> bool:
    if constraint is None:
        return True
    if package.parsed_version is None:
        return False
    try:
        return parse_constraint(constraint).matches(package.parsed_version)
    except ConstraintError:
        logger.debug("Unparsable constraint %r for %s", constraint, package.name)
        return False


class Repository:
    """Base class for package repositories."""

    def packages(self) -> List[Package]:
        raise NotImplementedError

    def find_packages(self, name: str, constraint: Optional[str] = None) -> List[Package]:
        """Return all versions of ``name`` matching ``constraint`` in declaration order."""
        lowered = name.lower()
        return [p for p in self.packages() if p.name == lowered and _matches(p, constraint)]

    def find_package(self, name: str, constraint: Optional[str] = None) -> Optional[Package]:
        """Return the first version of ``name`` matching ``constraint``."""
        found = self.find_packages(name, constraint)
        return found[0] if found else None


class ArrayRepository(Repository):
    """Repository backed by an in-memory list of packages."""

    def __init__(self, packages: Iterable[Package] = ()):
        self._packages = list(packages)

    def packages(self) -> List[Package]:
        return list(self._packages)

    @classmethod
    def from_definitions(cls, definitions: Any) -> "ArrayRepository":
        """Build a repository from a ``package`` repository's ``package`` value."""
        if isinstance(definitions, dict):
            definitions = [definitions]
        packages = []
        for definition in definitions or []:
            try:
                packages.append(Package.from_dict(definition))
            except ValueError as exc:
                logger.warning("Skipping invalid package definition: %s", exc)
        return cls(packages)


class PathRepository(Repository):
    """Repository reading composer.json files from local directories."""

    def __init__(self, url: str, base_path: str):
        self.url = url
        self.base_path = base_path
        self._loaded: Optional[List[Package]] = None

    def packages(self) -> List[Package]:
        if self._loaded is None:
            self._loaded = []
            pattern = make_absolute(self.url, self.base_path)
            for directory in sorted(glob.glob(pattern)):
                manifest = os.path.join(directory, Constants.COMPOSER_JSON_FILE)
                if not os.path.isfile(manifest):
                    continue
                try:
                    with open(manifest, "r", encoding="utf-8") as handle:
                        data = json.load(handle)
                    self._loaded.append(Package.from_dict(data, version="dev-main"))
                except (OSError, ValueError) as exc:
                    logger.warning("Skipping path repository package %s: %s", manifest, exc)
        return list(self._loaded)


def expand_minified(versions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Expand Composer 2 minified metadata.

    Each entry only carries the keys that changed compared to the previous
    expanded entry; the value ``"__unset"`` removes a key.
    """
    expanded: List[Dict[str, Any]] = []
    previous: Optional[Dict[str, Any]] = None
    for entry in versions:
        if previous is None:
            current = dict(entry)
        else:
            current = dict(previous)
            for key, value in entry.items():
                if value == _UNSET:
                    current.pop(key, None)
                else:
                    current[key] = value
        expanded.append(current)
        previous = current
    return expanded


class ComposerRepository(Repository):
    """Repository speaking the Packagist ``p2`` metadata protocol."""

    def __init__(self, url: str = Constants.PACKAGIST_URL, include_dev_versions: bool = False):
        self.url = url.rstrip("/")
        self.include_dev_versions = include_dev_versions
        self._cache: Dict[str, List[Package]] = {}

    def packages(self) -> List[Package]:
        # Remote repositories are not enumerable; only loaded names are returned.
        return [p for packages in self._cache.values() for p in packages]

    def _fetch(self, name: str) -> List[Package]:
        files = [name]
        if self.include_dev_versions:
            files.append(f"{name}~dev")

        packages: List[Package] = []
        for file in files:
            url = self.url + Constants.PACKAGIST_METADATA_PATH.format(name=file)
            status_code, _, data = get_json(url)
            if status_code != 200 or not isinstance(data, dict):
                if is_debug_enabled(logger):
                    logger.debug(
                        "Package metadata not available",
                        extra=extra_context(
                            event="decision",
                            component="composer_repository",
                            action="fetch",
                            target=name,
                            status_code=status_code,
                        ),
                    )
                continue
            versions = (data.get("packages") or {}).get(name) or []
            if data.get("minified") == "composer/2.0":
                versions = expand_minified(versions)
            for version in versions:
                try:
                    packages.append(Package.from_dict({"name": name, **version}))
                except ValueError as exc:
                    logger.debug("Skipping invalid metadata for %s: %s", name, exc)
        return packages

    def find_packages(self, name: str, constraint: Optional[str] = None) -> List[Package]:
        lowered = name.lower()
        if lowered not in self._cache:
            self._cache[lowered] = self._fetch(lowered)
        return [p for p in self._cache[lowered] if _matches(p, constraint)]


class RepositoryManager(Repository):
    """Ordered collection of repositories."""

    def __init__(self, repositories: Iterable[Repository] = ()):
        self.repositories = list(repositories)

    def add_repository(self, repository: Repository) -> None:
        self.repositories.append(repository)

    def packages(self) -> List[Package]:
        return [p for repository in self.repositories for p in repository.packages()]

    def find_packages(self, name: str, constraint: Optional[str] = None) -> List[Package]:
        return [p for repository in self.repositories for p in repository.find_packages(name, constraint)]

    def find_package(self, name: str, constraint: Optional[str] = None) -> Optional[Package]:
        for repository in self.repositories:
            package = repository.find_package(name, constraint)
            if package is not None:
                return package
        return None


def is_packagist_disabled(repositories: List[Any]) -> bool:
    """Return True if ``{"packagist.org": false}`` appears in the repository list."""
    for repository in repositories:
        if isinstance(repository, dict):
            for key in _PACKAGIST_NAMES:
                if repository.get(key) is False:
                    return True
    return False


def is_packagist_repository(repository: Any) -> bool:
    """Return True for entries that reference or disable the default Packagist repository."""
    if not isinstance(repository, dict):
        return False
    if any(key in repository for key in _PACKAGIST_NAMES):
        return True
    url = str(repository.get("url") or "").rstrip("/")
    return repository.get("type") == "composer" and url in (
        Constants.PACKAGIST_URL, "https://packagist.org", "http://packagist.org"
    )


def create_repository_manager(root: RootPackage, base_path: str) -> RepositoryManager:
    """Build the repository manager for a root package.

    Args:
        root: The root package whose ``repositories`` are used.
        base_path: Directory relative path repositories are resolved against.
    """
    manager = RepositoryManager()
    include_dev = root.minimum_stability is Stability.DEV or Stability.DEV in root.stability_flags.values()

    for repository in root.repositories:
        if not isinstance(repository, dict) or is_packagist_repository(repository):
            continue
        repo_type = repository.get("type")
        if repo_type == "package":
            manager.add_repository(ArrayRepository.from_definitions(repository.get("package")))
        elif repo_type == "path" and repository.get("url"):
            manager.add_repository(PathRepository(str(repository["url"]), base_path))
        elif repo_type == "composer" and repository.get("url"):
            manager.add_repository(ComposerRepository(str(repository["url"]), include_dev))
        else:
            logger.warning("Repository type %r is not supported and will be ignored.", repo_type)

    if not is_packagist_disabled(root.repositories):
        manager.add_repository(ComposerRepository(Constants.PACKAGIST_URL, include_dev))

    return manager
