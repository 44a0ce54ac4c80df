"""Facade over a Composer project on disk.

Bundles everything the bundlers need to know about one composer.json: the
root package, its repositories, the lock state and the ``composer install``
step, which is delegated to the external ``composer`` binary.
"""
from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any, Dict, List, Optional, Tuple

from constants import Constants
from common.exceptions import (
    CannotDetectWorkingDirectory,
    CannotInstallComposerDependencies,
    DeclarationFileIsInvalid,
    DirectoryDoesNotExist,
)
from common.filesystem import canonicalize, execute_in_directory, join, make_absolute
from common.logging_utils import Timer, extra_context, is_debug_enabled

from .manifest import JsonManifest
from .package import Package, RootPackage
from .repository import ArrayRepository, RepositoryManager, create_repository_manager

logger = logging.getLogger(__name__)


class Locker:
    """Read access to the lock state of a project.

    ``composer.lock`` is preferred. Projects installed with ``config.lock``
    disabled have no lock file, so the lock state is then taken from
    ``vendor/composer/installed.json``, which every install writes.
    """

    def __init__(self, lock_file: str, installed_file: Optional[str] = None):
        self.lock_file = lock_file
        self.installed_file = installed_file

    def is_locked(self) -> bool:
        return os.path.isfile(self.lock_file) or (
            self.installed_file is not None and os.path.isfile(self.installed_file)
        )

    @staticmethod
    def _read(filename: str) -> Any:
        try:
            with open(filename, "r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, ValueError) as exc:
            raise DeclarationFileIsInvalid(filename, original_exception=exc) from exc

    def _lock_sections(self) -> Tuple[str, Dict[str, List[Any]]]:
        if os.path.isfile(self.lock_file) or self.installed_file is None:
            data = self._read(self.lock_file)
            if not isinstance(data, dict):
                raise DeclarationFileIsInvalid(self.lock_file)
            return self.lock_file, {
                "packages": data.get("packages") or [],
                "packages-dev": data.get("packages-dev") or [],
            }

        data = self._read(self.installed_file)
        # Composer 1 writes a plain list of packages
        if isinstance(data, list):
            return self.installed_file, {"packages": data, "packages-dev": []}
        if not isinstance(data, dict):
            raise DeclarationFileIsInvalid(self.installed_file)

        dev_names = {str(name).lower() for name in data.get("dev-package-names") or []}
        packages: List[Any] = []
        dev_packages: List[Any] = []
        for definition in data.get("packages") or []:
            name = definition.get("name") if isinstance(definition, dict) else None
            if isinstance(name, str) and name.lower() in dev_names:
                dev_packages.append(definition)
            else:
                packages.append(definition)
        return self.installed_file, {"packages": packages, "packages-dev": dev_packages}

    def locked_repository(self, include_dev: bool = True) -> ArrayRepository:
        """Return the locked packages, optionally including ``packages-dev``."""
        filename, data = self._lock_sections()
        sections = ["packages", "packages-dev"] if include_dev else ["packages"]
        packages: List[Package] = []
        for section in sections:
            for definition in data[section]:
                if not isinstance(definition, dict):
                    raise DeclarationFileIsInvalid(filename, f"[{section}]")
                try:
                    packages.append(Package.from_dict(definition))
                except ValueError as exc:
                    raise DeclarationFileIsInvalid(filename, f"[{section}]", exc) from exc
        return ArrayRepository(packages)


class Composer:
    """A Composer project rooted at the directory of its composer.json."""

    def __init__(self, declaration_file: str, package: RootPackage):
        self.declaration_file = declaration_file
        self.package = package
        self.manifest = JsonManifest(declaration_file)
        self._repository_manager: Optional[RepositoryManager] = None

    @classmethod
    def create(cls, path: str) -> "Composer":
        """Load a project from a composer.json file or the directory containing it.

        Raises:
            DeclarationFileIsInvalid: If the manifest is missing or malformed.
        """
        path = make_absolute(path, canonicalize(os.getcwd()))
        if os.path.isdir(path):
            path = join(path, Constants.COMPOSER_JSON_FILE)
        data = JsonManifest(path).read()
        try:
            package = RootPackage.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise DeclarationFileIsInvalid(path, original_exception=exc) from exc
        return cls(path, package)

    @property
    def root_path(self) -> str:
        return os.path.dirname(self.declaration_file)

    @property
    def vendor_dir(self) -> str:
        return make_absolute(self.package.vendor_dir, self.root_path)

    @property
    def repository_manager(self) -> RepositoryManager:
        if self._repository_manager is None:
            self._repository_manager = create_repository_manager(self.package, self.root_path)
        return self._repository_manager

    @repository_manager.setter
    def repository_manager(self, manager: RepositoryManager) -> None:
        self._repository_manager = manager

    def locker(self) -> Locker:
        lock_file = os.path.splitext(self.declaration_file)[0] + ".lock"
        return Locker(lock_file, join(self.vendor_dir, "composer", "installed.json"))

    def read_extra(self, path: str) -> Any:
        """Read a value from the ``extra`` section by dotted path; missing paths yield None."""
        current: Any = self.package.extra
        for segment in path.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(segment)
        return current

    def write_extra(self, path: str, value: Any) -> None:
        """Write a value into the ``extra`` section by dotted path, creating objects on the way."""
        extra = dict(self.package.extra)
        segments = path.split(".")
        current = extra
        for segment in segments[:-1]:
            nested = current.get(segment)
            current[segment] = dict(nested) if isinstance(nested, dict) else {}
            current = current[segment]
        current[segments[-1]] = value
        self.manifest.add_property("extra", extra)
        self.package.extra = extra

    def install(
        self,
        include_dev: bool = True,
        optimize_autoloader: bool = False,
        classmap_authoritative: bool = False,
    ) -> str:
        """Run ``composer install`` in the project directory.

        Returns:
            The combined output of the composer process.

        Raises:
            CannotInstallComposerDependencies: If the binary is missing or exits non-zero.
        """
        command = [Constants.COMPOSER_BINARY, "install", "--no-interaction", "--no-progress"]
        if not include_dev:
            command.append("--no-dev")
        if optimize_autoloader:
            command.append("--optimize-autoloader")
        if classmap_authoritative:
            command.append("--classmap-authoritative")

        try:
            with execute_in_directory(self.root_path), Timer() as timer:
                result = subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=Constants.COMPOSER_TIMEOUT_SEC,
                )
        except (CannotDetectWorkingDirectory, DirectoryDoesNotExist) as exc:
            raise CannotInstallComposerDependencies(self.root_path, str(exc)) from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise CannotInstallComposerDependencies(self.root_path, str(exc)) from exc

        output = (result.stdout or "") + (result.stderr or "")
        if is_debug_enabled(logger):
            logger.debug(
                "composer install finished",
                extra=extra_context(
                    event="subprocess",
                    component="composer",
                    action="install",
                    target=self.root_path,
                    returncode=result.returncode,
                    duration_ms=timer.duration_ms(),
                ),
            )
        if result.returncode != 0:
            raise CannotInstallComposerDependencies(self.root_path, output)
        return output


def composer_version() -> Optional[str]:
    """Return the version of the composer binary, or None if it cannot be determined."""
    try:
        result = subprocess.run(
            [Constants.COMPOSER_BINARY, "--version", "--no-ansi"],
            capture_output=True,
            text=True,
            check=False,
            timeout=60,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    for token in (result.stdout or "").split():
        if token[:1].isdigit():
            return token
    return None
