"""Composer package models.

Packages are loaded from composer.json manifests, composer.lock entries,
inline ``package`` repositories and Packagist metadata. They are plain data
holders; resolution happens in resolver.repository.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from constants import Constants, PackageTypes
from versioning.constraint import ConstraintError, parse_constraint
from versioning.models import ComposerVersion, Stability
from versioning.parser import parse_version


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


def _licenses(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return []


@dataclass
class Package:
    """A concrete package version known to a repository."""
    pretty_name: str
    pretty_version: str
    type: str = "library"
    requires: Dict[str, str] = field(default_factory=dict)
    dev_requires: Dict[str, str] = field(default_factory=dict)
    autoload: Dict[str, Any] = field(default_factory=dict)
    license: List[str] = field(default_factory=list)
    authors: List[Dict[str, Any]] = field(default_factory=list)
    description: Optional[str] = None
    homepage: Optional[str] = None
    dist: Optional[Dict[str, Any]] = None
    source: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.parsed_version: Optional[ComposerVersion] = parse_version(self.pretty_version)

    @property
    def name(self) -> str:
        return self.pretty_name.lower()

    @property
    def stability(self) -> Stability:
        if self.parsed_version is None:
            return Stability.DEV
        return self.parsed_version.stability

    @property
    def unique_name(self) -> str:
        return f"{self.name}-{self.pretty_version}"

    @property
    def is_framework_package(self) -> bool:
        return self.type == PackageTypes.FRAMEWORK.value

    @property
    def is_extension_package(self) -> bool:
        return self.type == PackageTypes.EXTENSION.value

    @property
    def dist_reference(self) -> Optional[str]:
        return (self.dist or {}).get("reference")

    @property
    def source_reference(self) -> Optional[str]:
        return (self.source or {}).get("reference")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], version: Optional[str] = None) -> "Package":
        """Build a package from a composer.json-shaped mapping.

        Args:
            data: Manifest data; must contain ``name``.
            version: Version to use when the mapping has none.

        Raises:
            ValueError: If the package name is missing.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Package data does not contain a name")
        return cls(
            pretty_name=name,
            pretty_version=str(data.get("version") or version or "dev-main"),
            type=str(data.get("type") or "library"),
            requires=_string_map(data.get("require")),
            dev_requires=_string_map(data.get("require-dev")),
            autoload=data.get("autoload") if isinstance(data.get("autoload"), dict) else {},
            license=_licenses(data.get("license")),
            authors=[a for a in data.get("authors") or [] if isinstance(a, dict)],
            description=data.get("description"),
            homepage=data.get("homepage"),
            dist=data.get("dist") if isinstance(data.get("dist"), dict) else None,
            source=data.get("source") if isinstance(data.get("source"), dict) else None,
            extra=data.get("extra") if isinstance(data.get("extra"), dict) else {},
        )


@dataclass
class RootPackage(Package):
    """The package described by the project's own composer.json."""
    minimum_stability: Stability = Stability.STABLE
    repositories: List[Any] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_vendor_name(self) -> bool:
        return "/" in self.pretty_name

    @property
    def platform(self) -> Dict[str, str]:
        """Platform overrides from ``config.platform``; ``false`` entries are ignored."""
        platform = self.config.get("platform")
        if not isinstance(platform, dict):
            return {}
        return {k: str(v) for k, v in platform.items() if v is not False}

    @property
    def vendor_dir(self) -> str:
        return str(self.config.get("vendor-dir") or Constants.DEFAULT_VENDOR_DIR)

    @property
    def stability_flags(self) -> Dict[str, Stability]:
        """Per-package stabilities implied by the requirement constraints.

        Only flags less stable than the minimum stability are kept.
        """
        flags: Dict[str, Stability] = {}
        for name, raw in {**self.requires, **self.dev_requires}.items():
            try:
                implied = parse_constraint(raw).implied_stability()
            except ConstraintError:
                continue
            if implied is not None and implied.value > self.minimum_stability.value:
                flags[name.lower()] = implied
        return flags

    @classmethod
    def from_dict(cls, data: Dict[str, Any], version: Optional[str] = None) -> "RootPackage":
        data = dict(data)
        data.setdefault("name", "__root__")
        base = Package.from_dict(data, version=version or "1.0.0+no-version-set")

        try:
            minimum_stability = Stability.from_name(str(data.get("minimum-stability") or "stable"))
        except ValueError:
            minimum_stability = Stability.STABLE

        repositories = data.get("repositories") or []
        if isinstance(repositories, dict):
            repositories = [{name: value} if value is False else value for name, value in repositories.items()]

        return cls(
            **{f: getattr(base, f) for f in Package.__dataclass_fields__},  # pylint: disable=no-member
            minimum_stability=minimum_stability,
            repositories=list(repositories),
            config=data.get("config") if isinstance(data.get("config"), dict) else {},
        )
