"""Configuration model of the vendor bundler.

Mirrors the structure of ``typo3-vendor-bundler.json`` / ``.yaml``::

    autoload:
      dropComposerAutoload: true
      target:
        file: composer.json
        manifest: composer
        overwrite: false
      backupSources: false
      excludeFromClassMap: []
    dependencies:
      sbom:
        file: sbom.json
        version: "1.6"
        includeDev: true
        overwrite: false
    dependencyExtraction:
      enabled: true
      failOnProblems: true
    pathToVendorLibraries: Resources/Private/Libs
    rootPath: null
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from constants import Constants
from bundler.entity.manifest import Manifest


@dataclass
class AutoloadTarget:
    """File and manifest kind receiving the merged autoload configuration."""
    file: str = Constants.COMPOSER_JSON_FILE
    manifest: Manifest = Manifest.COMPOSER
    overwrite: bool = False

    @classmethod
    def composer(cls, file: str = Constants.COMPOSER_JSON_FILE, overwrite: bool = False) -> "AutoloadTarget":
        return cls(file, Manifest.COMPOSER, overwrite)

    @classmethod
    def ext_emconf(cls, file: str = Constants.EXT_EMCONF_FILE, overwrite: bool = False) -> "AutoloadTarget":
        return cls(file, Manifest.EXT_EMCONF, overwrite)


@dataclass
class AutoloadConfig:
    drop_composer_autoload: bool = True
    target: AutoloadTarget = field(default_factory=AutoloadTarget)
    backup_sources: bool = False
    exclude_from_class_map: List[str] = field(default_factory=list)


@dataclass
class SbomConfig:
    file: str = Constants.DEFAULT_SBOM_FILE
    version: str = Constants.DEFAULT_SBOM_VERSION
    include_dev: bool = True
    overwrite: bool = False


@dataclass
class DependenciesConfig:
    sbom: SbomConfig = field(default_factory=SbomConfig)


@dataclass
class DependencyExtractionConfig:
    enabled: bool = True
    fail_on_problems: bool = True


@dataclass
class VendorBundlerConfig:
    """Complete bundler configuration.

    ``root_path`` is None until the configuration is bound to a directory:
    the reader sets it from the config file location, the command layer
    falls back to the working directory when no file is used.
    """
    autoload: AutoloadConfig = field(default_factory=AutoloadConfig)
    dependencies: DependenciesConfig = field(default_factory=DependenciesConfig)
    dependency_extraction: DependencyExtractionConfig = field(default_factory=DependencyExtractionConfig)
    path_to_vendor_libraries: str = Constants.DEFAULT_LIBS_PATH
    root_path: Optional[str] = None
