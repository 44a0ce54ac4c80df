"""Loading of bundler configuration files (JSON and YAML)."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from constants import Constants
from bundler.entity.manifest import Manifest
from common.exceptions import ConfigFileIsInvalid, ConfigFileIsNotSupported, FileDoesNotExist
from common.filesystem import canonicalize, get_extension, is_absolute, join, make_absolute
from common.logging_utils import extra_context, is_debug_enabled

from .models import (
    AutoloadConfig,
    AutoloadTarget,
    DependenciesConfig,
    DependencyExtractionConfig,
    SbomConfig,
    VendorBundlerConfig,
)

logger = logging.getLogger(__name__)

Converter = Callable[[Any, str, List[str]], Any]
_INVALID = object()


def _boolean(value: Any, path: str, errors: List[str]) -> Any:
    if isinstance(value, bool):
        return value
    errors.append(f"{path}: Value {value!r} is not a valid boolean.")
    return _INVALID


def _string(value: Any, path: str, errors: List[str]) -> Any:
    if isinstance(value, str):
        return value
    errors.append(f"{path}: Value {value!r} is not a valid string.")
    return _INVALID


def _optional_string(value: Any, path: str, errors: List[str]) -> Any:
    if value is None:
        return None
    return _string(value, path, errors)


def _version(value: Any, path: str, errors: List[str]) -> Any:
    # YAML turns an unquoted 1.6 into a float
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return _string(value, path, errors)


def _string_list(value: Any, path: str, errors: List[str]) -> Any:
    if not isinstance(value, list):
        errors.append(f"{path}: Value {value!r} is not a valid list of strings.")
        return _INVALID
    for index, item in enumerate(value):
        if not isinstance(item, str) or item == "":
            errors.append(f"{path}[{index}]: Value {item!r} is not a valid non-empty string.")
            return _INVALID
    return list(value)


def _manifest(value: Any, path: str, errors: List[str]) -> Any:
    try:
        return Manifest(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in Manifest)
        errors.append(f"{path}: Value {value!r} does not match any of {allowed}.")
        return _INVALID


def _object(cls: type, fields: Dict[str, Tuple[str, Converter]]) -> Converter:
    def convert(value: Any, path: str, errors: List[str]) -> Any:
        if not isinstance(value, dict):
            errors.append(f"{path or 'root'}: Value {value!r} is not a valid object.")
            return _INVALID

        unexpected = [key for key in value if key not in fields]
        if unexpected:
            errors.append(
                f"{path or 'root'}: Unexpected key(s) {', '.join(repr(k) for k in unexpected)}."
            )

        kwargs: Dict[str, Any] = {}
        for key, (attribute, converter) in fields.items():
            if key not in value:
                continue
            converted = converter(value[key], f"{path}.{key}" if path else key, errors)
            if converted is not _INVALID:
                kwargs[attribute] = converted
        return cls(**kwargs)

    return convert


_TARGET = _object(AutoloadTarget, {
    "file": ("file", _string),
    "manifest": ("manifest", _manifest),
    "overwrite": ("overwrite", _boolean),
})
_AUTOLOAD = _object(AutoloadConfig, {
    "dropComposerAutoload": ("drop_composer_autoload", _boolean),
    "target": ("target", _TARGET),
    "backupSources": ("backup_sources", _boolean),
    "excludeFromClassMap": ("exclude_from_class_map", _string_list),
})
_SBOM = _object(SbomConfig, {
    "file": ("file", _string),
    "version": ("version", _version),
    "includeDev": ("include_dev", _boolean),
    "overwrite": ("overwrite", _boolean),
})
_DEPENDENCIES = _object(DependenciesConfig, {
    "sbom": ("sbom", _SBOM),
})
_EXTRACTION = _object(DependencyExtractionConfig, {
    "enabled": ("enabled", _boolean),
    "failOnProblems": ("fail_on_problems", _boolean),
})
_CONFIG = _object(VendorBundlerConfig, {
    "autoload": ("autoload", _AUTOLOAD),
    "dependencies": ("dependencies", _DEPENDENCIES),
    "dependencyExtraction": ("dependency_extraction", _EXTRACTION),
    "pathToVendorLibraries": ("path_to_vendor_libraries", _string),
    "rootPath": ("root_path", _optional_string),
})


def map_config(data: Any, file: str) -> VendorBundlerConfig:
    """Map raw configuration data onto VendorBundlerConfig.

    Raises:
        ConfigFileIsInvalid: With one ``path: message`` line per mapping error.
    """
    errors: List[str] = []
    config = _CONFIG(data, "", errors)
    if errors or config is _INVALID:
        raise ConfigFileIsInvalid(file, errors)
    return config


class ConfigReader:
    """Read and locate bundler configuration files."""

    def read_from_file(self, file: str) -> VendorBundlerConfig:
        """Load the configuration stored in ``file``.

        A missing ``rootPath`` defaults to the directory of ``file``; a
        relative one is resolved against it.

        Raises:
            FileDoesNotExist: If ``file`` does not exist.
            ConfigFileIsNotSupported: If the file type is not JSON or YAML.
            ConfigFileIsInvalid: If the content cannot be mapped.
        """
        if not os.path.exists(file):
            raise FileDoesNotExist(file)

        extension = get_extension(file)
        if extension == "json":
            data = self._parse_json_file(file)
        elif extension in ("yaml", "yml"):
            data = self._parse_yaml_file(file)
        else:
            raise ConfigFileIsNotSupported(file)

        config = map_config(data, file)
        config_dir = canonicalize(os.path.dirname(os.path.abspath(file)))
        if config.root_path is None:
            config.root_path = config_dir
        elif not is_absolute(config.root_path):
            config.root_path = make_absolute(config.root_path, config_dir)

        if is_debug_enabled(logger):
            logger.debug(
                "Loaded config file",
                extra=extra_context(
                    event="config", component="config_reader", action="read", target=file
                ),
            )
        return config

    @staticmethod
    def detect_file(root_path: str) -> Optional[str]:
        """Return the first config file found in ``root_path``, if any."""
        for filename in Constants.CONFIG_FILES:
            path = join(root_path, filename)
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def _parse_json_file(file: str) -> Any:
        try:
            with open(file, "r", encoding="utf-8") as handle:
                return json.load(handle)
        except ValueError as exc:
            raise ConfigFileIsInvalid(file, [f"root: {exc}"]) from exc

    @staticmethod
    def _parse_yaml_file(file: str) -> Dict[str, Any]:
        try:
            with open(file, "r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigFileIsInvalid(file, [f"root: {exc}"]) from exc
        if not isinstance(data, dict):
            raise ConfigFileIsInvalid(file)
        return data
