"""Target manifests an autoload bundle can be written into."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, List

from constants import Constants
from common.exceptions import DeclarationFileIsInvalid
from common.filesystem import dump_file
from resolver.ext_emconf import dump_ext_emconf, parse_ext_emconf
from resolver.manifest import JsonManifest

from .autoload import Autoload
from .class_map import ClassMap
from .files import Files
from .namespaces import Psr4Namespaces

logger = logging.getLogger(__name__)


class Manifest(Enum):
    """Kind of file receiving the merged autoload configuration.

    Args:
        Enum (string): Manifest identifiers as used in config files and on the command line.
    """

    COMPOSER = "composer"
    EXT_EMCONF = "ext_emconf"

    @property
    def default_file(self) -> str:
        if self is Manifest.EXT_EMCONF:
            return Constants.EXT_EMCONF_FILE
        return Constants.COMPOSER_JSON_FILE

    def assemble(self, root: Autoload, vendor: Autoload, filename: str) -> Autoload:
        """Fold the root and vendor bundles into the bundle written to ``filename``.

        composer.json receives the root package's autoload followed by the
        vendor libraries. ext_emconf.php keeps what it already declares, then
        takes the vendor class map and the root class map, plus the PSR-4
        namespaces of the root package. It cannot express ``files``.

        Raises:
            DeclarationFileIsInvalid: If a PSR-4 prefix maps to more than one
                directory and the target is ext_emconf.php.
        """
        if self is Manifest.COMPOSER:
            return root.merge(vendor, filename)

        declared = _read_declared_autoload(filename, root.root_path)
        class_map = declared.class_map.merge(vendor.class_map, filename).merge(root.class_map, filename)
        namespaces = declared.psr4_namespaces.merge(root.psr4_namespaces, filename)

        for prefix, directories in root.psr4_namespaces.to_dict().items():
            if len(directories) > 1:
                raise DeclarationFileIsInvalid(root.filename, f"[autoload][psr-4][{prefix}]")
        if len(root.files) > 0 or len(vendor.files) > 0:
            logger.warning(
                "%s does not support \"files\" autoloading; %d file(s) are not bundled.",
                Constants.EXT_EMCONF_FILE,
                len(root.files) + len(vendor.files),
            )

        return Autoload(
            class_map,
            namespaces,
            Files([], filename, root.root_path),
            filename,
            root.root_path,
        )

    def dump(self, autoload: Autoload) -> None:
        """Write ``autoload`` into its target file, keeping all other content."""
        if self is Manifest.COMPOSER:
            if not os.path.isfile(autoload.filename):
                dump_file(autoload.filename, "{}")
            JsonManifest(autoload.filename).add_property("autoload", autoload.to_dict(relative=True))
            return

        config: Dict[str, Any] = {}
        if os.path.isfile(autoload.filename):
            config = parse_ext_emconf(autoload.filename)
        config["autoload"] = _ext_emconf_autoload(autoload)
        dump_ext_emconf(autoload.filename, config)


def _read_declared_autoload(filename: str, root_path: str) -> Autoload:
    if not os.path.isfile(filename):
        return Autoload.empty(filename, root_path)

    autoload = parse_ext_emconf(filename).get("autoload")
    if autoload is None:
        return Autoload.empty(filename, root_path)
    if not isinstance(autoload, dict):
        raise DeclarationFileIsInvalid(filename, "[autoload]")

    class_map = autoload.get("classmap") or []
    namespaces = autoload.get("psr-4") or {}
    if not isinstance(class_map, list) or not all(isinstance(p, str) for p in class_map):
        raise DeclarationFileIsInvalid(filename, "[autoload][classmap]")
    if not isinstance(namespaces, dict):
        raise DeclarationFileIsInvalid(filename, "[autoload][psr-4]")

    return Autoload(
        ClassMap(class_map, filename, root_path),
        Psr4Namespaces(namespaces, filename, root_path),
        Files([], filename, root_path),
        filename,
        root_path,
    )


def _ext_emconf_autoload(autoload: Autoload) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    # Re-running the bundler folds the declared class map in again
    class_map: List[str] = list(dict.fromkeys(autoload.class_map.to_list(relative=True)))
    if class_map:
        result["classmap"] = class_map
    namespaces = {
        prefix: directories[0]
        for prefix, directories in autoload.psr4_namespaces.to_dict(relative=True).items()
        if directories
    }
    if namespaces:
        result["psr-4"] = namespaces
    return result
