"""Bundle the autoload configuration of an extension and its vendor libraries."""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional

from constants import Constants, Verbosity
from common.exceptions import FileAlreadyExists
from common.filesystem import backup_file, join, make_absolute
from config.models import AutoloadTarget
from console.task_runner import RunnerContext
from resolver.autoload_dump import read_class_map, read_files
from resolver.manifest import JsonManifest

from .base import Bundler
from .entity.autoload import Autoload
from .entity.class_map import ClassMap
from .entity.files import Files
from .entity.namespaces import Psr4Namespaces

logger = logging.getLogger(__name__)


class AutoloadBundler(Bundler):
    """Merge root package and vendor library autoloading into one target manifest.

    The vendor libraries are installed with an optimized, authoritative class
    map, so their class map covers every class and no PSR-4 namespaces of
    vendor libraries have to be bundled.
    """

    def bundle(
        self,
        target: Optional[AutoloadTarget] = None,
        extract_dependencies: bool = True,
        fail_on_extraction_problems: bool = True,
        drop_composer_autoload: bool = True,
        backup_sources: bool = False,
        exclude_from_class_map: Iterable[str] = (),
    ) -> Autoload:
        """Bundle and dump the autoload configuration.

        Returns:
            The merged autoload bundle as written to the target file.

        Raises:
            DirectoryDoesNotExist: If the vendor libraries directory is missing.
            FileAlreadyExists: If the target exists and overwriting is not allowed.
            CannotInstallComposerDependencies: If installing vendor libraries fails.
            DeclarationFileIsInvalid: If a manifest cannot be read.
        """
        target = target or AutoloadTarget()
        target_file = make_absolute(target.file, self.root_path)
        root_manifest = join(self.root_path, Constants.COMPOSER_JSON_FILE)

        self.prepare_vendor_libraries(extract_dependencies, fail_on_extraction_problems)

        root_autoload = self._load_root_autoload()
        vendor_autoload = self._load_vendor_autoload(list(exclude_from_class_map))
        autoload = self.task_runner.run(
            "♨️ Merging class maps",
            lambda _: target.manifest.assemble(root_autoload, vendor_autoload, target_file),
        )

        if not target.overwrite and os.path.exists(target_file):
            raise FileAlreadyExists(target_file)

        drop_root_autoload = drop_composer_autoload and target_file != root_manifest

        if backup_sources:
            def backup(_: RunnerContext) -> List[str]:
                sources = [target_file, root_manifest]
                return [backup_file(f) for f in dict.fromkeys(sources) if os.path.isfile(f)]

            self.task_runner.run("🦖 Backing up source files", backup)

        self.task_runner.run(
            "🎊 Dumping merged autoload configuration",
            lambda _: target.manifest.dump(autoload),
        )

        if drop_root_autoload:
            self.task_runner.run(
                "🧹 Dropping autoload section from composer.json",
                lambda _: JsonManifest(root_manifest).remove_property("autoload"),
            )

        if not self.extra_section_is_prepared():
            self.task_runner.run(
                "📝 Registering vendor libraries in composer.json",
                lambda _: self.prepare_extra_section(),
                Verbosity.VERBOSE,
            )

        return autoload

    def _root_autoload_section(self) -> dict:
        autoload = dict(self.root_composer.package.autoload)
        autoload.setdefault("classmap", [])
        autoload.setdefault("psr-4", {})
        autoload.setdefault("files", [])
        return autoload

    def _load_root_autoload(self) -> Autoload:
        filename = self.root_composer.declaration_file
        section = self._root_autoload_section()

        class_map = self.task_runner.run(
            "🌱 Loading class map from root package",
            lambda _: ClassMap(section["classmap"] or [], filename, self.root_path),
        )
        namespaces = self.task_runner.run(
            "🌱 Loading PSR-4 namespaces from root package",
            lambda _: Psr4Namespaces(section["psr-4"] or {}, filename, self.root_path),
        )
        files = Files(section["files"] or [], filename, self.root_path)

        return Autoload(class_map, namespaces, files, filename, self.root_path)

    def _load_vendor_autoload(self, exclude_from_class_map: List[str]) -> Autoload:
        def build(_: RunnerContext) -> Autoload:
            composer = self.install_vendor_libraries(optimize_autoloader=True, classmap_authoritative=True)
            autoload_dir = join(composer.vendor_dir, "composer")
            class_map_file = join(autoload_dir, "autoload_classmap.php")
            files_file = join(autoload_dir, "autoload_files.php")

            return Autoload(
                ClassMap(read_class_map(class_map_file), class_map_file, self.root_path),
                Psr4Namespaces({}, class_map_file, self.root_path),
                Files(read_files(files_file), files_file, self.root_path),
                class_map_file,
                self.root_path,
            )

        autoload = self.task_runner.run("🌱 Building class map from vendor libraries", build)

        for path in exclude_from_class_map:
            autoload = self.task_runner.run(
                f'⛔ Removing "{path}" from class map',
                lambda context, p=path, a=autoload: self._exclude_from_class_map(context, a, p),
                Verbosity.VERBOSE,
            )

        return autoload

    def _exclude_from_class_map(self, context: RunnerContext, autoload: Autoload, path: str) -> Autoload:
        full_path = join(self.libraries_path, path)
        if not autoload.class_map.has(full_path):
            context.mark_as_failed()
            logger.warning('"%s" is not part of the vendor class map and cannot be removed.', path)
            return autoload

        return Autoload(
            autoload.class_map.remove(full_path),
            autoload.psr4_namespaces,
            autoload.files,
            autoload.filename,
            autoload.root_path,
        )
