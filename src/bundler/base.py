"""Steps shared by all bundlers: dependency extraction and composer.json bookkeeping."""

from __future__ import annotations

import logging
import os
from typing import Optional

from constants import Constants, Verbosity
from common.exceptions import (
    CannotInstallComposerDependencies,
    DependencyExtractionFailed,
    DirectoryDoesNotExist,
)
from common.filesystem import canonicalize, join, make_absolute, make_relative
from console.output import ConsoleOutput
from console.task_runner import RunnerContext, TaskRunner
from extraction.dependency_extractor import DependencyExtractor
from extraction.dependency_set import DependencySet
from resolver.composer import Composer

logger = logging.getLogger(__name__)


class Bundler:
    """Base class of the autoload and dependency bundlers.

    Args:
        root_path: Directory of the extension's root composer.json.
        libraries_path: Directory of the vendor libraries package, relative
            paths are resolved against ``root_path``.
        output: Console receiving task progress.
    """

    def __init__(self, root_path: str, libraries_path: str, output: ConsoleOutput):
        self.root_path = canonicalize(root_path)
        self.libraries_path = make_absolute(libraries_path, self.root_path)
        self.output = output
        self.task_runner = TaskRunner(output)
        self.dependency_extractor = DependencyExtractor()
        self._root_composer: Optional[Composer] = None

    @property
    def root_composer(self) -> Composer:
        """The root package; DeclarationFileIsInvalid if its composer.json is unusable."""
        if self._root_composer is None:
            self._root_composer = Composer.create(join(self.root_path, Constants.COMPOSER_JSON_FILE))
        return self._root_composer

    @property
    def libraries_manifest(self) -> str:
        return join(self.libraries_path, Constants.COMPOSER_JSON_FILE)

    def should_extract_vendor_libraries(self, extract: bool = True) -> bool:
        """Extraction runs only if enabled and the libraries have no composer.json yet."""
        return extract and not os.path.exists(self.libraries_manifest)

    def prepare_vendor_libraries(self, extract: bool, fail_on_extraction_problems: bool) -> None:
        """Extract the vendor libraries if needed, otherwise require their directory.

        Raises:
            DependencyExtractionFailed: If problems occur and failing is requested.
            DirectoryDoesNotExist: If nothing is extracted and the directory is missing.
        """
        if self.should_extract_vendor_libraries(extract):
            self.extract_vendor_libraries(fail_on_extraction_problems)
        elif not os.path.isdir(self.libraries_path):
            raise DirectoryDoesNotExist(self.libraries_path)

    def extract_vendor_libraries(self, fail_on_extraction_problems: bool = True) -> DependencySet:
        root_composer = self.root_composer

        def extract(context: RunnerContext) -> DependencySet:
            dependency_set = self.dependency_extractor.extract(root_composer)
            problems = dependency_set.problems()
            for problem in problems:
                context.output.writeln(f"⚠️ {problem}")
            if fail_on_extraction_problems and problems:
                raise DependencyExtractionFailed(problems)
            return dependency_set

        dependency_set = self.task_runner.run("🔎 Extracting dependencies from root package", extract)
        self.task_runner.run(
            "✍️ Creating composer.json file for extracted vendor libraries",
            lambda _: dependency_set.dump_to_file(self.libraries_manifest, root_composer),
            Verbosity.VERBOSE,
        )
        return dependency_set

    def install_vendor_libraries(
        self,
        include_dev: bool = False,
        optimize_autoloader: bool = False,
        classmap_authoritative: bool = False,
    ) -> Composer:
        """Run ``composer install`` for the vendor libraries and return their project.

        The captured composer output is printed before the failure propagates.
        """
        composer = Composer.create(self.libraries_manifest)
        try:
            composer.install(
                include_dev=include_dev,
                optimize_autoloader=optimize_autoloader,
                classmap_authoritative=classmap_authoritative,
            )
        except CannotInstallComposerDependencies as exc:
            if exc.output:
                self.output.writeln()
                self.output.writeln(exc.output)
            raise
        return composer

    def _extra_section_value(self) -> str:
        return make_relative(self.libraries_path, self.root_path)

    def extra_section_is_prepared(self) -> bool:
        configured = self.root_composer.read_extra(f"{Constants.EXTRA_SECTION_PATH}.root-path")
        return configured == self._extra_section_value()

    def prepare_extra_section(self) -> None:
        """Register the vendor libraries path in the root composer.json ``extra`` section."""
        self.root_composer.write_extra(
            f"{Constants.EXTRA_SECTION_PATH}.root-path", self._extra_section_value()
        )
        logger.info("Registered vendor libraries path in %s.", self.root_composer.declaration_file)
