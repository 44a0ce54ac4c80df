"""Bundle a Software Bill of Materials for the vendor libraries."""

from __future__ import annotations

import logging
import os

from constants import Constants, Verbosity
from common.exceptions import BomFormatIsNotSupported, FileAlreadyExists, SerializedBomIsInvalid
from common.filesystem import dump_file, make_absolute
from console.output import ConsoleOutput
from console.task_runner import RunnerContext
from sbom.bom_format import BomFormat
from sbom.bom_generator import BomGenerator

from .base import Bundler
from .entity.dependencies import Dependencies

logger = logging.getLogger(__name__)


class DependencyBundler(Bundler):
    """Install the vendor libraries and describe them as a CycloneDX SBOM."""

    def __init__(self, root_path: str, libraries_path: str, output: ConsoleOutput):
        super().__init__(root_path, libraries_path, output)
        self.bom_generator = BomGenerator(self.root_path)

    def bundle(
        self,
        filename: str = Constants.DEFAULT_SBOM_FILE,
        version: str = Constants.DEFAULT_SBOM_VERSION,
        extract_dependencies: bool = True,
        fail_on_extraction_problems: bool = True,
        include_dev: bool = True,
        overwrite: bool = False,
    ) -> Dependencies:
        """Generate, validate and write the SBOM.

        Relative SBOM filenames are resolved against the vendor libraries directory.

        Raises:
            BomFormatIsNotSupported: If the file format cannot express ``version``.
            FileAlreadyExists: If the SBOM exists and overwriting is not allowed.
            CannotInstallComposerDependencies: If installing vendor libraries fails.
            SerializedBomIsInvalid: If the generated SBOM fails schema validation.
        """
        bom_format = BomFormat.from_file(filename)
        if not bom_format.supports(version):
            raise BomFormatIsNotSupported(bom_format.value, version)

        self.prepare_vendor_libraries(extract_dependencies, fail_on_extraction_problems)

        filename = make_absolute(filename, self.libraries_path)
        if not overwrite and os.path.exists(filename):
            raise FileAlreadyExists(filename)

        composer = self.task_runner.run(
            "📦 Installing vendor libraries",
            lambda _: self.install_vendor_libraries(include_dev=include_dev),
        )
        bom = self.task_runner.run(
            "🧩 Generating Software Bill of Materials",
            lambda _: self.bom_generator.generate(composer, include_dev),
        )
        serialized = self.task_runner.run(
            "🌱 Serializing generated SBOM",
            lambda _: bom_format.serialize(bom, version),
            Verbosity.VERBOSE,
        )

        def validate(_: RunnerContext) -> None:
            error = bom_format.validate(serialized, version)
            if error is not None:
                raise SerializedBomIsInvalid(error)

        self.task_runner.run("🐛 Validating serialized SBOM", validate)
        self.task_runner.run(
            f"🎊 Dumping SBOM v{version} file",
            lambda _: dump_file(filename, serialized),
        )
        logger.info("Wrote SBOM with %d component(s) to %s.", len(bom.components), filename)

        return Dependencies(filename, self.root_path)
