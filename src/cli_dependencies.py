"""``bundle-dependencies`` command: write a CycloneDX SBOM for the vendor libraries."""

from __future__ import annotations

from constants import ExitCodes
from bundler.dependency_bundler import DependencyBundler
from cli_config import load_config, pick, resolve_libraries_path, working_directory
from common.filesystem import make_relative
from console.output import ConsoleOutput
from sbom.bom_format import schema_version


def run_bundle_dependencies(args, output: ConsoleOutput) -> ExitCodes:
    """Bundle dependency information; command line options override the config file."""
    config = load_config(args, output)
    if config is None:
        return ExitCodes.INVALID

    cwd = working_directory()
    libraries_path = resolve_libraries_path(args, config, cwd)
    if libraries_path == "":
        output.error("Please provide a valid path to vendor libraries.")
        return ExitCodes.INVALID

    sbom_config = config.dependencies.sbom
    version = pick(args.SBOM_VERSION, sbom_config.version)
    if schema_version(version) is None:
        output.error("The given CycloneDX version is not supported.")
        return ExitCodes.INVALID

    bundler = DependencyBundler(config.root_path or cwd, libraries_path, output)
    dependencies = bundler.bundle(
        pick(args.SBOM_FILE, sbom_config.file),
        version,
        extract_dependencies=pick(args.EXTRACT, config.dependency_extraction.enabled),
        fail_on_extraction_problems=pick(args.FAIL, config.dependency_extraction.fail_on_problems),
        include_dev=pick(args.DEV, sbom_config.include_dev),
        overwrite=pick(args.OVERWRITE, sbom_config.overwrite),
    )

    output.success(
        f'Successfully bundled dependency information in "{make_relative(dependencies.sbom_file, cwd)}".'
    )
    return ExitCodes.SUCCESS
