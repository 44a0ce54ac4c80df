"""``bundle-autoload`` command: merge autoload configurations of root package and vendor libraries."""

from __future__ import annotations

from constants import ExitCodes
from bundler.autoload_bundler import AutoloadBundler
from bundler.entity.manifest import Manifest
from cli_config import load_config, pick, resolve_libraries_path, working_directory
from common.filesystem import make_relative
from config.models import AutoloadTarget
from console.output import ConsoleOutput


def run_bundle_autoload(args, output: ConsoleOutput) -> ExitCodes:
    """Bundle autoload configuration; command line options override the config file."""
    config = load_config(args, output)
    if config is None:
        return ExitCodes.INVALID

    cwd = working_directory()
    libraries_path = resolve_libraries_path(args, config, cwd)
    if libraries_path == "":
        output.error("Please provide a valid path to vendor libraries.")
        return ExitCodes.INVALID

    autoload_config = config.autoload
    manifest = Manifest(args.TARGET_MANIFEST) if args.TARGET_MANIFEST else autoload_config.target.manifest
    target_file = args.TARGET_FILE
    if target_file is None:
        # A different manifest without an explicit file falls back to its default file
        target_file = (
            autoload_config.target.file
            if manifest is autoload_config.target.manifest
            else manifest.default_file
        )
    target = AutoloadTarget(
        target_file,
        manifest,
        pick(args.OVERWRITE, autoload_config.target.overwrite),
    )

    bundler = AutoloadBundler(config.root_path or cwd, libraries_path, output)
    autoload = bundler.bundle(
        target,
        extract_dependencies=config.dependency_extraction.enabled,
        fail_on_extraction_problems=config.dependency_extraction.fail_on_problems,
        drop_composer_autoload=pick(args.DROP_COMPOSER_AUTOLOAD, autoload_config.drop_composer_autoload),
        backup_sources=pick(args.BACKUP_SOURCES, autoload_config.backup_sources),
        exclude_from_class_map=autoload_config.exclude_from_class_map,
    )

    output.success(
        f'Successfully bundled autoload configurations in "{make_relative(autoload.filename, cwd)}".'
    )
    return ExitCodes.SUCCESS
