"""``extract-dependencies`` command: show or persist the vendor libraries of the root package."""

from __future__ import annotations

import logging
import os
import tempfile

from constants import Constants, ExitCodes, Verbosity
from cli_config import load_config, pick, resolve_libraries_path, working_directory
from common.exceptions import DeclarationFileIsInvalid
from common.filesystem import join, make_relative
from console.output import ConsoleOutput
from console.task_runner import RunnerContext, TaskRunner
from extraction.dependency_extractor import DependencyExtractor
from extraction.dependency_set import DependencySet
from resolver.composer import Composer

logger = logging.getLogger(__name__)


def run_extract(args, output: ConsoleOutput) -> ExitCodes:
    """Extract dependencies and print, dump or just list them."""
    config = load_config(args, output)
    if config is None:
        return ExitCodes.INVALID

    cwd = working_directory()
    fail = pick(args.FAIL, config.dependency_extraction.fail_on_problems)
    print_contents = bool(args.PRINT_FILE_CONTENTS)
    dump_to_file = bool(args.DUMP_TO_FILE)
    libraries_path = resolve_libraries_path(args, config, cwd)

    if dump_to_file and libraries_path == "":
        output.error("Please provide a valid path to vendor libraries.")
        return ExitCodes.INVALID

    try:
        composer = Composer.create(join(config.root_path or cwd, Constants.COMPOSER_JSON_FILE))
    except DeclarationFileIsInvalid as exc:
        logger.debug("Composer initialization failed: %s", exc)
        output.error("Could not initialize a Composer instance for the root package.")
        return ExitCodes.FAILURE

    task_runner = TaskRunner(output)
    extracted_verbosity = Verbosity.VERBOSE if (print_contents or dump_to_file) else Verbosity.NORMAL

    def extract(context: RunnerContext) -> DependencySet:
        dependency_set = DependencyExtractor().extract(composer)
        context.output.writeln()
        for package in dependency_set.required_packages.values():
            context.output.writeln(
                f"✅ Extracted {package.pretty_name} (version: {package.pretty_version})",
                extracted_verbosity,
            )
        for package in dependency_set.excluded_packages.values():
            context.output.writeln(
                f"⛔️ Excluded {package.pretty_name} (all versions)",
                Verbosity.VERY_VERBOSE,
            )
        if dependency_set.extraction_problems:
            context.mark_as_failed()
        return dependency_set

    dependency_set = task_runner.run("🔎 Extracting dependencies from root package", extract)

    problems = dependency_set.problems()
    if problems:
        if fail:
            output.error("Failed to extract some dependencies from composer.json file.")
        else:
            output.warning("Dependency extraction finished with problems.")
        output.listing(problems)
        if fail:
            return ExitCodes.FAILURE

    if not dependency_set.required_packages:
        output.warning("No vendor libraries found in composer.json file.")
        return ExitCodes.FAILURE

    if print_contents:
        def build_contents(_: RunnerContext) -> str:
            with tempfile.TemporaryDirectory() as directory:
                filename = os.path.join(directory, Constants.COMPOSER_JSON_FILE)
                dependency_set.dump_to_file(filename, composer)
                with open(filename, "r", encoding="utf-8") as handle:
                    return handle.read()

        contents = task_runner.run("✍️ Building composer.json file contents", build_contents)
        output.writeln()
        output.writeln(contents.rstrip("\n"))

    if dump_to_file:
        filename = join(libraries_path, Constants.COMPOSER_JSON_FILE)
        task_runner.run(
            "✍️ Creating composer.json file for extracted vendor libraries",
            lambda _: dependency_set.dump_to_file(filename, composer),
        )
        output.success(
            f'Successfully extracted and dumped dependencies to "{make_relative(filename, cwd)}".'
        )
        return ExitCodes.SUCCESS

    if not print_contents:
        output.success("Successfully extracted dependencies from composer.json file.")
        output.writeln("💡 Run this command again with --dump-to-file to persist extracted dependencies.")

    return ExitCodes.SUCCESS
