"""Shared configuration loading for the bundler commands.

Resolves the config file given with ``--config`` (or detected in the working
directory) and reports mapping errors the way every command does.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from common.exceptions import (
    CannotDetectWorkingDirectory,
    ConfigFileIsInvalid,
    VendorBundlerError,
)
from common.filesystem import canonicalize, make_absolute, make_relative
from common.logging_utils import extra_context, is_debug_enabled
from config.models import VendorBundlerConfig
from config.reader import ConfigReader
from console.output import ConsoleOutput

logger = logging.getLogger(__name__)


def working_directory() -> str:
    """Return the canonical working directory.

    Raises:
        CannotDetectWorkingDirectory: If the working directory was removed.
    """
    try:
        return canonicalize(os.getcwd())
    except OSError as exc:
        raise CannotDetectWorkingDirectory(exc) from exc


def resolve_config_file(config_file: Optional[str], cwd: str) -> Optional[str]:
    """Return the absolute path of the config file to use, if any."""
    if config_file is None:
        return ConfigReader.detect_file(cwd)
    return make_absolute(config_file, cwd)


def load_config(args, output: ConsoleOutput) -> Optional[VendorBundlerConfig]:
    """Read the bundler configuration for a command invocation.

    Without a config file the defaults apply, bound to the working directory.

    Returns:
        The configuration, or None if it could not be read. Errors have been
        written to ``output`` in that case.
    """
    cwd = working_directory()
    config_file = resolve_config_file(getattr(args, "CONFIG", None), cwd)

    if config_file is None:
        if is_debug_enabled(logger):
            logger.debug(
                "No config file found, using defaults",
                extra=extra_context(event="decision", component="cli", action="load_config", target=cwd),
            )
        return VendorBundlerConfig(root_path=cwd)

    try:
        return ConfigReader().read_from_file(config_file)
    except ConfigFileIsInvalid as exc:
        output.error(f'The config file "{make_relative(exc.file, cwd)}" is invalid.')
        output.listing(exc.errors)
    except VendorBundlerError as exc:
        output.error(exc.message)

    return None


def resolve_libraries_path(args, config: VendorBundlerConfig, cwd: str) -> str:
    """Return the vendor libraries path for a command.

    The ``libs-dir`` argument is relative to the working directory, the
    configured ``pathToVendorLibraries`` is relative to the root path. An
    explicitly empty argument yields an empty string.
    """
    libs_dir = getattr(args, "LIBS_DIR", None)
    if libs_dir is None:
        return make_absolute(config.path_to_vendor_libraries, config.root_path or cwd)
    if libs_dir.strip() == "":
        return ""
    return make_absolute(libs_dir, cwd)


def pick(cli_value, config_value):
    """CLI values win over configured ones when given."""
    return config_value if cli_value is None else cli_value
