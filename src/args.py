"""Argument parsing functionality for typo3-vendor-bundler."""

import argparse

from constants import Constants
from bundler.entity.manifest import Manifest

LIBS_DIR_HELP = "Path to vendor libraries (either absolute or relative to working directory)"


def _common_options() -> argparse.ArgumentParser:
    """Options accepted by every command."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (JSON or YAML)",
                        action="store",
                        type=str)
    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Increase output verbosity (-v, -vv, -vvv)",
                        action="count",
                        default=0)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only print errors.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    return parser


def _add_libs_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("LIBS_DIR",
                        metavar="libs-dir",
                        help=LIBS_DIR_HELP,
                        nargs="?",
                        default=None)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser with one sub-parser per command."""
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog=Constants.PROGRAM_NAME,
        description="Bundle vendor libraries of TYPO3 extensions for classic mode installations",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="COMMAND", metavar="command")
    subparsers.required = True

    subparsers.add_parser("bundle",
                          parents=[common],
                          help="Execute all available bundlers")

    autoload = subparsers.add_parser(
        "bundle-autoload",
        parents=[common],
        help="Bundle autoloader for vendor libraries in composer.json or ext_emconf.php",
    )
    _add_libs_dir(autoload)
    autoload.add_argument("-a", "--drop-composer-autoload",
                          dest="DROP_COMPOSER_AUTOLOAD",
                          help='Drop "autoload" section in composer.json',
                          action=argparse.BooleanOptionalAction,
                          default=None)
    autoload.add_argument("-t", "--target-file",
                          dest="TARGET_FILE",
                          help="File where to dump the generated classmap",
                          action="store",
                          type=str)
    autoload.add_argument("-m", "--target-manifest",
                          dest="TARGET_MANIFEST",
                          help="Manifest which decides how to dump bundled autoload configuration",
                          action="store",
                          type=str,
                          choices=[m.value for m in Manifest])
    autoload.add_argument("-b", "--backup-sources",
                          dest="BACKUP_SOURCES",
                          help="Backup source files before they get overwritten",
                          action=argparse.BooleanOptionalAction,
                          default=None)
    autoload.add_argument("-o", "--overwrite",
                          dest="OVERWRITE",
                          help="Force overwriting the given target file, if it already exists",
                          action=argparse.BooleanOptionalAction,
                          default=None)

    dependencies = subparsers.add_parser(
        "bundle-dependencies",
        parents=[common],
        help="Bundle dependency information of vendor libraries",
    )
    _add_libs_dir(dependencies)
    dependencies.add_argument("-f", "--sbom-file",
                              dest="SBOM_FILE",
                              help="File where to dump the generated SBOM",
                              action="store",
                              type=str)
    dependencies.add_argument("-b", "--sbom-version",
                              dest="SBOM_VERSION",
                              help=f'Version to use when dumping the generated SBOM (defaults to "{Constants.DEFAULT_SBOM_VERSION}")',
                              action="store",
                              type=str)
    dependencies.add_argument("--dev",
                              dest="DEV",
                              help="Include development dependencies in the generated SBOM file",
                              action=argparse.BooleanOptionalAction,
                              default=None)
    dependencies.add_argument("-o", "--overwrite",
                              dest="OVERWRITE",
                              help="Force overwriting the given SBOM file, if it already exists",
                              action=argparse.BooleanOptionalAction,
                              default=None)
    dependencies.add_argument("-x", "--extract",
                              dest="EXTRACT",
                              help="Auto-detect and extract vendor libraries from root composer.json",
                              action=argparse.BooleanOptionalAction,
                              default=None)
    dependencies.add_argument("--fail",
                              dest="FAIL",
                              help="Fail execution if dependency extraction finishes with problems",
                              action=argparse.BooleanOptionalAction,
                              default=None)

    extract = subparsers.add_parser(
        "extract-dependencies",
        aliases=["extract"],
        parents=[common],
        help="Extract vendor libraries to bundle from composer.json",
    )
    _add_libs_dir(extract)
    extract.add_argument("-f", "--fail",
                         dest="FAIL",
                         help="Fail execution if dependency extraction finishes with problems",
                         action=argparse.BooleanOptionalAction,
                         default=None)
    extract.add_argument("-p", "--print-file-contents",
                         dest="PRINT_FILE_CONTENTS",
                         help="Print contents of composer.json file instead of dumping it to a file",
                         action="store_true")
    extract.add_argument("-w", "--dump-to-file",
                         dest="DUMP_TO_FILE",
                         help="Dump extracted dependencies to target composer.json file",
                         action="store_true")

    subparsers.add_parser("validate-config",
                          aliases=["validate-bundler-config"],
                          parents=[common],
                          help="Validate the bundler configuration file")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    args = build_parser().parse_args(argv)
    # Normalize aliases to the canonical command name
    args.COMMAND = {
        "extract": "extract-dependencies",
        "validate-bundler-config": "validate-config",
    }.get(args.COMMAND, args.COMMAND)
    return args
