"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    INVALID = 2


class PackageTypes(Enum):
    """Composer package types with a special meaning during extraction.

    Args:
        Enum (string): Composer package type markers.
    """

    FRAMEWORK = "typo3-cms-framework"
    EXTENSION = "typo3-cms-extension"


class Verbosity(Enum):
    """Console verbosity levels, ordered from quiet to debug.

    Args:
        Enum (int): Console verbosity levels.
    """

    QUIET = 16
    NORMAL = 32
    VERBOSE = 64
    VERY_VERBOSE = 128
    DEBUG = 256


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROGRAM_NAME = "typo3-vendor-bundler"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "VENDOR_BUNDLER_LOG_LEVEL"

    COMPOSER_JSON_FILE = "composer.json"
    EXT_EMCONF_FILE = "ext_emconf.php"
    BACKUP_SUFFIX = ".bak"
    CONFIG_FILES = [
        "typo3-vendor-bundler.json",
        "typo3-vendor-bundler.yaml",
        "typo3-vendor-bundler.yml",
    ]

    DEFAULT_LIBS_PATH = "Resources/Private/Libs"
    DEFAULT_SBOM_FILE = "sbom.json"
    DEFAULT_SBOM_VERSION = "1.6"
    DEFAULT_VENDOR_DIR = "vendor"
    GENERATED_NAME_PREFIX = "typo3-vendor-bundler"
    EXTRA_SECTION_PATH = "typo3/cms.vendor-libraries"

    COMPOSER_BINARY = os.environ.get("VENDOR_BUNDLER_COMPOSER_BINARY", "composer")
    COMPOSER_TIMEOUT_SEC = 900

    PACKAGIST_URL = "https://repo.packagist.org"
    PACKAGIST_METADATA_PATH = "/p2/{name}.json"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
