"""Exception hierarchy for vendor bundling.

Every hard failure raised by the bundler derives from VendorBundlerError so
the command layer can turn it into a single error message and exit code.
Extraction problems are not exceptions; see extraction.dependency_extractor.
"""
from __future__ import annotations

from typing import List, Optional


class VendorBundlerError(Exception):
    """Base class for all bundler failures.

    Attributes:
        message: Human readable description of the failure.
        code: Stable numeric identifier of the failure kind.
    """

    code = 1000

    def __init__(self, message: str, original_exception: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception

    def __str__(self) -> str:
        return self.message


class CannotDetectWorkingDirectory(VendorBundlerError):
    """The current working directory could not be determined."""

    code = 1001

    def __init__(self, original_exception: Optional[BaseException] = None):
        super().__init__("Unable to detect current working directory.", original_exception)


class DirectoryDoesNotExist(VendorBundlerError):
    """A directory required by the current operation is missing."""

    code = 1002

    def __init__(self, directory: str):
        super().__init__(f'The directory "{directory}" does not exist.')
        self.directory = directory


class FileDoesNotExist(VendorBundlerError):
    """A file required by the current operation is missing."""

    code = 1003

    def __init__(self, file: str):
        super().__init__(f'The file "{file}" does not exist.')
        self.file = file


class FileAlreadyExists(VendorBundlerError):
    """The target file exists and overwriting it was not permitted."""

    code = 1004

    def __init__(self, file: str):
        super().__init__(f'The file "{file}" already exists.')
        self.file = file


class DeclarationFileIsInvalid(VendorBundlerError):
    """A manifest (composer.json, ext_emconf.php, ...) is malformed.

    Args:
        file: Path of the offending file.
        path: Optional property path inside the file, e.g. ``[autoload][psr-4][Foo\\]``.
        original_exception: The parsing error, if any.
    """

    code = 1005

    def __init__(
        self,
        file: str,
        path: Optional[str] = None,
        original_exception: Optional[BaseException] = None,
    ):
        if path is not None:
            message = f'The declaration file "{file}" is invalid (path: {path}).'
        else:
            message = f'The declaration file "{file}" is invalid.'
        super().__init__(message, original_exception)
        self.file = file
        self.path = path


class CannotInstallComposerDependencies(VendorBundlerError):
    """``composer install`` failed; carries the captured composer output."""

    code = 1006

    def __init__(self, path: str, output: str = ""):
        super().__init__(f'Unable to install Composer dependencies in "{path}".')
        self.path = path
        self.output = output


class ComposerDependenciesAreNotInstalled(VendorBundlerError):
    """No lock state is available for the given project."""

    code = 1007

    def __init__(self, path: str):
        super().__init__(
            f'Composer dependencies in "{path}" are not installed. Run "composer install" first.'
        )
        self.path = path


class DependencyExtractionFailed(VendorBundlerError):
    """Dependency extraction finished with problems and failing was requested."""

    code = 1008

    def __init__(self, problems: List[str]):
        super().__init__("Failed to extract some dependencies from composer.json file.")
        self.problems = list(problems)


class BomFormatIsNotSupported(VendorBundlerError):
    """The SBOM wire format or format/version pairing is unsupported."""

    code = 1009

    def __init__(self, bom_format: str, version: Optional[str] = None):
        if version is not None:
            message = f'The BOM format "{bom_format}" is not supported in CycloneDX version {version}.'
        else:
            message = f'The BOM format "{bom_format}" is not supported.'
        super().__init__(message)
        self.bom_format = bom_format
        self.version = version


class SerializedBomIsInvalid(VendorBundlerError):
    """The generated SBOM failed schema validation."""

    code = 1010

    def __init__(self, errors: str):
        super().__init__(f"The serialized BOM is invalid: {errors}")
        self.errors = errors


class ConfigFileIsNotSupported(VendorBundlerError):
    """The configuration file type is not supported."""

    code = 1011

    def __init__(self, file: str):
        super().__init__(f'The config file "{file}" is not supported.')
        self.file = file


class ConfigFileIsInvalid(VendorBundlerError):
    """The configuration file could not be mapped onto the config model."""

    code = 1012

    def __init__(self, file: str, errors: Optional[List[str]] = None):
        super().__init__(f'The config file "{file}" is invalid.')
        self.file = file
        self.errors = list(errors or [])
