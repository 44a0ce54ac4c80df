"""Serialization formats for generated SBOMs."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from cyclonedx.model.bom import Bom
from cyclonedx.output import make_outputter
from cyclonedx.schema import OutputFormat, SchemaVersion
from cyclonedx.validation import make_schemabased_validator

from common.exceptions import BomFormatIsNotSupported
from common.filesystem import get_extension

# The JSON schema was introduced with CycloneDX 1.2
_MINIMUM_JSON_VERSION = (1, 2)


def schema_version(version: str) -> Optional[SchemaVersion]:
    """Map a version string such as ``1.6`` to the library's SchemaVersion, if known."""
    try:
        return SchemaVersion["V" + version.strip().replace(".", "_")]
    except KeyError:
        return None


def _version_tuple(version: SchemaVersion) -> tuple:
    return tuple(int(part) for part in version.name[1:].split("_"))


class BomFormat(Enum):
    """CycloneDX wire format, chosen by the SBOM file extension.

    Args:
        Enum (string): File extensions of supported formats.
    """

    JSON = "json"
    XML = "xml"

    @classmethod
    def from_file(cls, filename: str) -> "BomFormat":
        """Detect the format from ``filename``'s extension.

        Raises:
            BomFormatIsNotSupported: For any extension other than json or xml.
        """
        extension = get_extension(filename)
        try:
            return cls(extension)
        except ValueError as exc:
            raise BomFormatIsNotSupported(extension) from exc

    @property
    def output_format(self) -> OutputFormat:
        if self is BomFormat.JSON:
            return OutputFormat.JSON
        return OutputFormat.XML

    def supports(self, version: str) -> bool:
        parsed = schema_version(version)
        if parsed is None:
            return False
        if self is BomFormat.JSON:
            return _version_tuple(parsed) >= _MINIMUM_JSON_VERSION
        return True

    def _require(self, version: str) -> SchemaVersion:
        parsed = schema_version(version)
        if parsed is None or not self.supports(version):
            raise BomFormatIsNotSupported(self.value, version)
        return parsed

    def serialize(self, bom: Bom, version: str) -> str:
        outputter = make_outputter(bom, self.output_format, self._require(version))
        return outputter.output_as_string(indent=2)

    def validate(self, serialized: str, version: str) -> Optional[str]:
        """Validate ``serialized`` against the CycloneDX schema.

        Returns:
            The validation error message, or None if the document is valid.
        """
        validator = make_schemabased_validator(self.output_format, self._require(version))
        error = validator.validate_str(serialized)
        if error is None:
            return None
        return str(error)
