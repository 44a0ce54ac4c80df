"""Software Bill of Materials generation."""

from .bom_format import BomFormat, schema_version
from .bom_generator import BomGenerator

__all__ = ["BomFormat", "BomGenerator", "schema_version"]
