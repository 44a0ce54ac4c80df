"""Result entity of a dependency bundling run."""

from __future__ import annotations

from dataclasses import dataclass

from common.filesystem import canonicalize, make_absolute, make_relative


@dataclass(frozen=True)
class Dependencies:
    """Location of a generated SBOM file."""
    sbom_file: str
    root_path: str

    def __post_init__(self) -> None:
        root_path = canonicalize(self.root_path)
        object.__setattr__(self, "root_path", root_path)
        object.__setattr__(self, "sbom_file", make_absolute(self.sbom_file, root_path))

    @property
    def relative_sbom_file(self) -> str:
        return make_relative(self.sbom_file, self.root_path)
