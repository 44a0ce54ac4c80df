"""PSR-4 namespace mapping entity."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .path_aware import PathAwareBundle

DirectoryList = Union[str, Iterable[str]]


class Psr4Namespaces(PathAwareBundle):
    """Immutable mapping of namespace prefixes to base directories.

    A prefix may be given a single directory or a list of directories; either
    way the stored value is an ordered, duplicate-free tuple of absolute paths.
    """

    def __init__(self, namespaces: Mapping[str, DirectoryList], filename: str, root_path: str):
        super().__init__(filename, root_path)
        normalized: Dict[str, Tuple[str, ...]] = {}
        for prefix, directories in namespaces.items():
            if isinstance(directories, str):
                directories = [directories]
            unique: List[str] = []
            for directory in directories:
                absolute = self._to_absolute(directory)
                if absolute not in unique:
                    unique.append(absolute)
            normalized[prefix] = tuple(unique)
        self._namespaces = normalized

    def has(self, prefix: str) -> bool:
        return prefix in self._namespaces

    def directories(self, prefix: str) -> List[str]:
        return list(self._namespaces.get(prefix, ()))

    def merge(self, other: "Psr4Namespaces", filename: Optional[str] = None) -> "Psr4Namespaces":
        """Union both mappings; shared prefixes gain the other side's missing directories."""
        merged: Dict[str, List[str]] = {prefix: list(dirs) for prefix, dirs in self._namespaces.items()}
        for prefix, directories in other._namespaces.items():
            target = merged.setdefault(prefix, [])
            for directory in directories:
                if directory not in target:
                    target.append(directory)
        return Psr4Namespaces(merged, filename or self.filename, self.root_path)

    def to_dict(self, relative: bool = False) -> Dict[str, List[str]]:
        if relative:
            return {
                prefix: [self._to_relative(d) for d in dirs]
                for prefix, dirs in self._namespaces.items()
            }
        return {prefix: list(dirs) for prefix, dirs in self._namespaces.items()}

    def __len__(self) -> int:
        return len(self._namespaces)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Psr4Namespaces):
            return NotImplemented
        return (self._namespaces, self.filename, self.root_path) == (
            other._namespaces, other.filename, other.root_path
        )

    def __hash__(self) -> int:
        return hash((tuple(self._namespaces.items()), self.filename, self.root_path))
