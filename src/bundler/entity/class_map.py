"""Class map entity."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .path_aware import PathAwareBundle


class ClassMap(PathAwareBundle):
    """Immutable ordered list of class files.

    Duplicates are kept positionally; ``remove`` drops every occurrence of a path.
    """

    def __init__(self, paths: Iterable[str], filename: str, root_path: str):
        super().__init__(filename, root_path)
        self._paths = tuple(self._to_absolute(path) for path in paths)

    def has(self, path: str) -> bool:
        return self._to_absolute(path) in self._paths

    def remove(self, path: str) -> "ClassMap":
        """Return a class map without ``path``; the same instance if it was not present."""
        full_path = self._to_absolute(path)
        if full_path not in self._paths:
            return self
        return ClassMap([p for p in self._paths if p != full_path], self.filename, self.root_path)

    def merge(self, other: "ClassMap", filename: Optional[str] = None) -> "ClassMap":
        return ClassMap(self._paths + other._paths, filename or self.filename, self.root_path)

    def to_list(self, relative: bool = False) -> List[str]:
        if relative:
            return [self._to_relative(path) for path in self._paths]
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassMap):
            return NotImplemented
        return (self._paths, self.filename, self.root_path) == (other._paths, other.filename, other.root_path)

    def __hash__(self) -> int:
        return hash((self._paths, self.filename, self.root_path))

    def __repr__(self) -> str:
        return f"ClassMap({list(self._paths)!r}, filename={self.filename!r})"
