"""Files autoload entity."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .path_aware import PathAwareBundle


class Files(PathAwareBundle):
    """Immutable, duplicate-free ordered list of files included on every request."""

    def __init__(self, paths: Iterable[str], filename: str, root_path: str):
        super().__init__(filename, root_path)
        unique: List[str] = []
        for path in paths:
            absolute = self._to_absolute(path)
            if absolute not in unique:
                unique.append(absolute)
        self._paths = tuple(unique)

    def has(self, path: str) -> bool:
        return self._to_absolute(path) in self._paths

    def remove(self, path: str) -> "Files":
        full_path = self._to_absolute(path)
        if full_path not in self._paths:
            return self
        return Files([p for p in self._paths if p != full_path], self.filename, self.root_path)

    def merge(self, other: "Files", filename: Optional[str] = None) -> "Files":
        return Files(self._paths + other._paths, filename or self.filename, self.root_path)

    def to_list(self, relative: bool = False) -> List[str]:
        if relative:
            return [self._to_relative(path) for path in self._paths]
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Files):
            return NotImplemented
        return (self._paths, self.filename, self.root_path) == (other._paths, other.filename, other.root_path)

    def __hash__(self) -> int:
        return hash((self._paths, self.filename, self.root_path))
