"""Autoload bundle entity: class map, PSR-4 namespaces and files under one target file."""

from __future__ import annotations

from typing import Any, Dict, Optional

from common.filesystem import canonicalize, make_absolute, make_relative

from .class_map import ClassMap
from .files import Files
from .namespaces import Psr4Namespaces


class Autoload:
    """Immutable autoload bundle.

    All three constituents must share the bundle's root path.

    Raises:
        ValueError: If a constituent is rooted elsewhere.
    """

    def __init__(
        self,
        class_map: ClassMap,
        psr4_namespaces: Psr4Namespaces,
        files: Files,
        filename: str,
        root_path: str,
    ):
        self.root_path = canonicalize(root_path)
        for constituent in (class_map, psr4_namespaces, files):
            if constituent.root_path != self.root_path:
                raise ValueError(
                    f'{type(constituent).__name__} is rooted at "{constituent.root_path}", '
                    f'expected "{self.root_path}"'
                )
        self.class_map = class_map
        self.psr4_namespaces = psr4_namespaces
        self.files = files
        self.filename = make_absolute(filename, self.root_path)

    @classmethod
    def empty(cls, filename: str, root_path: str) -> "Autoload":
        return cls(
            ClassMap([], filename, root_path),
            Psr4Namespaces({}, filename, root_path),
            Files([], filename, root_path),
            filename,
            root_path,
        )

    @property
    def relative_filename(self) -> str:
        return make_relative(self.filename, self.root_path)

    def merge(self, other: "Autoload", filename: Optional[str] = None) -> "Autoload":
        """Merge all constituents pairwise; the result adopts ``filename`` or keeps ours."""
        target = filename or self.filename
        return Autoload(
            self.class_map.merge(other.class_map, target),
            self.psr4_namespaces.merge(other.psr4_namespaces, target),
            self.files.merge(other.files, target),
            target,
            self.root_path,
        )

    def to_dict(self, relative: bool = False) -> Dict[str, Any]:
        """Export as a composer.json ``autoload`` section; empty sections are omitted."""
        result: Dict[str, Any] = {}
        class_map = self.class_map.to_list(relative)
        namespaces = self.psr4_namespaces.to_dict(relative)
        files = self.files.to_list(relative)
        if class_map:
            result["classmap"] = class_map
        if namespaces:
            result["psr-4"] = namespaces
        if files:
            result["files"] = files
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Autoload):
            return NotImplemented
        return (
            self.class_map == other.class_map
            and self.psr4_namespaces == other.psr4_namespaces
            and self.files == other.files
            and self.filename == other.filename
            and self.root_path == other.root_path
        )

    def __hash__(self) -> int:
        return hash((self.class_map, self.psr4_namespaces, self.files, self.filename, self.root_path))
