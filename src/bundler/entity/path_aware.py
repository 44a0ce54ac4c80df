"""Base class for bundle entities whose entries are filesystem paths."""

from __future__ import annotations

from common.filesystem import canonicalize, make_absolute, make_relative


class PathAwareBundle:
    """Entity rooted at a directory.

    Every path handed to a subclass is normalized to an absolute path against
    ``root_path`` at construction time, so two entries are equal exactly when
    their absolute forms are equal, however they were spelled.
    """

    def __init__(self, filename: str, root_path: str):
        self._root_path = canonicalize(root_path)
        self._filename = self._to_absolute(filename)

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def relative_filename(self) -> str:
        return self._to_relative(self._filename)

    def _to_absolute(self, path: str) -> str:
        return make_absolute(path, self._root_path)

    def _to_relative(self, path: str) -> str:
        return make_relative(path, self._root_path)
