"""Readers for the autoload files Composer dumps into ``vendor/composer``.

The files are PHP scripts returning arrays whose values are built from the
``$vendorDir`` and ``$baseDir`` variables, e.g.::

    return array(
        'Foo\\Bar' => $vendorDir . '/foo/bar/src/Bar.php',
    );

Only this generated shape is supported; anything else is rejected as an
invalid declaration file.
"""
from __future__ import annotations

import os
import re
from typing import Dict, List, Tuple

from common.exceptions import DeclarationFileIsInvalid, FileDoesNotExist
from common.filesystem import canonicalize

_STRING = r"'((?:[^'\\]|\\.)*)'"
_PATH_EXPR = rf"(?:(\$vendorDir|\$baseDir)\s*\.\s*)?{_STRING}"
_RETURN = re.compile(r"return\s+(?:array\s*\(|\[)(.*)(?:\)|\])\s*;\s*$", re.DOTALL)
_ENTRY = re.compile(
    r"'(?P<key>(?:[^'\\]|\\.)*)'\s*=>\s*(?:"
    r"array\s*\((?P<list>[^)]*)\)|\[(?P<list2>[^\]]*)\]|"
    r"(?:(?P<var>\$vendorDir|\$baseDir)\s*\.\s*)?'(?P<path>(?:[^'\\]|\\.)*)')",
    re.DOTALL,
)
_LIST_ITEM = re.compile(_PATH_EXPR)


def _unescape(value: str) -> str:
    return value.replace("\\\\", "\\").replace("\\'", "'")


def _resolve(variable: str, path: str, vendor_dir: str, base_dir: str) -> str:
    if variable == "$vendorDir":
        return canonicalize(vendor_dir + _unescape(path))
    if variable == "$baseDir":
        return canonicalize(base_dir + _unescape(path))
    return canonicalize(_unescape(path))


def _read_entries(filename: str) -> List[Tuple[str, List[str]]]:
    if not os.path.isfile(filename):
        raise FileDoesNotExist(filename)

    with open(filename, "r", encoding="utf-8") as handle:
        contents = handle.read()

    body = _RETURN.search(contents)
    if body is None:
        raise DeclarationFileIsInvalid(filename)

    vendor_dir = canonicalize(os.path.dirname(os.path.dirname(os.path.abspath(filename))))
    base_dir = canonicalize(os.path.dirname(vendor_dir))

    entries = []
    for match in _ENTRY.finditer(body.group(1)):
        key = _unescape(match.group("key"))
        listing = match.group("list") if match.group("list") is not None else match.group("list2")
        if listing is not None:
            paths = [
                _resolve(variable, path, vendor_dir, base_dir)
                for variable, path in _LIST_ITEM.findall(listing)
            ]
        else:
            paths = [_resolve(match.group("var") or "", match.group("path"), vendor_dir, base_dir)]
        entries.append((key, paths))
    return entries


def read_class_map(filename: str) -> List[str]:
    """Return the file paths of ``autoload_classmap.php`` in declaration order."""
    return [paths[0] for _, paths in _read_entries(filename) if paths]


def read_psr4(filename: str) -> Dict[str, List[str]]:
    """Return the namespace prefixes of ``autoload_psr4.php``."""
    return {key: paths for key, paths in _read_entries(filename)}


def read_files(filename: str) -> List[str]:
    """Return the file paths of ``autoload_files.php``; a missing file yields no entries."""
    if not os.path.isfile(filename):
        return []
    return [paths[0] for _, paths in _read_entries(filename) if paths]
