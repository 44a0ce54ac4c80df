"""Parsing utilities turning Composer version strings into ComposerVersion objects."""

import re
from typing import Optional

import semantic_version

from .models import ComposerVersion, Stability

_MODIFIERS = {
    "stable": None,
    "patch": None,
    "pl": None,
    "p": None,
    "rc": "rc",
    "beta": "beta",
    "b": "beta",
    "alpha": "alpha",
    "a": "alpha",
}

_VERSION_RE = re.compile(
    r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.(\d+))?"
    r"(?:[._-]?(stable|beta|b|rc|alpha|a|patch|pl|p)((?:[.-]?\d+)*))?"
    r"(?:[.-]?(dev))?$",
    re.IGNORECASE,
)
_BRANCH_ALIAS_RE = re.compile(
    r"^v?(\d+)(?:\.(\d+|[x*]))?(?:\.(\d+|[x*]))?(?:\.(\d+|[x*]))?[.-]?dev$",
    re.IGNORECASE,
)
_WILDCARD_NUMBER = 9999999


def _strip_alias_and_metadata(raw: str) -> str:
    """Drop inline aliases (``1.0.x-dev as 1.0.0``), stability flags and build metadata."""
    value = raw.strip()
    if " as " in value:
        value = value.split(" as ", 1)[0].strip()
    value = value.split("@", 1)[0].strip() if not value.startswith("@") else value
    value = value.split("+", 1)[0]
    return value


def parse_version(raw: str) -> Optional[ComposerVersion]:
    """Normalize a Composer version string.

    Supports partial versions (``1.2``), the ``v`` prefix, stability suffixes
    (``-beta1``, ``RC2``, ``-dev``), branch aliases (``1.x-dev``) and branch
    names (``dev-main``).

    Returns:
        A ComposerVersion, or None if the string is not a version.
    """
    value = _strip_alias_and_metadata(raw)
    if not value:
        return None

    if value.lower().startswith("dev-"):
        return ComposerVersion(pretty=raw.strip(), branch=value[4:])

    match = _VERSION_RE.match(value)
    if match:
        major, minor, patch, extra, modifier, modifier_number, dev = match.groups()
        prerelease = ()
        if dev:
            prerelease = ("dev",)
        elif modifier and _MODIFIERS[modifier.lower()]:
            label = _MODIFIERS[modifier.lower()]
            digits = re.sub(r"[^\d]", "", modifier_number or "")
            prerelease = (label, str(int(digits))) if digits else (label,)
        version = semantic_version.Version(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            prerelease=prerelease,
        )
        return ComposerVersion(pretty=raw.strip(), version=version, extra=int(extra or 0))

    match = _BRANCH_ALIAS_RE.match(value)
    if match:
        parts = [
            _WILDCARD_NUMBER if part is None or not part.isdigit() else int(part)
            for part in match.groups()[:3]
        ]
        # Once a wildcard appears, every later segment is a wildcard too
        for index in range(1, 3):
            if match.group(index + 1) is None or parts[index - 1] == _WILDCARD_NUMBER:
                parts[index] = _WILDCARD_NUMBER
        version = semantic_version.Version(
            major=parts[0], minor=parts[1], patch=parts[2], prerelease=("dev",)
        )
        return ComposerVersion(pretty=raw.strip(), version=version)

    return None


def parse_stability(raw: str) -> Stability:
    """Detect the stability of a version string; unknown strings count as dev."""
    version = parse_version(raw)
    if version is None:
        return Stability.DEV
    return version.stability
