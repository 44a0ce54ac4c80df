"""Data models for Composer versions and stabilities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import semantic_version


class Stability(Enum):
    """Composer stability levels.

    Values follow Composer's numeric scale: a lower value is more stable.
    """
    STABLE = 0
    RC = 5
    BETA = 10
    ALPHA = 15
    DEV = 20

    @classmethod
    def from_name(cls, name: str) -> "Stability":
        """Map a stability name (``stable``, ``RC``, ``beta``, ...) onto a member.

        Raises:
            ValueError: If the name is unknown.
        """
        normalized = name.strip().lower()
        for member in cls:
            if member.name.lower() == normalized:
                return member
        raise ValueError(f'Unknown stability "{name}"')

    @property
    def label(self) -> str:
        """Composer's spelling of the stability name."""
        return "RC" if self is Stability.RC else self.name.lower()

    def is_acceptable(self, minimum: "Stability") -> bool:
        """Return True if a package of this stability passes the given minimum."""
        return self.value <= minimum.value


# Ordering of prerelease labels; dev sorts below every other label.
_LABEL_RANK = {"dev": 0, "alpha": 1, "beta": 2, "rc": 3}
_STABLE_RANK = 4


@dataclass(frozen=True)
class ComposerVersion:
    """A normalized Composer version.

    Numbered versions are backed by a ``semantic_version.Version``; the
    prerelease tuple holds ``(label, number)`` with lowercase labels. Branch
    versions (``dev-main``) carry no semantic version and compare by name.
    """
    pretty: str
    version: Optional[semantic_version.Version] = None
    branch: Optional[str] = None
    extra: int = field(default=0, compare=False)

    @property
    def is_branch(self) -> bool:
        return self.branch is not None

    @property
    def stability(self) -> Stability:
        if self.is_branch or self.version is None:
            return Stability.DEV
        if not self.version.prerelease:
            return Stability.STABLE
        return Stability.from_name(self.version.prerelease[0])

    def sort_key(self) -> Tuple[int, ...]:
        """Key ordering numbered versions the way Composer does.

        Branches sort below every numbered version.
        """
        if self.version is None:
            return (-1,)
        prerelease = self.version.prerelease
        if prerelease:
            rank = _LABEL_RANK[prerelease[0]]
            number = int(prerelease[1]) if len(prerelease) > 1 else 0
        else:
            rank, number = _STABLE_RANK, 0
        return (self.version.major, self.version.minor, self.version.patch, self.extra, rank, number)

    def __str__(self) -> str:
        return self.pretty
