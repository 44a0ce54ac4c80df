"""Best-candidate version selection over a Composer repository."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from common.logging_utils import extra_context, is_debug_enabled

from .constraint import ConstraintError, parse_constraint
from .models import Stability

logger = logging.getLogger(__name__)


class PackageSource(Protocol):  # pylint: disable=too-few-public-methods
    """Anything able to list every known version of a package."""

    def find_packages(self, name: str, constraint: Optional[str] = None) -> list:
        ...


class VersionSelector:
    """Select the best version of a package for a given constraint.

    Candidates must satisfy the constraint, the allowed stability (a per
    package stability flag or the minimum stability) and, where the platform
    configuration overrides them, platform requirements such as ``php``.
    Among the remaining candidates the highest version with the preferred
    stability wins; otherwise the highest version overall.
    """

    def __init__(
        self,
        source: PackageSource,
        minimum_stability: Stability = Stability.STABLE,
        stability_flags: Optional[Dict[str, Stability]] = None,
        platform: Optional[Dict[str, str]] = None,
    ):
        self.source = source
        self.minimum_stability = minimum_stability
        self.stability_flags = {k.lower(): v for k, v in (stability_flags or {}).items()}
        self.platform = {k.lower(): v for k, v in (platform or {}).items()}

    def _allowed_stability(self, name: str) -> Stability:
        return self.stability_flags.get(name.lower(), self.minimum_stability)

    def _satisfies_platform(self, package) -> bool:
        for target, raw_constraint in package.requires.items():
            provided = self.platform.get(target.lower())
            if provided is None:
                continue
            try:
                if not parse_constraint(raw_constraint).matches_string(provided):
                    return False
            except ConstraintError:
                return False
        return True

    def find_best_candidate(
        self,
        name: str,
        constraint: Optional[str] = None,
        preferred_stability: Stability = Stability.STABLE,
    ):
        """Return the best matching package, or None if nothing qualifies."""
        try:
            parsed = parse_constraint(constraint or "*")
        except ConstraintError as exc:
            logger.warning("Skipping %s: %s", name, exc)
            return None

        allowed = self._allowed_stability(name)
        if parsed.stability_flag is not None and parsed.stability_flag.value > allowed.value:
            allowed = parsed.stability_flag

        candidates: List = [
            package
            for package in self.source.find_packages(name)
            if package.parsed_version is not None
            and parsed.matches(package.parsed_version)
            and package.stability.is_acceptable(allowed)
            and self._satisfies_platform(package)
        ]

        if is_debug_enabled(logger):
            logger.debug(
                "Version candidates",
                extra=extra_context(
                    event="decision",
                    component="version_selector",
                    action="find_best_candidate",
                    target=name,
                    constraint=parsed.pretty,
                    count=len(candidates),
                ),
            )

        if not candidates:
            return None

        preferred = [p for p in candidates if p.stability.is_acceptable(preferred_stability)]
        pool = preferred or candidates
        return max(pool, key=lambda p: p.parsed_version.sort_key())
