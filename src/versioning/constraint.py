"""Composer version constraint parsing and matching.

Translates Composer constraint syntax into a disjunction of conjunctions of
simple ``(operator, version)`` conditions:

* ``*``, ``x`` and the empty string match everything
* ``1.2.3``, ``==1.2.3``, ``!=1.2.3``, ``>``, ``>=``, ``<``, ``<=``
* ``^1.2.3`` (next significant release), ``~1.2`` (Composer tilde semantics)
* ``1.2.*`` / ``1.2.x`` wildcards and ``1.0 - 2.0`` hyphen ranges
* ``,`` or whitespace for AND, ``|`` or ``||`` for OR
* ``dev-<branch>`` for exact branch matches and ``@<stability>`` flags
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import semantic_version

from .models import ComposerVersion, Stability
from .parser import parse_version

_OR_SPLIT = re.compile(r"\s*\|\|?\s*")
_AND_SPLIT = re.compile(r"\s*,\s*|\s+")
_OPERATOR_SPACE = re.compile(r"(>=|<=|!=|==|<>|>|<|=|\^|~)\s+")
_HYPHEN_RANGE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_CONDITION = re.compile(r"^(>=|<=|!=|==|<>|>|<|=|\^|~)?(.+)$")
_WILDCARD = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?\.[x*]$", re.IGNORECASE)
_PARTS = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_LITERAL_SPLIT = re.compile(r"[\s,|]+")
_STABILITY_FLAG = re.compile(r"@(stable|rc|beta|alpha|dev)$", re.IGNORECASE)


class ConstraintError(ValueError):
    """Raised for constraint strings that cannot be parsed."""


@dataclass(frozen=True)
class Condition:
    """One comparison against a version (or a branch name for ``==``/``!=``)."""
    operator: str
    version: ComposerVersion

    def matches(self, candidate: ComposerVersion) -> bool:
        if self.version.is_branch or candidate.is_branch:
            same = (
                self.version.is_branch
                and candidate.is_branch
                and self.version.branch.lower() == candidate.branch.lower()
            )
            if self.operator == "==":
                return same
            if self.operator == "!=":
                return not same
            return False

        left, right = candidate.sort_key(), self.version.sort_key()
        if self.operator == "==":
            return left == right
        if self.operator == "!=":
            return left != right
        if self.operator == ">":
            return left > right
        if self.operator == ">=":
            return left >= right
        if self.operator == "<":
            return left < right
        if self.operator == "<=":
            return left <= right
        raise ConstraintError(f'Unknown operator "{self.operator}"')


@dataclass(frozen=True)
class VersionConstraint:
    """A parsed Composer constraint.

    Attributes:
        pretty: The constraint as written.
        alternatives: OR-ed groups of AND-ed conditions; an empty group matches anything.
        stability_flag: Stability given with ``@``, if any.
    """
    pretty: str
    alternatives: Tuple[Tuple[Condition, ...], ...]
    stability_flag: Optional[Stability] = None

    def matches(self, version: ComposerVersion) -> bool:
        return any(all(c.matches(version) for c in group) for group in self.alternatives)

    def matches_string(self, version: str) -> bool:
        parsed = parse_version(version)
        return parsed is not None and self.matches(parsed)

    def implied_stability(self) -> Optional[Stability]:
        """Least stable stability named by the constraint itself.

        Covers explicit ``@flags`` as well as unstable literals such as
        ``1.0.0-beta1`` or ``dev-main``.
        """
        if self.stability_flag is not None:
            return self.stability_flag
        implied = None
        for token in _LITERAL_SPLIT.split(self.pretty):
            literal = token.lstrip("<>=!^~")
            if not literal or _WILDCARD.match(literal):
                continue
            version = parse_version(literal)
            if version is None or version.stability is Stability.STABLE:
                continue
            if implied is None or version.stability.value > implied.value:
                implied = version.stability
        return implied

    def __str__(self) -> str:
        return self.pretty


def _make(major: int, minor: int = 0, patch: int = 0, dev: bool = False, pretty: Optional[str] = None) -> ComposerVersion:
    version = semantic_version.Version(
        major=major, minor=minor, patch=patch, prerelease=("dev",) if dev else ()
    )
    return ComposerVersion(pretty=pretty or str(version), version=version)


def _bound(version: ComposerVersion) -> ComposerVersion:
    """Return the lowest possible version sharing the numeric part of ``version``."""
    v = version.version
    return _make(v.major, v.minor, v.patch, dev=True)


def _numeric_parts(raw: str) -> List[int]:
    match = _PARTS.match(raw)
    if not match:
        raise ConstraintError(f'Could not parse version "{raw}"')
    return [int(part) for part in match.groups() if part is not None]


def _parse_version_or_fail(raw: str) -> ComposerVersion:
    parsed = parse_version(raw)
    if parsed is None:
        raise ConstraintError(f'Could not parse version "{raw}"')
    return parsed


def _caret(raw: str) -> List[Condition]:
    parts = _numeric_parts(raw)
    lower = _parse_version_or_fail(raw)
    padded = parts + [0] * (3 - len(parts))
    if padded[0] > 0 or len(parts) == 1:
        upper = _make(padded[0] + 1, dev=True)
    elif padded[1] > 0 or len(parts) == 2:
        upper = _make(0, padded[1] + 1, dev=True)
    else:
        upper = _make(0, 0, padded[2] + 1, dev=True)
    return [Condition(">=", _lower(lower)), Condition("<", upper)]


def _tilde(raw: str) -> List[Condition]:
    parts = _numeric_parts(raw)
    lower = _parse_version_or_fail(raw)
    if len(parts) == 1:
        upper = _make(parts[0] + 1, dev=True)
    elif len(parts) == 2:
        upper = _make(parts[0] + 1, dev=True)
    else:
        upper = _make(parts[0], parts[1] + 1, dev=True)
    return [Condition(">=", _lower(lower)), Condition("<", upper)]


def _lower(version: ComposerVersion) -> ComposerVersion:
    """Lower bound of a range: a stable literal also admits its own prereleases."""
    if version.stability is Stability.STABLE:
        return _bound(version)
    return version


def _wildcard(match: "re.Match[str]") -> List[Condition]:
    parts = [int(p) for p in match.groups() if p is not None]
    padded = parts + [0] * (3 - len(parts))
    lower = _make(*padded, dev=True)
    if len(parts) == 1:
        upper = _make(parts[0] + 1, dev=True)
    elif len(parts) == 2:
        upper = _make(parts[0], parts[1] + 1, dev=True)
    else:
        upper = _make(parts[0], parts[1], parts[2] + 1, dev=True)
    return [Condition(">=", lower), Condition("<", upper)]


def _hyphen(low: str, high: str) -> List[Condition]:
    lower = _lower(_parse_version_or_fail(low))
    parts = _numeric_parts(high)
    if len(parts) == 3 or _parse_version_or_fail(high).stability is not Stability.STABLE:
        return [Condition(">=", lower), Condition("<=", _parse_version_or_fail(high))]
    # partial upper bound includes the whole release line
    if len(parts) == 1:
        upper = _make(parts[0] + 1, dev=True)
    else:
        upper = _make(parts[0], parts[1] + 1, dev=True)
    return [Condition(">=", lower), Condition("<", upper)]


def _single(token: str) -> List[Condition]:
    if token in ("*", "x", "X"):
        return []
    if token.lower().startswith("dev-"):
        return [Condition("==", _parse_version_or_fail(token))]

    wildcard = _WILDCARD.match(token)
    if wildcard:
        return _wildcard(wildcard)

    match = _CONDITION.match(token)
    if not match:
        raise ConstraintError(f'Could not parse constraint "{token}"')
    operator, raw = match.group(1) or "==", match.group(2)

    if operator == "^":
        return _caret(raw)
    if operator == "~":
        return _tilde(raw)

    operator = {"=": "==", "<>": "!="}.get(operator, operator)
    version = _parse_version_or_fail(raw)
    if operator in ("<", ">=") and not version.is_branch and version.stability is Stability.STABLE:
        version = _bound(version)
    return [Condition(operator, version)]


def parse_constraint(raw: str) -> VersionConstraint:
    """Parse a Composer constraint string.

    Raises:
        ConstraintError: If the constraint uses unknown syntax.
    """
    pretty = raw.strip()
    value = pretty
    stability_flag = None

    flag = _STABILITY_FLAG.search(value)
    if flag:
        stability_flag = Stability.from_name(flag.group(1))
        value = value[: flag.start()].strip()
    if value.startswith("@"):
        value = ""

    if value in ("", "*", "x", "X"):
        return VersionConstraint(pretty=pretty, alternatives=((),), stability_flag=stability_flag)

    alternatives = []
    for alternative in _OR_SPLIT.split(value):
        alternative = alternative.strip()
        hyphen = _HYPHEN_RANGE.match(alternative)
        if hyphen:
            alternatives.append(tuple(_hyphen(hyphen.group(1), hyphen.group(2))))
            continue
        alternative = _OPERATOR_SPACE.sub(r"\1", alternative)
        conditions: List[Condition] = []
        for token in _AND_SPLIT.split(alternative):
            if token:
                # per-token stability flags (``^1.0@beta, <2``) are dropped for matching
                conditions.extend(_single(token.split("@", 1)[0] or "*"))
        alternatives.append(tuple(conditions))

    return VersionConstraint(pretty=pretty, alternatives=tuple(alternatives), stability_flag=stability_flag)
