"""Tests for Composer version parsing, constraints and candidate selection."""

import pytest

from resolver.package import Package
from resolver.repository import ArrayRepository
from versioning.constraint import ConstraintError, parse_constraint
from versioning.models import Stability
from versioning.parser import parse_stability, parse_version
from versioning.selector import VersionSelector


class TestParseVersion:
    """Tests for parse_version()."""

    def test_partial_version_is_padded(self):
        version = parse_version("1.2")
        assert (version.version.major, version.version.minor, version.version.patch) == (1, 2, 0)
        assert version.stability is Stability.STABLE
        assert str(version) == "1.2"

    def test_v_prefix_and_prerelease(self):
        version = parse_version("v2.0.0-beta3")
        assert version.stability is Stability.BETA
        assert version.version.prerelease == ("beta", "3")

    def test_rc_without_separator(self):
        assert parse_version("1.0.0RC2").stability is Stability.RC

    def test_branch_version(self):
        version = parse_version("dev-main")
        assert version.is_branch
        assert version.branch == "main"
        assert version.stability is Stability.DEV

    def test_branch_alias(self):
        version = parse_version("2.x-dev")
        assert version.stability is Stability.DEV
        assert version.version.major == 2

    def test_inline_alias_and_flag_are_dropped(self):
        assert parse_version("1.0.x-dev as 1.0.0").stability is Stability.DEV
        assert parse_version("1.0.0@beta").stability is Stability.STABLE

    def test_invalid_version(self):
        assert parse_version("not a version") is None
        assert parse_stability("not a version") is Stability.DEV

    def test_ordering(self):
        ordered = ["1.0.0-dev", "1.0.0-alpha1", "1.0.0-beta1", "1.0.0-RC1", "1.0.0", "1.0.1"]
        keys = [parse_version(v).sort_key() for v in ordered]
        assert keys == sorted(keys)

    def test_four_part_versions_compare_on_extra_segment(self):
        assert parse_version("1.0.0.2").sort_key() > parse_version("1.0.0.1").sort_key()


class TestStability:
    """Tests for the Stability enum."""

    def test_from_name(self):
        assert Stability.from_name("RC") is Stability.RC
        assert Stability.from_name(" Beta ") is Stability.BETA

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            Stability.from_name("unstable")

    def test_is_acceptable(self):
        assert Stability.STABLE.is_acceptable(Stability.BETA)
        assert not Stability.DEV.is_acceptable(Stability.STABLE)

    def test_label(self):
        assert Stability.RC.label == "RC"
        assert Stability.DEV.label == "dev"


class TestParseConstraint:
    """Tests for parse_constraint()."""

    @pytest.mark.parametrize(
        "constraint,matching,not_matching",
        [
            ("^1.2", ["1.2.0", "1.9.9"], ["1.1.9", "2.0.0"]),
            ("^0.3", ["0.3.0", "0.3.5"], ["0.4.0"]),
            ("^0.0.3", ["0.0.3"], ["0.0.4"]),
            ("~1.2", ["1.2.0", "1.9.0"], ["2.0.0", "1.1.0"]),
            ("~1.2.3", ["1.2.3", "1.2.9"], ["1.3.0"]),
            ("1.2.*", ["1.2.0", "1.2.99"], ["1.3.0"]),
            (">=1.0 <2.0", ["1.0.0", "1.5.0"], ["2.0.0", "0.9.0"]),
            (">=1.0, <2.0", ["1.5.0"], ["2.1.0"]),
            ("^1.0 || ^3.0", ["1.1.0", "3.2.0"], ["2.0.0"]),
            ("1.0 - 2.0", ["1.0.0", "2.0.5"], ["2.1.0"]),
            ("1.0.0 - 2.0.0", ["2.0.0"], ["2.0.1"]),
            ("!=1.5.0", ["1.4.0"], ["1.5.0"]),
            ("1.2.3", ["1.2.3", "v1.2.3"], ["1.2.4"]),
            ("*", ["0.0.1", "9.9.9"], []),
        ],
    )
    def test_matches(self, constraint, matching, not_matching):
        parsed = parse_constraint(constraint)
        for version in matching:
            assert parsed.matches_string(version), f"{constraint} should match {version}"
        for version in not_matching:
            assert not parsed.matches_string(version), f"{constraint} should not match {version}"

    def test_caret_admits_prereleases_of_lower_bound(self):
        assert parse_constraint("^1.0").matches_string("1.0.0-beta1")

    def test_branch_constraint(self):
        parsed = parse_constraint("dev-main")
        assert parsed.matches_string("dev-main")
        assert not parsed.matches_string("dev-feature")
        assert not parsed.matches_string("1.0.0")

    def test_stability_flag(self):
        parsed = parse_constraint("^1.0@beta")
        assert parsed.stability_flag is Stability.BETA
        assert parsed.implied_stability() is Stability.BETA
        assert parsed.matches_string("1.1.0")

    def test_bare_stability_flag_matches_everything(self):
        parsed = parse_constraint("@dev")
        assert parsed.stability_flag is Stability.DEV
        assert parsed.matches_string("3.0.0")

    def test_implied_stability_of_unstable_literal(self):
        assert parse_constraint("1.0.0-RC1").implied_stability() is Stability.RC
        assert parse_constraint("dev-main").implied_stability() is Stability.DEV
        assert parse_constraint("^1.0").implied_stability() is None

    def test_invalid_constraint(self):
        with pytest.raises(ConstraintError):
            parse_constraint(">=foo")

    def test_invalid_version_string_does_not_match(self):
        assert not parse_constraint("^1.0").matches_string("garbage")


def make_repository(*versions, name="acme/lib", requires=None):
    return ArrayRepository(
        Package(pretty_name=name, pretty_version=v, requires=dict(requires or {})) for v in versions
    )


class TestVersionSelector:
    """Tests for VersionSelector.find_best_candidate()."""

    def test_highest_stable_version_wins(self):
        selector = VersionSelector(make_repository("1.0.0", "1.2.0", "1.1.0"))
        assert selector.find_best_candidate("acme/lib", "^1.0").pretty_version == "1.2.0"

    def test_constraint_limits_candidates(self):
        selector = VersionSelector(make_repository("1.0.0", "2.0.0"))
        assert selector.find_best_candidate("acme/lib", "^1.0").pretty_version == "1.0.0"

    def test_unstable_versions_are_rejected_by_minimum_stability(self):
        selector = VersionSelector(make_repository("1.0.0", "1.1.0-beta1"))
        assert selector.find_best_candidate("acme/lib", "^1.0").pretty_version == "1.0.0"

    def test_stability_flag_admits_unstable_versions(self):
        selector = VersionSelector(
            make_repository("1.1.0-beta1"),
            stability_flags={"ACME/lib": Stability.BETA},
        )
        assert selector.find_best_candidate("acme/lib", "^1.0").pretty_version == "1.1.0-beta1"

    def test_constraint_flag_admits_unstable_versions(self):
        selector = VersionSelector(make_repository("1.1.0-beta1"))
        assert selector.find_best_candidate("acme/lib", "^1.0@beta").pretty_version == "1.1.0-beta1"

    def test_stable_version_preferred_over_newer_prerelease(self):
        selector = VersionSelector(make_repository("1.0.0", "1.1.0-beta1"), minimum_stability=Stability.DEV)
        assert selector.find_best_candidate("acme/lib", "^1.0").pretty_version == "1.0.0"

    def test_platform_overrides_filter_candidates(self):
        repository = ArrayRepository([
            Package(pretty_name="acme/lib", pretty_version="1.0.0", requires={"php": ">=7.4"}),
            Package(pretty_name="acme/lib", pretty_version="2.0.0", requires={"php": ">=8.2"}),
        ])
        selector = VersionSelector(repository, platform={"php": "8.1.0"})
        assert selector.find_best_candidate("acme/lib", "*").pretty_version == "1.0.0"

    def test_no_candidate(self):
        selector = VersionSelector(make_repository("1.0.0"))
        assert selector.find_best_candidate("acme/lib", "^2.0") is None
        assert selector.find_best_candidate("acme/other") is None

    def test_unparsable_constraint_yields_no_candidate(self):
        selector = VersionSelector(make_repository("1.0.0"))
        assert selector.find_best_candidate("acme/lib", ">=foo") is None
