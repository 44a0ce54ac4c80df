"""Tests for common.filesystem path helpers."""

import os

import pytest

from common.exceptions import DirectoryDoesNotExist
from common.filesystem import (
    backup_file,
    canonicalize,
    dump_file,
    execute_in_directory,
    get_extension,
    join,
    make_absolute,
    make_relative,
)


class TestCanonicalize:
    """Tests for canonicalize()."""

    def test_resolves_dot_segments(self):
        assert canonicalize("/foo/./bar/../baz") == "/foo/baz"

    def test_normalizes_backslashes(self):
        assert canonicalize("C:\\foo\\bar") == "C:/foo/bar"

    def test_collapses_leading_double_slash(self):
        assert canonicalize("//foo//bar/") == "/foo/bar"

    def test_current_directory_becomes_empty(self):
        assert canonicalize(".") == ""
        assert canonicalize("") == ""


class TestMakeAbsolute:
    """Tests for make_absolute() and make_relative()."""

    def test_relative_path_is_joined_with_base(self):
        assert make_absolute("src/Foo.php", "/app") == "/app/src/Foo.php"

    def test_absolute_path_is_kept(self):
        assert make_absolute("/other/../lib", "/app") == "/lib"

    def test_relative_base_path_is_rejected(self):
        with pytest.raises(ValueError):
            make_absolute("foo", "relative/base")

    def test_make_relative(self):
        assert make_relative("/app/Resources/Private/Libs", "/app") == "Resources/Private/Libs"
        assert make_relative("/lib", "/app") == "../lib"

    def test_make_relative_of_base_itself(self):
        assert make_relative("/app", "/app") == ""

    def test_join(self):
        assert join("/app", "", "vendor", "../composer.json") == "/app/composer.json"


class TestFileHelpers:
    """Tests for file writing helpers."""

    def test_get_extension(self):
        assert get_extension("sbom.JSON") == "json"
        assert get_extension("sbom.JSON", lowercase=False) == "JSON"
        assert get_extension("Makefile") == ""

    def test_dump_file_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "file.txt"
        dump_file(str(target), "content")
        assert target.read_text(encoding="utf-8") == "content"

    def test_backup_file(self, tmp_path):
        source = tmp_path / "composer.json"
        source.write_text("{}", encoding="utf-8")
        backup = backup_file(str(source))
        assert backup == str(source) + ".bak"
        assert (tmp_path / "composer.json.bak").read_text(encoding="utf-8") == "{}"


class TestExecuteInDirectory:
    """Tests for execute_in_directory()."""

    def test_restores_working_directory_after_exception(self, tmp_path):
        previous = os.getcwd()
        with pytest.raises(RuntimeError):
            with execute_in_directory(str(tmp_path)):
                assert os.path.samefile(os.getcwd(), str(tmp_path))
                raise RuntimeError("boom")
        assert os.getcwd() == previous

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryDoesNotExist):
            with execute_in_directory(str(tmp_path / "missing")):
                pass
