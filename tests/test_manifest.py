"""Tests for assembling and dumping autoload bundles into target manifests."""

import json

import pytest

from bundler.entity import Autoload, ClassMap, Files, Manifest, Psr4Namespaces
from common.exceptions import DeclarationFileIsInvalid
from resolver.ext_emconf import dump_ext_emconf, parse_ext_emconf


def make_autoload(root, class_map=(), namespaces=None, files=(), filename="composer.json"):
    root = str(root)
    return Autoload(
        ClassMap(class_map, filename, root),
        Psr4Namespaces(namespaces or {}, filename, root),
        Files(files, filename, root),
        filename,
        root,
    )


@pytest.fixture
def root_autoload(tmp_path):
    return make_autoload(
        tmp_path,
        ["Classes/Legacy.php"],
        {"Acme\\Ext\\": "Classes/"},
        ["Resources/Private/Php/helpers.php"],
    )


@pytest.fixture
def vendor_autoload(tmp_path):
    return make_autoload(
        tmp_path,
        ["Libs/vendor/acme/lib/src/Foo.php"],
        {},
        ["Libs/vendor/symfony/polyfill/bootstrap.php"],
        "Libs/vendor/composer/autoload_classmap.php",
    )


class TestManifestEnum:
    """Tests for the Manifest enum basics."""

    def test_values(self):
        assert Manifest("composer") is Manifest.COMPOSER
        assert Manifest("ext_emconf") is Manifest.EXT_EMCONF

    def test_default_file(self):
        assert Manifest.COMPOSER.default_file == "composer.json"
        assert Manifest.EXT_EMCONF.default_file == "ext_emconf.php"


class TestComposerManifest:
    """Tests for Manifest.COMPOSER."""

    def test_assemble_puts_root_before_vendor(self, tmp_path, root_autoload, vendor_autoload):
        autoload = Manifest.COMPOSER.assemble(root_autoload, vendor_autoload, str(tmp_path / "composer.json"))

        assert autoload.filename == f"{tmp_path}/composer.json"
        assert autoload.to_dict(relative=True) == {
            "classmap": ["Classes/Legacy.php", "Libs/vendor/acme/lib/src/Foo.php"],
            "psr-4": {"Acme\\Ext\\": ["Classes"]},
            "files": ["Resources/Private/Php/helpers.php", "Libs/vendor/symfony/polyfill/bootstrap.php"],
        }

    def test_dump_replaces_autoload_section_only(self, tmp_path, root_autoload):
        target = tmp_path / "composer.json"
        target.write_text(json.dumps({"name": "acme/ext", "autoload": {"psr-4": {"Old\\": "old/"}}}), encoding="utf-8")

        Manifest.COMPOSER.dump(root_autoload)

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["name"] == "acme/ext"
        assert data["autoload"] == {
            "classmap": ["Classes/Legacy.php"],
            "psr-4": {"Acme\\Ext\\": ["Classes"]},
            "files": ["Resources/Private/Php/helpers.php"],
        }

    def test_dump_creates_missing_file(self, tmp_path):
        autoload = make_autoload(tmp_path, ["a.php"], filename="build/composer.json")

        Manifest.COMPOSER.dump(autoload)

        data = json.loads((tmp_path / "build" / "composer.json").read_text(encoding="utf-8"))
        assert data == {"autoload": {"classmap": ["a.php"]}}


class TestExtEmconfManifest:
    """Tests for Manifest.EXT_EMCONF."""

    def test_assemble_without_existing_file(self, tmp_path, root_autoload, vendor_autoload):
        target = str(tmp_path / "ext_emconf.php")

        autoload = Manifest.EXT_EMCONF.assemble(root_autoload, vendor_autoload, target)

        assert autoload.to_dict(relative=True) == {
            "classmap": ["Libs/vendor/acme/lib/src/Foo.php", "Classes/Legacy.php"],
            "psr-4": {"Acme\\Ext\\": ["Classes"]},
        }
        assert len(autoload.files) == 0

    def test_assemble_keeps_declared_autoload_first(self, tmp_path, root_autoload, vendor_autoload):
        target = tmp_path / "ext_emconf.php"
        dump_ext_emconf(str(target), {
            "title": "Ext",
            "autoload": {"classmap": ["Resources/Private/Extra"], "psr-4": {"Acme\\Other\\": "Other"}},
        })

        autoload = Manifest.EXT_EMCONF.assemble(root_autoload, vendor_autoload, str(target))

        assert autoload.to_dict(relative=True) == {
            "classmap": [
                "Resources/Private/Extra",
                "Libs/vendor/acme/lib/src/Foo.php",
                "Classes/Legacy.php",
            ],
            "psr-4": {"Acme\\Other\\": ["Other"], "Acme\\Ext\\": ["Classes"]},
        }

    def test_assemble_rejects_multiple_psr4_directories(self, tmp_path, vendor_autoload):
        root = make_autoload(tmp_path, [], {"Acme\\Ext\\": ["Classes", "Legacy"]})

        with pytest.raises(DeclarationFileIsInvalid) as excinfo:
            Manifest.EXT_EMCONF.assemble(root, vendor_autoload, str(tmp_path / "ext_emconf.php"))

        assert excinfo.value.path == "[autoload][psr-4][Acme\\Ext\\]"

    def test_assemble_rejects_invalid_declared_autoload(self, tmp_path, root_autoload, vendor_autoload):
        target = tmp_path / "ext_emconf.php"
        dump_ext_emconf(str(target), {"autoload": {"classmap": "Classes"}})

        with pytest.raises(DeclarationFileIsInvalid):
            Manifest.EXT_EMCONF.assemble(root_autoload, vendor_autoload, str(target))

    def test_dump_keeps_other_settings(self, tmp_path, root_autoload, vendor_autoload):
        target = tmp_path / "ext_emconf.php"
        dump_ext_emconf(str(target), {"title": "Ext", "version": "1.0.0"})
        autoload = Manifest.EXT_EMCONF.assemble(root_autoload, vendor_autoload, str(target))

        Manifest.EXT_EMCONF.dump(autoload)

        assert parse_ext_emconf(str(target)) == {
            "title": "Ext",
            "version": "1.0.0",
            "autoload": {
                "classmap": ["Libs/vendor/acme/lib/src/Foo.php", "Classes/Legacy.php"],
                "psr-4": {"Acme\\Ext\\": "Classes"},
            },
        }

    def test_repeated_bundling_does_not_duplicate_class_map(self, tmp_path, root_autoload, vendor_autoload):
        target = str(tmp_path / "ext_emconf.php")
        for _ in range(2):
            autoload = Manifest.EXT_EMCONF.assemble(root_autoload, vendor_autoload, target)
            Manifest.EXT_EMCONF.dump(autoload)

        assert parse_ext_emconf(target)["autoload"]["classmap"] == [
            "Libs/vendor/acme/lib/src/Foo.php",
            "Classes/Legacy.php",
        ]
