"""Tests for reading and writing declaration files (composer autoload dumps, ext_emconf.php, composer.json)."""

import json

import pytest

from common.exceptions import DeclarationFileIsInvalid, FileDoesNotExist
from resolver.autoload_dump import read_class_map, read_files, read_psr4
from resolver.ext_emconf import dump_ext_emconf, parse_ext_emconf
from resolver.manifest import JsonManifest

CLASS_MAP = r"""<?php

// autoload_classmap.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'Acme\\Lib\\Foo' => $vendorDir . '/acme/lib/src/Foo.php',
    'Composer\\InstalledVersions' => $vendorDir . '/composer/InstalledVersions.php',
    'RootClass' => $baseDir . '/Classes/RootClass.php',
);
"""

PSR4 = r"""<?php

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'Acme\\Lib\\' => array($vendorDir . '/acme/lib/src', $vendorDir . '/acme/lib/lib'),
    'Psr\\Log\\' => array($vendorDir . '/psr/log/src'),
);
"""

FILES = r"""<?php

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    '0e6d7bf4a5811bfa5cf40c5ccd6fae6a' => $vendorDir . '/symfony/polyfill-mbstring/bootstrap.php',
);
"""


@pytest.fixture
def autoload_dir(tmp_path):
    directory = tmp_path / "Libs" / "vendor" / "composer"
    directory.mkdir(parents=True)
    return directory


class TestAutoloadDump:
    """Tests for the readers of vendor/composer/autoload_*.php."""

    def test_read_class_map(self, autoload_dir, tmp_path):
        (autoload_dir / "autoload_classmap.php").write_text(CLASS_MAP, encoding="utf-8")

        paths = read_class_map(str(autoload_dir / "autoload_classmap.php"))

        vendor = f"{tmp_path}/Libs/vendor"
        assert paths == [
            f"{vendor}/acme/lib/src/Foo.php",
            f"{vendor}/composer/InstalledVersions.php",
            f"{tmp_path}/Libs/Classes/RootClass.php",
        ]

    def test_read_psr4(self, autoload_dir, tmp_path):
        (autoload_dir / "autoload_psr4.php").write_text(PSR4, encoding="utf-8")

        namespaces = read_psr4(str(autoload_dir / "autoload_psr4.php"))

        vendor = f"{tmp_path}/Libs/vendor"
        assert namespaces == {
            "Acme\\Lib\\": [f"{vendor}/acme/lib/src", f"{vendor}/acme/lib/lib"],
            "Psr\\Log\\": [f"{vendor}/psr/log/src"],
        }

    def test_read_files(self, autoload_dir, tmp_path):
        (autoload_dir / "autoload_files.php").write_text(FILES, encoding="utf-8")

        assert read_files(str(autoload_dir / "autoload_files.php")) == [
            f"{tmp_path}/Libs/vendor/symfony/polyfill-mbstring/bootstrap.php"
        ]

    def test_missing_files_dump_yields_no_entries(self, autoload_dir):
        assert read_files(str(autoload_dir / "autoload_files.php")) == []

    def test_missing_class_map(self, autoload_dir):
        with pytest.raises(FileDoesNotExist):
            read_class_map(str(autoload_dir / "autoload_classmap.php"))

    def test_unexpected_content(self, autoload_dir):
        (autoload_dir / "autoload_classmap.php").write_text("<?php echo 'hi';", encoding="utf-8")
        with pytest.raises(DeclarationFileIsInvalid):
            read_class_map(str(autoload_dir / "autoload_classmap.php"))


EXT_EMCONF = """<?php

/*
 * Extension configuration
 */
$EM_CONF[$_EXTKEY] = [
    'title' => 'My extension',
    'description' => 'Ships ' . "its own \\"libs\\"",
    'version' => '1.0.0',
    'state' => 'stable',
    'clearCacheOnLoad' => true,
    'priority' => null,
    'constraints' => array(
        'depends' => array('typo3' => '12.4.0-12.4.99'),
        'conflicts' => [],
    ),
    'autoload' => [
        'classmap' => ['Classes', 'Resources/Private/Libs/vendor/acme/lib/src/Foo.php'],
        'psr-4' => ['Acme\\\\Ext\\\\' => 'Classes/'],  # trailing comment
    ],
];
"""


class TestExtEmconf:
    """Tests for parse_ext_emconf() and dump_ext_emconf()."""

    def test_parse(self, tmp_path):
        path = tmp_path / "ext_emconf.php"
        path.write_text(EXT_EMCONF, encoding="utf-8")

        config = parse_ext_emconf(str(path))

        assert config["title"] == "My extension"
        assert config["description"] == 'Ships its own "libs"'
        assert config["clearCacheOnLoad"] is True
        assert config["priority"] is None
        assert config["constraints"] == {"depends": {"typo3": "12.4.0-12.4.99"}, "conflicts": []}
        assert config["autoload"] == {
            "classmap": ["Classes", "Resources/Private/Libs/vendor/acme/lib/src/Foo.php"],
            "psr-4": {"Acme\\Ext\\": "Classes/"},
        }

    def test_parse_mixed_keys(self, tmp_path):
        path = tmp_path / "ext_emconf.php"
        path.write_text("<?php $EM_CONF['ext'] = ['a', 5 => 'b', 'c', 'key' => 1.5];", encoding="utf-8")

        assert parse_ext_emconf(str(path)) == {0: "a", 5: "b", 6: "c", "key": 1.5}

    def test_empty_array(self, tmp_path):
        path = tmp_path / "ext_emconf.php"
        path.write_text("<?php $EM_CONF[$_EXTKEY] = [];", encoding="utf-8")
        assert parse_ext_emconf(str(path)) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileDoesNotExist):
            parse_ext_emconf(str(tmp_path / "ext_emconf.php"))

    @pytest.mark.parametrize("source", [
        "<?php return [];",
        "<?php $EM_CONF[$_EXTKEY] = 'string';",
        "<?php $EM_CONF[$_EXTKEY] = [strtolower('X')];",
    ])
    def test_invalid_file(self, tmp_path, source):
        path = tmp_path / "ext_emconf.php"
        path.write_text(source, encoding="utf-8")
        with pytest.raises(DeclarationFileIsInvalid):
            parse_ext_emconf(str(path))

    def test_dump(self, tmp_path):
        path = tmp_path / "ext_emconf.php"

        dump_ext_emconf(str(path), {
            "title": "It's mine",
            "clearCacheOnLoad": False,
            "autoload": {"classmap": ["Classes"], "psr-4": {"Acme\\Ext\\": "Classes"}},
        })

        assert path.read_text(encoding="utf-8") == (
            "<?php\n"
            "\n"
            "$EM_CONF[$_EXTKEY] = [\n"
            "    'title' => 'It\\'s mine',\n"
            "    'clearCacheOnLoad' => false,\n"
            "    'autoload' => [\n"
            "        'classmap' => [\n"
            "            'Classes',\n"
            "        ],\n"
            "        'psr-4' => [\n"
            "            'Acme\\\\Ext\\\\' => 'Classes',\n"
            "        ],\n"
            "    ],\n"
            "];\n"
        )

    def test_dumped_file_can_be_parsed_again(self, tmp_path):
        path = tmp_path / "ext_emconf.php"
        config = {"title": "Ext", "version": "1.0.0", "autoload": {"psr-4": {"Acme\\Ext\\": "Classes"}}}

        dump_ext_emconf(str(path), config)

        assert parse_ext_emconf(str(path)) == config


class TestJsonManifest:
    """Tests for JsonManifest."""

    def test_add_and_remove_property(self, tmp_path):
        path = tmp_path / "composer.json"
        path.write_text(json.dumps({"name": "acme/ext", "autoload": {"psr-4": {}}}), encoding="utf-8")
        manifest = JsonManifest(str(path))

        manifest.add_property("extra.typo3/cms.extension-key", "ext")
        manifest.remove_property("autoload")
        manifest.remove_property("does.not.exist")

        assert manifest.read() == {"name": "acme/ext", "extra": {"typo3/cms": {"extension-key": "ext"}}}

    def test_links_config_and_repositories(self, tmp_path):
        path = tmp_path / "composer.json"
        path.write_text("{}", encoding="utf-8")
        manifest = JsonManifest(str(path))

        manifest.add_link("require", "acme/lib", "^1.0")
        manifest.add_config_setting("lock", False)
        manifest.add_repository({"type": "vcs", "url": "https://example.com/lib.git"})

        assert manifest.read() == {
            "require": {"acme/lib": "^1.0"},
            "config": {"lock": False},
            "repositories": [{"type": "vcs", "url": "https://example.com/lib.git"}],
        }

    def test_output_keeps_slashes_and_unicode(self, tmp_path):
        path = tmp_path / "composer.json"
        manifest = JsonManifest(str(path))

        manifest.write({"description": "Ünïcode/paths"})

        contents = path.read_text(encoding="utf-8")
        assert "Ünïcode/paths" in contents
        assert contents.endswith("\n")

    def test_invalid_manifest(self, tmp_path):
        path = tmp_path / "composer.json"
        path.write_text("{invalid", encoding="utf-8")
        with pytest.raises(DeclarationFileIsInvalid):
            JsonManifest(str(path)).read()
