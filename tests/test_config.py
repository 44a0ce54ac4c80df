"""Tests for reading bundler configuration files."""

import json

import pytest

from bundler.entity.manifest import Manifest
from common.exceptions import ConfigFileIsInvalid, ConfigFileIsNotSupported, FileDoesNotExist
from config import ConfigReader, VendorBundlerConfig, map_config

FULL_YAML = """\
autoload:
  dropComposerAutoload: false
  target:
    file: ext_emconf.php
    manifest: ext_emconf
    overwrite: true
  backupSources: true
  excludeFromClassMap:
    - vendor/composer/InstalledVersions.php
dependencies:
  sbom:
    file: sbom.xml
    version: 1.5
    includeDev: false
    overwrite: true
dependencyExtraction:
  enabled: false
  failOnProblems: false
pathToVendorLibraries: Resources/Private/PHP
rootPath: ../extension
"""


class TestConfigReader:
    """Tests for ConfigReader."""

    def test_read_yaml(self, tmp_path):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        file = config_dir / "typo3-vendor-bundler.yaml"
        file.write_text(FULL_YAML, encoding="utf-8")

        config = ConfigReader().read_from_file(str(file))

        assert config.autoload.drop_composer_autoload is False
        assert config.autoload.target.file == "ext_emconf.php"
        assert config.autoload.target.manifest is Manifest.EXT_EMCONF
        assert config.autoload.target.overwrite is True
        assert config.autoload.backup_sources is True
        assert config.autoload.exclude_from_class_map == ["vendor/composer/InstalledVersions.php"]
        assert config.dependencies.sbom.file == "sbom.xml"
        assert config.dependencies.sbom.version == "1.5"
        assert config.dependencies.sbom.include_dev is False
        assert config.dependencies.sbom.overwrite is True
        assert config.dependency_extraction.enabled is False
        assert config.dependency_extraction.fail_on_problems is False
        assert config.path_to_vendor_libraries == "Resources/Private/PHP"
        assert config.root_path == f"{tmp_path}/extension"

    def test_read_json_with_defaults(self, tmp_path):
        file = tmp_path / "typo3-vendor-bundler.json"
        file.write_text(json.dumps({"autoload": {"backupSources": True}}), encoding="utf-8")

        config = ConfigReader().read_from_file(str(file))

        assert config.autoload.backup_sources is True
        assert config.autoload.drop_composer_autoload is True
        assert config.autoload.target.manifest is Manifest.COMPOSER
        assert config.dependencies.sbom.version == "1.6"
        assert config.path_to_vendor_libraries == "Resources/Private/Libs"
        assert config.root_path == str(tmp_path)

    def test_absolute_root_path_is_kept(self, tmp_path):
        file = tmp_path / "typo3-vendor-bundler.json"
        file.write_text(json.dumps({"rootPath": "/srv/extension"}), encoding="utf-8")

        assert ConfigReader().read_from_file(str(file)).root_path == "/srv/extension"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileDoesNotExist):
            ConfigReader().read_from_file(str(tmp_path / "typo3-vendor-bundler.json"))

    def test_unsupported_file(self, tmp_path):
        file = tmp_path / "typo3-vendor-bundler.php"
        file.write_text("<?php return [];", encoding="utf-8")
        with pytest.raises(ConfigFileIsNotSupported):
            ConfigReader().read_from_file(str(file))

    def test_malformed_json(self, tmp_path):
        file = tmp_path / "typo3-vendor-bundler.json"
        file.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigFileIsInvalid) as excinfo:
            ConfigReader().read_from_file(str(file))
        assert excinfo.value.errors[0].startswith("root: ")

    def test_yaml_must_be_a_mapping(self, tmp_path):
        file = tmp_path / "typo3-vendor-bundler.yml"
        file.write_text("- foo\n", encoding="utf-8")
        with pytest.raises(ConfigFileIsInvalid):
            ConfigReader().read_from_file(str(file))

    def test_detect_file(self, tmp_path):
        assert ConfigReader.detect_file(str(tmp_path)) is None

        (tmp_path / "typo3-vendor-bundler.yml").write_text("{}", encoding="utf-8")
        (tmp_path / "typo3-vendor-bundler.yaml").write_text("{}", encoding="utf-8")

        assert ConfigReader.detect_file(str(tmp_path)).endswith("typo3-vendor-bundler.yaml")


class TestMapConfig:
    """Tests for map_config() error reporting."""

    def test_empty_mapping_yields_defaults(self):
        assert map_config({}, "config.json") == VendorBundlerConfig()

    def test_errors_are_reported_with_paths(self):
        data = {
            "autoload": {
                "dropComposerAutoload": "yes",
                "target": {"manifest": "package.json"},
                "excludeFromClassMap": ["ok.php", ""],
            },
            "dependencies": {"sbom": {"version": True}},
            "unknown": 1,
        }

        with pytest.raises(ConfigFileIsInvalid) as excinfo:
            map_config(data, "config.json")

        errors = excinfo.value.errors
        assert "root: Unexpected key(s) 'unknown'." in errors
        assert "autoload.dropComposerAutoload: Value 'yes' is not a valid boolean." in errors
        assert any(e.startswith("autoload.target.manifest: Value 'package.json' does not match") for e in errors)
        assert "autoload.excludeFromClassMap[1]: Value '' is not a valid non-empty string." in errors
        assert "dependencies.sbom.version: Value True is not a valid string." in errors
        assert excinfo.value.file == "config.json"

    def test_root_must_be_an_object(self):
        with pytest.raises(ConfigFileIsInvalid) as excinfo:
            map_config(["foo"], "config.json")
        assert excinfo.value.errors == ["root: Value ['foo'] is not a valid object."]
