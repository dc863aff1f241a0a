#!/usr/bin/env python3
"""
Tests for config loading.
"""

from pathlib import Path

from macos_fs_metadata.config import AppConfig, load_user_config


def test_missing_config_is_empty(tmp_path: Path):
	assert load_user_config(None) == {}
	assert load_user_config(tmp_path / "nope.yaml") == {}


def test_yaml_config_applies_known_keys(tmp_path: Path):
	path = tmp_path / "fs.yaml"
	path.write_text("show_hidden: true\nosascript_timeout: 12\nunknown: 1\n", encoding="utf-8")
	config = AppConfig()
	config.apply_user_config(load_user_config(path))
	assert config.show_hidden is True
	assert config.osascript_timeout == 12
	assert not hasattr(config, "unknown")


def test_json_config(tmp_path: Path):
	path = tmp_path / "fs.json"
	path.write_text('{"use_diskutil": false}', encoding="utf-8")
	config = AppConfig()
	config.apply_user_config(load_user_config(path))
	assert config.use_diskutil is False
