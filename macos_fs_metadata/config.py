#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from dataclasses import dataclass, fields
from pathlib import Path
import json

# PIP3 modules
import yaml

#============================================


@dataclass(slots=True)
class AppConfig:
	"""
	Runtime configuration settings.

	Attributes:
		show_hidden: Include hidden volumes in listings.
		osascript_timeout: Seconds before an osascript run is abandoned; None waits.
		use_diskutil: Ask diskutil for macOS-only volume keys.
		verbose: Verbose logging.
		config_path: Optional user config path.
	"""
	show_hidden: bool = False
	osascript_timeout: float | None = None
	use_diskutil: bool = True
	verbose: bool = False
	config_path: Path | None = None

	#============================================
	def apply_user_config(self, values: dict) -> None:
		"""
		Merge values loaded from a config file.

		Unknown keys are ignored.

		Args:
			values: Mapping loaded by load_user_config.
		"""
		known = {item.name for item in fields(self)} - {"config_path"}
		for key, value in values.items():
			if key in known:
				setattr(self, key, value)


#============================================


def load_user_config(config_path: Path | None) -> dict:
	"""
	Load user configuration from yaml or json.

	Args:
		config_path: Path to config file.

	Returns:
		Dictionary of loaded values or empty dict.
	"""
	if not config_path:
		return {}
	if not config_path.exists():
		return {}
	if config_path.suffix.lower() in {".yml", ".yaml"}:
		with config_path.open("r", encoding="utf-8") as handle:
			loaded = yaml.safe_load(handle)
			return loaded or {}
	with config_path.open("r", encoding="utf-8") as handle:
		return json.load(handle)
