#!/usr/bin/env python3
"""
Repo-root runner for macos_fs_metadata.

Examples:
	python run_fs_metadata.py xattr ~/Downloads/report.pdf
	python run_fs_metadata.py comment set ~/Desktop/notes.txt "draft"
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from macos_fs_metadata.cli import main as cli_main

	sys.exit(cli_main())


if __name__ == "__main__":
	main()
