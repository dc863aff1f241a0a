#!/usr/bin/env python3
"""
Command line interface for macos-fs-metadata.
"""

# Standard Library
import argparse
import json
import logging
from pathlib import Path
import subprocess
import sys

# local repo modules
from . import xattrs
from .config import AppConfig, load_user_config
from .finder import FinderCommentError, get_finder_comments, set_finder_comments
from .host import volume_information

#============================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse CLI arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Inspect extended attributes, volumes and Finder comments."
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config_path",
		help="YAML or JSON config file.",
	)
	parser.add_argument(
		"--timeout",
		dest="timeout",
		type=float,
		help="Seconds to wait for osascript (default: no limit).",
	)
	commands = parser.add_subparsers(dest="command", required=True)

	xattr_parser = commands.add_parser("xattr", help="List extended attributes like `xattr -l`.")
	xattr_parser.add_argument("path", help="File or folder.")
	xattr_parser.add_argument(
		"-a",
		"--attribute",
		dest="attribute",
		help="Show a single attribute.",
	)
	xattr_parser.add_argument(
		"--nofollow",
		dest="nofollow",
		action="store_true",
		help="Do not follow symbolic links.",
	)

	volumes_parser = commands.add_parser("volumes", help="Describe mounted volumes as JSON.")
	volumes_parser.add_argument(
		"--hidden",
		dest="hidden",
		action="store_true",
		help="Include hidden volumes.",
	)

	comment_parser = commands.add_parser("comment", help="Read or write Finder comments.")
	comment_actions = comment_parser.add_subparsers(dest="action", required=True)
	get_parser = comment_actions.add_parser("get", help="Print the Finder comment.")
	get_parser.add_argument("path", help="File or folder.")
	set_parser = comment_actions.add_parser("set", help="Set the Finder comment; omit text to clear.")
	set_parser.add_argument("path", help="File or folder.")
	set_parser.add_argument("text", nargs="?", help="Comment text.")
	return parser.parse_args(argv)


#============================================


def build_config(args: argparse.Namespace) -> AppConfig:
	"""
	Build runtime config from args and file.
	"""
	config = AppConfig()
	if args.config_path:
		config.config_path = Path(args.config_path).expanduser()
		config.apply_user_config(load_user_config(config.config_path))
	if args.timeout is not None:
		config.osascript_timeout = args.timeout
	if getattr(args, "hidden", False):
		config.show_hidden = True
	if args.verbose:
		config.verbose = True
	return config


#============================================


def format_xattr_listing(values: dict) -> str:
	"""
	Render attributes the way `xattr -l` does.

	Single-line text sits after the name; dumps and multi-line text start
	on the next line.
	"""
	lines: list[str] = []
	for name, value in values.items():
		if value is None:
			continue
		if value is True:
			lines.append(f"{name}:")
		elif "\n" in value:
			lines.append(f"{name}:\n{value}")
		else:
			lines.append(f"{name}: {value}")
	return "\n".join(lines)


#============================================


def run_command(args: argparse.Namespace, config: AppConfig) -> int:
	"""
	Dispatch a parsed command.

	Returns:
		Process exit code.
	"""
	if args.command == "xattr":
		options = ["nofollow"] if args.nofollow else None
		if args.attribute:
			value = xattrs.get_human_readable(args.path, args.attribute, options)
			if value is None:
				logging.error("%s: no such xattr: %s", args.path, args.attribute)
				return 1
			values = {args.attribute: value}
		else:
			values = xattrs.get_all_human_readable(args.path, options)
		listing = format_xattr_listing(values)
		if listing:
			print(listing)
		return 0
	if args.command == "volumes":
		table = volume_information(config.show_hidden, config.use_diskutil)
		print(json.dumps(table, indent=2, sort_keys=True))
		return 0
	if args.action == "get":
		print(get_finder_comments(args.path, timeout=config.osascript_timeout))
		return 0
	set_finder_comments(args.path, args.text, timeout=config.osascript_timeout)
	return 0


#============================================


def main(argv: list[str] | None = None) -> int:
	"""
	Entry point for the CLI.
	"""
	args = parse_args(argv)
	config = build_config(args)
	if config.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	try:
		return run_command(args, config)
	except (FinderCommentError, OSError, ValueError, subprocess.TimeoutExpired) as exc:
		logging.error("%s", exc)
		return 1


#============================================


if __name__ == "__main__":
	sys.exit(main())
