#!/usr/bin/env python3
"""
Extended attribute access.

Thin layer over the `xattr` package. Values come back as raw bytes,
`True` for an attribute that exists with no data, or None when the
attribute is missing.
"""

from __future__ import annotations

# Standard Library
import errno
import logging
import os
from collections.abc import Iterable, Mapping

# PIP3 modules
import xattr

# local repo modules
from .utf8 import hex_dump, is_valid_utf8

logger = logging.getLogger(__name__)

_MISSING_ERRNOS = {
	getattr(errno, "ENOATTR", errno.ENODATA),
	errno.ENODATA,
}

OPTION_FLAGS = {
	"nofollow": xattr.XATTR_NOFOLLOW,
	"create": xattr.XATTR_CREATE,
	"replace": xattr.XATTR_REPLACE,
}
WRITE_ONLY_OPTIONS = {"create", "replace"}

Options = Iterable[str] | Mapping[str, bool] | None

#============================================


def option_flags(options: Options, writing: bool = False) -> int:
	"""
	Translate option names into an xattr flag mask.

	Args:
		options: Option names, or a mapping of name -> enabled.
		writing: Allow the set-only options.

	Returns:
		Integer flag mask.
	"""
	if not options:
		return 0
	if isinstance(options, str):
		raise ValueError("options must be a collection of names, not a string.")
	if isinstance(options, Mapping):
		names = [name for name, enabled in options.items() if enabled]
	else:
		names = list(options)
	flags = 0
	keys = [str(name).lower() for name in names]
	for name, key in zip(names, keys):
		if key not in OPTION_FLAGS:
			raise ValueError(f"unknown xattr option: {name!r}")
		if key in WRITE_ONLY_OPTIONS and not writing:
			raise ValueError(f"option {name!r} only applies when setting an attribute.")
		flags |= OPTION_FLAGS[key]
	if writing and "create" in keys and "replace" in keys:
		raise ValueError("options 'create' and 'replace' are mutually exclusive.")
	return flags


def _check_position(position: int) -> int:
	if isinstance(position, bool) or not isinstance(position, int) or position < 0:
		raise ValueError("position must be a non-negative integer.")
	return position


#============================================


def get(
	path: str | os.PathLike,
	attribute: str,
	options: Options = None,
	position: int = 0,
) -> bytes | bool | None:
	"""
	Read one extended attribute.

	Args:
		path: File or directory.
		attribute: Attribute name, e.g. com.apple.quarantine.
		options: Option names (nofollow).
		position: Byte offset, used for the resource fork.

	Returns:
		Raw bytes, True for an empty value, or None when missing.
	"""
	flags = option_flags(options)
	position = _check_position(position)
	try:
		if position:
			# xattr.xattr.get has no offset argument
			value = xattr.lib._getxattr(os.fspath(path), attribute, 0, position, flags)
		else:
			value = xattr.xattr(os.fspath(path), flags).get(attribute)
	except OSError as exc:
		if exc.errno in _MISSING_ERRNOS:
			logger.debug("attribute %s not present on %s", attribute, path)
			return None
		raise
	if not value:
		return True
	return value


#============================================


def get_human_readable(
	path: str | os.PathLike,
	attribute: str,
	options: Options = None,
	position: int = 0,
) -> str | bool | None:
	"""
	Read an attribute and make it printable.

	Valid UTF-8 is decoded; anything else is returned as a hex dump in
	the layout used by `xattr -l`. True and None pass through.
	"""
	value = get(path, attribute, options, position)
	if isinstance(value, bytes):
		if is_valid_utf8(value):
			return value.decode("utf-8")
		return hex_dump(value)
	return value


#============================================


def list_names(path: str | os.PathLike, options: Options = None) -> list[str]:
	"""
	List attribute names on a path.

	Args:
		path: File or directory.
		options: Option names (nofollow).

	Returns:
		Attribute names in the order the filesystem reports them.
	"""
	flags = option_flags(options)
	handle = xattr.xattr(os.fspath(path), flags)
	return list(handle.list())


def set_attribute(
	path: str | os.PathLike,
	attribute: str,
	value: bytes | str,
	options: Options = None,
	position: int = 0,
) -> bool:
	"""
	Write an extended attribute. Text is stored as UTF-8.
	"""
	flags = option_flags(options, writing=True)
	position = _check_position(position)
	if isinstance(value, str):
		value = value.encode("utf-8")
	if position:
		xattr.lib._setxattr(os.fspath(path), attribute, value, position, flags)
	else:
		xattr.xattr(os.fspath(path)).set(attribute, value, flags)
	logger.info("set %s on %s (%d bytes)", attribute, path, len(value))
	return True


def remove(path: str | os.PathLike, attribute: str, options: Options = None) -> bool:
	"""
	Delete an extended attribute.
	"""
	flags = option_flags(options)
	handle = xattr.xattr(os.fspath(path))
	handle.remove(attribute, flags)
	logger.info("removed %s from %s", attribute, path)
	return True


#============================================


def get_all_human_readable(
	path: str | os.PathLike,
	options: Options = None,
) -> dict[str, str | bool | None]:
	"""
	Read every attribute on a path, like `xattr -l`.

	Args:
		path: File or directory.
		options: Option names (nofollow).

	Returns:
		Mapping of attribute name to printable value.
	"""
	values: dict[str, str | bool | None] = {}
	for name in list_names(path, options):
		values[name] = get_human_readable(path, name, options)
	return values


# public name alongside get and remove; keep at the end of the module
set = set_attribute
