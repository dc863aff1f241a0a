#!/usr/bin/env python3
"""
Finder comment access through AppleScript.
"""

from __future__ import annotations

# Standard Library
import logging
import os

# local repo modules
from . import osascript

logger = logging.getLogger(__name__)

GET_COMMENT_TEMPLATE = """tell application "Finder"
  set filePath to {path} as posix file
  get comment of (filePath as alias)
end tell
"""

SET_COMMENT_TEMPLATE = """tell application "Finder"
  set filePath to {path} as posix file
  set comment of (filePath as alias) to {comment}
end tell
"""

#============================================


class FinderCommentError(RuntimeError):
	"""
	Raised when Finder refuses a comment request.
	"""

	def __init__(self, description: str, raw: dict | None = None) -> None:
		super().__init__(description)
		self.description = description
		self.raw = raw or {}


#============================================


def quote_applescript(text: str) -> str:
	"""
	Render text as an AppleScript string literal.

	Args:
		text: Arbitrary text.

	Returns:
		Double-quoted literal with backslash and quote escaped.
	"""
	escaped = text.replace("\\", "\\\\").replace('"', '\\"')
	return f'"{escaped}"'


def build_comment_script(
	path: str | os.PathLike,
	comment: str | None = None,
	*,
	setter: bool = False,
) -> str:
	"""
	Build the Finder script that reads or writes a comment.

	Args:
		path: Target file or folder.
		comment: New comment text, used when setter is True.
		setter: Build the write variant.

	Returns:
		AppleScript source.
	"""
	quoted_path = quote_applescript(os.fsdecode(path))
	if not setter:
		return GET_COMMENT_TEMPLATE.format(path=quoted_path)
	if comment is None:
		comment = ""
	return SET_COMMENT_TEMPLATE.format(path=quoted_path, comment=quote_applescript(comment))


#============================================


def get_finder_comments(path: str | os.PathLike, *, timeout: float | None = None) -> str:
	"""
	Get the Finder comment of a file or folder.

	Args:
		path: Target file or folder.
		timeout: Optional osascript timeout in seconds.

	Returns:
		The comment, or an empty string when none is set.

	Raises:
		FinderCommentError: Finder could not resolve the path.
	"""
	outcome = osascript.applescript(build_comment_script(path), timeout=timeout)
	if not outcome.ok:
		raise FinderCommentError(outcome.description, outcome.raw)
	return outcome.result or ""


def set_finder_comments(
	path: str | os.PathLike,
	comment: str | None = None,
	*,
	timeout: float | None = None,
) -> bool:
	"""
	Set the Finder comment of a file or folder.

	Omitting the comment clears it.

	Args:
		path: Target file or folder.
		comment: New comment text.
		timeout: Optional osascript timeout in seconds.

	Returns:
		True on success.

	Raises:
		FinderCommentError: Finder could not resolve the path.
	"""
	script = build_comment_script(path, comment, setter=True)
	outcome = osascript.applescript(script, timeout=timeout)
	if not outcome.ok:
		raise FinderCommentError(outcome.description, outcome.raw)
	logger.info("updated Finder comment on %s", path)
	return outcome.ok
