"""
macos_fs_metadata
=================

Filesystem metadata for macOS automation: extended attributes,
mounted volumes and Finder comments.
"""

from . import volume, xattrs
from .finder import FinderCommentError, get_finder_comments, set_finder_comments

__version__ = "0.1.0"

__all__ = [
	"FinderCommentError",
	"get_finder_comments",
	"set_finder_comments",
	"volume",
	"xattrs",
]
