"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import errno
import re
import subprocess
import sys
from collections import namedtuple
from pathlib import Path

import pytest


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()

from macos_fs_metadata import host, osascript, xattrs  # noqa: E402

ENOATTR = getattr(errno, "ENOATTR", errno.ENODATA)

Partition = namedtuple("Partition", "device mountpoint fstype opts")


class FakeXattr:
	"""
	Test-only stand-in for xattr.xattr backed by a dict.
	"""

	store: dict[str, dict[str, bytes]] = {}
	calls: list[tuple] = []

	def __init__(self, obj, options=0) -> None:
		self.path = obj
		self.options = options

	def get(self, name, options=0):
		self.calls.append(("get", self.path, name, self.options | options))
		attrs = self.store.get(self.path, {})
		if name not in attrs:
			raise OSError(ENOATTR, "Attribute not found", self.path)
		return attrs[name]

	def set(self, name, value, options=0):
		self.calls.append(("set", self.path, name, self.options | options))
		self.store.setdefault(self.path, {})[name] = value

	def remove(self, name, options=0):
		self.calls.append(("remove", self.path, name, self.options | options))
		attrs = self.store.get(self.path, {})
		if name not in attrs:
			raise OSError(ENOATTR, "Attribute not found", self.path)
		del attrs[name]

	def list(self, options=0):
		return list(self.store.get(self.path, {}))


@pytest.fixture
def fake_xattr(monkeypatch):
	FakeXattr.store = {}
	FakeXattr.calls = []
	monkeypatch.setattr(xattrs.xattr, "xattr", FakeXattr)
	return FakeXattr


_LITERAL = r'"((?:[^"\\]|\\.)*)"'
_PATH_RE = re.compile(r"set filePath to " + _LITERAL + r" as posix file")
_SET_RE = re.compile(r"set comment of \(filePath as alias\) to " + _LITERAL + r"\s*\nend tell")


def _unquote(text: str) -> str:
	return re.sub(r"\\(.)", r"\1", text)


class FakeFinder:
	"""
	Test-only osascript replacement that keeps comments per path.
	"""

	def __init__(self, existing: set[str]) -> None:
		self.existing = existing
		self.comments: dict[str, str] = {}
		self.scripts: list[str] = []
		self.timeouts: list = []

	def run(self, command, input=None, capture_output=False, text=False, timeout=None, check=False):
		self.scripts.append(input)
		self.timeouts.append(timeout)
		path_match = _PATH_RE.search(input)
		if not path_match:
			return subprocess.CompletedProcess(command, 1, "", "0:10: syntax error: Expected end of line. (-2741)\n")
		path = _unquote(path_match.group(1))
		if path not in self.existing:
			stderr = f'75:103: execution error: Finder got an error: Can’t get file "{path}". (-1728)\n'
			return subprocess.CompletedProcess(command, 1, "", stderr)
		if "set comment of" in input:
			set_match = _SET_RE.search(input)
			if not set_match:
				return subprocess.CompletedProcess(command, 1, "", "0:10: syntax error: Expected end of line. (-2741)\n")
			self.comments[path] = _unquote(set_match.group(1))
			return subprocess.CompletedProcess(command, 0, "", "")
		return subprocess.CompletedProcess(command, 0, self.comments.get(path, "") + "\n", "")


@pytest.fixture
def fake_finder(monkeypatch, tmp_path):
	target = tmp_path / "notes.txt"
	target.write_text("hello", encoding="utf-8")
	finder = FakeFinder({str(target)})
	finder.target = target
	monkeypatch.setattr(osascript.subprocess, "run", finder.run)
	return finder


@pytest.fixture
def fake_partitions(monkeypatch):
	visible = [
		Partition("/dev/disk3s1s1", "/", "apfs", "ro,local,rootfs,dovolfs,journaled,multilabel"),
		Partition("/dev/disk3s5", "/System/Volumes/Data", "apfs", "rw,local,dovolfs,dontbrowse,journaled,multilabel"),
		Partition("/dev/disk5s1", "/Volumes/USB", "msdos", "rw,nosuid,local,ignore-ownership"),
		Partition("//guest@nas.local/share", "/Volumes/share", "smbfs", "rw,nodev,nosuid,automounted,nobrowse"),
		Partition("//guest@nas.local/media", "/Volumes/media", "smbfs", "rw,nodev,nosuid"),
	]
	hidden = [
		Partition("devfs", "/dev", "devfs", "rw,local,nobrowse,multilabel"),
		Partition("map auto_home", "/System/Volumes/Data/home", "autofs", "rw,automounted"),
		Partition("tmpfs", "/run", "tmpfs", "rw,nosuid,nodev"),
	]

	def disk_partitions(all=False):
		mounts = visible + hidden
		if all:
			return mounts
		# psutil keeps only mounts backed by a device node when all is False
		return [part for part in mounts if part.device.startswith("/dev/")]

	usage = namedtuple("usage", "total used free percent")

	def disk_usage(path):
		if path == "/dev":
			raise PermissionError(1, "Operation not permitted", path)
		return usage(1000, 400, 600, 40.0)

	monkeypatch.setattr(host.psutil, "disk_partitions", disk_partitions)
	monkeypatch.setattr(host.psutil, "disk_usage", disk_usage)
	monkeypatch.setattr(host.platform, "system", lambda: "Linux")
	return visible, hidden


@pytest.fixture
def xattr_file(tmp_path):
	"""
	A real file on a filesystem that accepts user extended attributes.
	"""
	target = tmp_path / "attrs.txt"
	target.write_text("data", encoding="utf-8")
	try:
		xattrs.xattr.xattr(str(target)).set("user.ready", b"1")
		xattrs.xattr.xattr(str(target)).remove("user.ready")
	except OSError as exc:
		pytest.skip(f"filesystem lacks extended attribute support: {exc}")
	return target
