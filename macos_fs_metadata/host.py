#!/usr/bin/env python3
"""
Host volume information.

Builds the per-volume property table from psutil and, on macOS,
`diskutil info -plist`. Keys follow the NSURLVolume*Key names.
"""

from __future__ import annotations

# Standard Library
import logging
import os
import platform
import plistlib
import subprocess
from typing import Any

# PIP3 modules
import psutil

logger = logging.getLogger(__name__)

TOTAL_CAPACITY = "NSURLVolumeTotalCapacityKey"
AVAILABLE_CAPACITY = "NSURLVolumeAvailableCapacityKey"
IS_AUTOMOUNTED = "NSURLVolumeIsAutomountedKey"
IS_BROWSABLE = "NSURLVolumeIsBrowsableKey"
IS_EJECTABLE = "NSURLVolumeIsEjectableKey"
IS_INTERNAL = "NSURLVolumeIsInternalKey"
IS_LOCAL = "NSURLVolumeIsLocalKey"
IS_READ_ONLY = "NSURLVolumeIsReadOnlyKey"
IS_REMOVABLE = "NSURLVolumeIsRemovableKey"
MAXIMUM_FILE_SIZE = "NSURLVolumeMaximumFileSizeKey"
UUID_STRING = "NSURLVolumeUUIDStringKey"
URL_FOR_REMOUNTING = "NSURLVolumeURLForRemountingKey"
LOCALIZED_NAME = "NSURLVolumeLocalizedNameKey"
NAME = "NSURLVolumeNameKey"
LOCALIZED_FORMAT_DESCRIPTION = "NSURLVolumeLocalizedFormatDescriptionKey"

# filesystem type -> URL scheme
NETWORK_FILESYSTEMS = {
	"smbfs": "smb",
	"cifs": "smb",
	"afpfs": "afp",
	"nfs": "nfs",
	"nfs4": "nfs",
	"webdav": "http",
}

HIDDEN_PREFIXES = ("/System/Volumes/", "/private/var/vm")
NOBROWSE_OPTIONS = {"nobrowse", "dontbrowse"}

# kernel and automounter filesystems that are never user volumes
PSEUDO_FILESYSTEMS = {
	"autofs",
	"binfmt_misc",
	"bpf",
	"cgroup",
	"cgroup2",
	"configfs",
	"debugfs",
	"devfs",
	"devpts",
	"devtmpfs",
	"fusectl",
	"hugetlbfs",
	"mqueue",
	"nsfs",
	"proc",
	"pstore",
	"ramfs",
	"securityfs",
	"sysfs",
	"tmpfs",
	"tracefs",
}

#============================================


def diskutil_info(mountpoint: str) -> dict:
	"""
	Read `diskutil info -plist` for a mount.

	Args:
		mountpoint: Mounted volume path.

	Returns:
		Parsed plist, or an empty dict when unavailable.
	"""
	try:
		result = subprocess.run(
			["diskutil", "info", "-plist", mountpoint],
			capture_output=True,
			check=False,
		)
	except FileNotFoundError:
		return {}
	if result.returncode != 0 or not result.stdout:
		return {}
	try:
		loaded = plistlib.loads(result.stdout)
	except plistlib.InvalidFileException:
		logger.debug("diskutil returned an unreadable plist for %s", mountpoint)
		return {}
	if not isinstance(loaded, dict):
		return {}
	return loaded


#============================================


def _mount_options(partition) -> set[str]:
	return {opt.strip() for opt in partition.opts.split(",") if opt.strip()}


def is_hidden(partition) -> bool:
	"""
	Decide whether a mount is hidden from the default listing.
	"""
	if NOBROWSE_OPTIONS & _mount_options(partition):
		return True
	if partition.fstype.lower() in PSEUDO_FILESYSTEMS:
		return True
	if partition.device.startswith("map "):
		return True
	mount = partition.mountpoint
	return any(mount.startswith(prefix) for prefix in HIDDEN_PREFIXES)


def remount_url(partition) -> str | None:
	"""
	Network URL for a remote mount, or None for local ones.
	"""
	scheme = NETWORK_FILESYSTEMS.get(partition.fstype.lower())
	if not scheme:
		return None
	device = partition.device
	if device.startswith("//"):
		return f"{scheme}:{device}"
	if ":" in device and scheme == "nfs":
		host, _, export = device.partition(":")
		return f"nfs://{host}{export}"
	if "://" in device:
		return device
	return f"{scheme}://{device.lstrip('/')}"


def _maximum_file_size(mountpoint: str) -> int | None:
	try:
		bits = os.pathconf(mountpoint, "PC_FILESIZEBITS")
	except (OSError, ValueError):
		return None
	if bits <= 0:
		return None
	return 2 ** (bits - 1) - 1


def _volume_name(mountpoint: str) -> str:
	name = os.path.basename(mountpoint.rstrip("/"))
	return name or "/"


#============================================


def volume_properties(partition, use_diskutil: bool = True) -> dict[str, Any]:
	"""
	Collect properties for one mounted volume.

	Args:
		partition: psutil partition entry.
		use_diskutil: Ask diskutil for macOS-only keys.

	Returns:
		Property map; keys that do not apply are left out.
	"""
	mount = partition.mountpoint
	options = _mount_options(partition)
	props: dict[str, Any] = {}
	try:
		usage = psutil.disk_usage(mount)
	except OSError as exc:
		logger.debug("disk_usage failed for %s: %s", mount, exc)
	else:
		props[TOTAL_CAPACITY] = usage.total
		props[AVAILABLE_CAPACITY] = usage.free
	props[IS_READ_ONLY] = "ro" in options or "rdonly" in options
	props[IS_AUTOMOUNTED] = "automounted" in options
	props[IS_BROWSABLE] = NOBROWSE_OPTIONS.isdisjoint(options)
	props[IS_LOCAL] = partition.fstype.lower() not in NETWORK_FILESYSTEMS
	max_size = _maximum_file_size(mount)
	if max_size is not None:
		props[MAXIMUM_FILE_SIZE] = max_size
	url = remount_url(partition)
	if url:
		props[URL_FOR_REMOUNTING] = url
	name = _volume_name(mount)
	props[NAME] = name
	props[LOCALIZED_NAME] = name
	if partition.fstype:
		props[LOCALIZED_FORMAT_DESCRIPTION] = partition.fstype
	if use_diskutil and props[IS_LOCAL] and platform.system() == "Darwin":
		props.update(_diskutil_properties(diskutil_info(mount)))
	return props


def _diskutil_properties(info: dict) -> dict[str, Any]:
	props: dict[str, Any] = {}
	if info.get("VolumeUUID"):
		props[UUID_STRING] = info["VolumeUUID"]
	if info.get("VolumeName"):
		props[NAME] = info["VolumeName"]
		props[LOCALIZED_NAME] = info["VolumeName"]
	if info.get("FilesystemName"):
		props[LOCALIZED_FORMAT_DESCRIPTION] = info["FilesystemName"]
	if "Ejectable" in info:
		props[IS_EJECTABLE] = bool(info["Ejectable"])
	if "RemovableMedia" in info:
		props[IS_REMOVABLE] = bool(info["RemovableMedia"])
	elif "Removable" in info:
		props[IS_REMOVABLE] = bool(info["Removable"])
	if "Internal" in info:
		props[IS_INTERNAL] = bool(info["Internal"])
	return props


#============================================


def volume_information(show_hidden: bool = False, use_diskutil: bool = True) -> dict[str, dict[str, Any]]:
	"""
	Describe the mounted volumes.

	Args:
		show_hidden: Include hidden and pseudo filesystems.
		use_diskutil: Ask diskutil for macOS-only keys.

	Returns:
		Mapping of mount path to property map.
	"""
	volumes: dict[str, dict[str, Any]] = {}
	for partition in psutil.disk_partitions(all=True):
		if not show_hidden and is_hidden(partition):
			continue
		volumes[partition.mountpoint] = volume_properties(partition, use_diskutil)
	logger.debug("found %d volumes (show_hidden=%s)", len(volumes), show_hidden)
	return volumes
