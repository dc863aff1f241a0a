#!/usr/bin/env python3
"""
UTF-8 validation and hex dump helpers.
"""

from __future__ import annotations

REPLACEMENT_CHAR = "�"

#============================================


def is_valid_utf8(data: bytes) -> bool:
	"""
	Check whether data is clean UTF-8 suitable for console display.

	Args:
		data: Raw bytes.

	Returns:
		True when console cleaning would leave the bytes unchanged.
	"""
	return clean_utf8_for_console(data).encode("utf-8") == data


#============================================


def clean_utf8_for_console(data: bytes | str) -> str:
	"""
	Replace invalid UTF-8 sequences and NUL with U+FFFD.

	Args:
		data: Raw bytes or already decoded text.

	Returns:
		Printable text.
	"""
	if isinstance(data, str):
		text = data
	else:
		text = data.decode("utf-8", errors="replace")
	return text.replace("\x00", REPLACEMENT_CHAR)


#============================================


def _ascii_column(chunk: bytes) -> str:
	return "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in chunk)


def hex_dump(data: bytes | str, width: int = 16) -> str:
	"""
	Format data the way `xattr -l` shows binary attributes.

	Each line holds an eight digit offset, the hex bytes and an ASCII
	column. A trailing line carries the total length.

	Args:
		data: Bytes to dump; text is encoded as UTF-8 first.
		width: Bytes per line.

	Returns:
		Multi-line dump string.
	"""
	if width < 1:
		raise ValueError("width must be a positive integer.")
	if isinstance(data, str):
		data = data.encode("utf-8")
	lines: list[str] = []
	for offset in range(0, len(data), width):
		chunk = data[offset : offset + width]
		hex_part = " ".join(f"{b:02X}" for b in chunk)
		hex_part = hex_part.ljust(width * 3 - 1)
		lines.append(f"{offset:08x}  {hex_part}  |{_ascii_column(chunk)}|")
	lines.append(f"{len(data):08x}")
	return "\n".join(lines)
