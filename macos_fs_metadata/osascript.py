#!/usr/bin/env python3
"""
Run AppleScript and JavaScript for Automation through osascript.
"""

from __future__ import annotations

# Standard Library
import logging
import re
import subprocess
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

OSASCRIPT = "osascript"
DESCRIPTION_KEY = "NSLocalizedDescription"
NUMBER_KEY = "OSAScriptErrorNumber"
RANGE_KEY = "OSAScriptErrorRange"

# 45:112: execution error: Finder got an error: Can't get file "x". (-1728)
_ERROR_RE = re.compile(
	r"^(?:(?P<start>\d+):(?P<end>\d+): )?"
	r"(?:(?:execution|syntax) error: |Error: )?"
	r"(?P<message>.*?)"
	r"(?: \((?P<number>-?\d+)\))?$",
	re.DOTALL,
)

#============================================


@dataclass(slots=True)
class ScriptResult:
	"""
	Outcome of one osascript run.

	Attributes:
		ok: True when the script completed.
		result: Script output on success.
		raw: Error details on failure, keyed like NSAppleScript errors.
	"""
	ok: bool
	result: str | None = None
	raw: dict = field(default_factory=dict)

	@property
	def description(self) -> str:
		return str(self.raw.get(DESCRIPTION_KEY, ""))


#============================================


def parse_error(stderr: str) -> dict:
	"""
	Parse osascript stderr into an error dictionary.

	Args:
		stderr: Text written by osascript.

	Returns:
		Dictionary with at least NSLocalizedDescription.
	"""
	text = stderr.strip()
	if not text:
		return {DESCRIPTION_KEY: "osascript failed without an error message."}
	match = _ERROR_RE.match(text)
	if not match:
		return {DESCRIPTION_KEY: text}
	raw: dict = {DESCRIPTION_KEY: match.group("message").strip() or text}
	if match.group("number") is not None:
		raw[NUMBER_KEY] = int(match.group("number"))
	if match.group("start") is not None:
		raw[RANGE_KEY] = (int(match.group("start")), int(match.group("end")))
	return raw


def _strip_newline(text: str) -> str:
	if text.endswith("\n"):
		return text[:-1]
	return text


#============================================


def run_script(
	source: str,
	language: str = "AppleScript",
	timeout: float | None = None,
) -> ScriptResult:
	"""
	Execute a script through osascript.

	Args:
		source: Script text, fed on stdin.
		language: OSA language name.
		timeout: Optional seconds before subprocess.TimeoutExpired.

	Returns:
		ScriptResult for the run.
	"""
	command = [OSASCRIPT, "-l", language, "-"]
	logger.debug("running %s script:\n%s", language, source)
	try:
		proc = subprocess.run(
			command,
			input=source,
			capture_output=True,
			text=True,
			timeout=timeout,
			check=False,
		)
	except FileNotFoundError:
		return ScriptResult(
			ok=False,
			raw={DESCRIPTION_KEY: "osascript is not available on this system."},
		)
	if proc.returncode != 0:
		raw = parse_error(proc.stderr)
		logger.info("%s script failed: %s", language, raw[DESCRIPTION_KEY])
		return ScriptResult(ok=False, raw=raw)
	return ScriptResult(ok=True, result=_strip_newline(proc.stdout))


def applescript(source: str, *, timeout: float | None = None) -> ScriptResult:
	return run_script(source, "AppleScript", timeout)


def javascript(source: str, *, timeout: float | None = None) -> ScriptResult:
	return run_script(source, "JavaScript", timeout)
