from pathlib import Path
from typing import ClassVar

# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------
# --
# Errors are raised to the immediate caller. Only the HTTP-facing handlers
# turn them into a status code, which is why each kind carries the status it
# maps to, and not the other way around.


class FSError(Exception):
	"""Base class for the filesystem errors raised by webfs."""

	STATUS: ClassVar[int] = 500
	REASON: ClassVar[str] = "filesystem error"

	def __init__(self, path: str | Path | None, message: str | None = None):
		self.path: str | None = None if path is None else str(path)
		self.message: str = message or self.REASON
		super().__init__(
			f"{self.path}: {self.message}" if self.path else self.message
		)

	@property
	def status(self) -> int:
		return self.STATUS


class NotFound(FSError):
	"""The target file or path does not exist (or is not a regular file)."""

	STATUS = 404
	REASON = "not found"


class ContentUnavailable(FSError):
	"""The target exists but can't be read (permissions, I/O fault)."""

	STATUS = 500
	REASON = "content unavailable"


class PathTraversal(FSError):
	"""The resolved path escapes the configured root."""

	STATUS = 403
	REASON = "path escapes root directory"


class NotADirectory(FSError):
	STATUS = 500
	REASON = "source is not a directory"


class InvalidArchive(FSError):
	STATUS = 500
	REASON = "invalid archive"


class FileOperationError(FSError):
	"""Wraps an OS error raised while performing the given `operation`,
	like `copy file` or `create directory`."""

	def __init__(
		self, path: str | Path | None, operation: str, message: str | None = None
	):
		self.operation: str = operation
		super().__init__(path, f"{operation}: {message}" if message else operation)


# EOF
