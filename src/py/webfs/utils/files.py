import os
import shutil
import stat
import zipfile
from pathlib import Path
from typing import BinaryIO

from ..errors import (
	ContentUnavailable,
	FileOperationError,
	InvalidArchive,
	NotADirectory,
	NotFound,
	PathTraversal,
)

# --
# # File utilities
#
# Common file and directory operations. OS errors are translated into
# `FSError` subclasses at this boundary.

PATH_SEPARATOR: str = os.sep


def exists(path: str | Path) -> bool:
	"""Tells if the given file or directory exists."""
	return os.path.exists(path)


def homePath() -> str:
	"""Returns the user's home directory."""
	if os.name == "nt":
		return os.environ.get("HOMEDRIVE", "") + os.environ.get("HOMEPATH", "")
	else:
		return os.environ.get("HOME", "")


def parentDir(path: str) -> str:
	"""Returns the parent of `path`, ignoring any trailing separator, so
	that the parent of `/path/to/` is `/path`."""
	return os.path.dirname(path.rstrip(PATH_SEPARATOR) or PATH_SEPARATOR)


def isWithin(root: Path, path: Path) -> bool:
	"""Tells if `path` is `root` or one of its descendants. Both paths are
	expected to be canonical."""
	return path.parts[: len(parts := root.parts)] == parts


# -----------------------------------------------------------------------------
#
# READING
#
# -----------------------------------------------------------------------------


def readAll(path: str | Path) -> bytes:
	"""Reads the whole content of the file at `path`."""
	with openFile(path) as f:
		try:
			return f.read()
		except IsADirectoryError as e:
			raise NotFound(path) from e
		except OSError as e:
			raise ContentUnavailable(path, e.strerror or str(e)) from e


def openFile(path: str | Path) -> BinaryIO:
	"""Opens the file at `path` for binary reading. The caller closes it."""
	try:
		return open(path, "rb")
	except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
		raise NotFound(path) from e
	except OSError as e:
		raise ContentUnavailable(path, e.strerror or str(e)) from e


# -----------------------------------------------------------------------------
#
# WRITING
#
# -----------------------------------------------------------------------------


def removeFile(path: str | Path) -> None:
	"""Removes the file or directory tree at `path`. A missing path is not
	an error."""
	try:
		if os.path.isdir(path) and not os.path.islink(path):
			shutil.rmtree(path)
		else:
			os.remove(path)
	except FileNotFoundError:
		pass
	except OSError as e:
		raise FileOperationError(path, "delete file", e.strerror) from e


def renameDir(oldPath: str | Path, newPath: str | Path) -> None:
	"""Moves `oldPath` to `newPath`, replacing it if it exists."""
	try:
		os.replace(oldPath, newPath)
	except OSError as e:
		raise FileOperationError(oldPath, "rename", e.strerror) from e


def copyFile(source: str | Path, destination: str | Path) -> None:
	"""Copies `source` to `destination`, overwriting it. Permissions are not
	checked nor copied."""
	try:
		reader = open(source, "rb")
	except OSError as e:
		raise FileOperationError(source, "copy file", e.strerror) from e
	with reader:
		try:
			writer = open(destination, "wb")
		except OSError as e:
			raise FileOperationError(destination, "create file", e.strerror) from e
		with writer:
			try:
				shutil.copyfileobj(reader, writer)
				writer.flush()
				os.fsync(writer.fileno())
			except OSError as e:
				raise FileOperationError(destination, "copy file", e.strerror) from e


def copyDir(source: str | Path, dest: str | Path) -> None:
	"""Recursively copies the `source` directory tree to `dest`, keeping
	directory modes. Stops on the first error."""
	try:
		info = os.stat(source)
	except FileNotFoundError as e:
		raise NotFound(source) from e
	except OSError as e:
		raise FileOperationError(source, "copy file", e.strerror) from e
	if not stat.S_ISDIR(info.st_mode):
		raise NotADirectory(source)
	try:
		os.makedirs(dest, exist_ok=True)
		# The umask applies to `makedirs`, not to `chmod`
		os.chmod(dest, stat.S_IMODE(info.st_mode))
	except OSError as e:
		raise FileOperationError(dest, "create directory", e.strerror) from e
	with os.scandir(source) as entries:
		for entry in entries:
			target = os.path.join(dest, entry.name)
			if entry.is_dir():
				copyDir(entry.path, target)
			else:
				copyFile(entry.path, target)


# -----------------------------------------------------------------------------
#
# ARCHIVES
#
# -----------------------------------------------------------------------------


def unzip(archive: str | Path, target: str | Path) -> str:
	"""Extracts the zip `archive` into `target`, creating it if needed and
	keeping the modes recorded in the archive. Returns the path of the first
	directory the archive creates, or `""` when it has none."""
	try:
		reader = zipfile.ZipFile(archive)
	except FileNotFoundError as e:
		raise NotFound(archive) from e
	except zipfile.BadZipFile as e:
		raise InvalidArchive(archive, str(e)) from e
	try:
		os.makedirs(target, 0o755, exist_ok=True)
	except OSError as e:
		raise FileOperationError(target, "create directory", e.strerror) from e
	root = Path(target).resolve()
	created: str = ""
	with reader:
		for item in reader.infolist():
			path = os.path.join(target, item.filename)
			# Entries like `../../x` must not land outside of the target
			if not isWithin(root, Path(path).resolve()):
				raise PathTraversal(item.filename)
			mode = (item.external_attr >> 16) & 0o7777
			directory = path if item.is_dir() else os.path.dirname(path)
			try:
				if directory:
					os.makedirs(directory, (mode if item.is_dir() else 0) or 0o755, exist_ok=True)
			except OSError as e:
				raise FileOperationError(directory, "create directory", e.strerror) from e
			if item.is_dir():
				if not created:
					created = os.path.normpath(path)
				continue
			try:
				with reader.open(item) as src, open(path, "wb") as dst:
					shutil.copyfileobj(src, dst)
			except zipfile.BadZipFile as e:
				raise InvalidArchive(archive, str(e)) from e
			except OSError as e:
				raise FileOperationError(path, "open file", e.strerror) from e
			if mode:
				os.chmod(path, mode)
	return created


# EOF
