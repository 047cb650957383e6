import mimetypes
import os
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from mypy_extensions import mypyc_attr

# --
# # MIME types
#
# Resolves the media type of a file name in layers: the host's registry
# first, then a small built-in table for the types that hosts commonly
# lack, then `application/octet-stream`.

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# Keyed by lowercase extension.
FALLBACK_TYPES: Mapping[str, str] = MappingProxyType(
	{
		".json": "application/json",
		".js": "application/javascript",
		".zip": "application/zip",
		".3gp": "video/3gpp",
		".7z": "application/x-7z-compressed",
		".ace": "application/x-ace-compressed",
		".aac": "audio/x-aac",
		".ico": "image/x-icon",
		".png": "image/png",
		".gz": "application/x-gzip",
		".bz2": "application/x-bzip",
	}
)

# Host registries sometimes report JavaScript sources as plain text.
PLAIN_TEXT_TYPES: frozenset[str] = frozenset(
	("text/plain", "text/plain; charset=utf-8")
)


def extension(filename: str | Path) -> str:
	"""Returns the extension of the base name of `filename`, starting at
	(and including) its last dot, or `""` when there is none."""
	name = os.path.basename(str(filename))
	i = name.rfind(".")
	return name[i:] if i >= 0 else ""


# -----------------------------------------------------------------------------
#
# REGISTRIES
#
# -----------------------------------------------------------------------------


@mypyc_attr(allow_interpreted_subclasses=True)
class MimeRegistry(ABC):
	"""The host's mapping of extensions (with leading dot) to media types."""

	@abstractmethod
	def lookup(self, extension: str) -> str | None: ...


class StaticMimeRegistry(MimeRegistry):
	"""A registry backed by a fixed mapping, matched exactly."""

	def __init__(self, types: Mapping[str, str] | None = None):
		self.types: Mapping[str, str] = MappingProxyType(dict(types or {}))

	def lookup(self, extension: str) -> str | None:
		return self.types.get(extension)


class SystemMimeRegistry(MimeRegistry):
	"""A registry backed by `mimetypes`, augmented with the host's
	`mime.types` files. Extensions are looked up as given, then
	lowercased."""

	def __init__(self, files: list[str] | None = None):
		self.db = mimetypes.MimeTypes()
		for path in mimetypes.knownfiles if files is None else files:
			if os.path.isfile(path):
				try:
					self.db.read(path)
				except (OSError, UnicodeDecodeError):
					# An unreadable system table is not fatal, the
					# defaults remain.
					continue

	def lookup(self, extension: str) -> str | None:
		if not extension:
			return None
		for strict in (True, False):
			table = self.db.types_map[strict]
			if res := table.get(extension) or table.get(extension.lower()):
				return res
		return None


# -----------------------------------------------------------------------------
#
# RESOLVER
#
# -----------------------------------------------------------------------------


class MimeResolver:
	"""Resolves media types from file names using a `MimeRegistry` and
	the `FALLBACK_TYPES` table. Resolution never fails."""

	def __init__(self, registry: MimeRegistry | None = None):
		self.registry: MimeRegistry = (
			SystemMimeRegistry() if registry is None else registry
		)

	def resolve(self, filename: str | Path) -> str:
		ext = extension(filename)
		lext = ext.lower()
		res = self.registry.lookup(ext) if ext else None
		if not res:
			return FALLBACK_TYPES.get(lext, DEFAULT_CONTENT_TYPE)
		elif res in PLAIN_TEXT_TYPES and lext == ".js":
			return "application/javascript"
		else:
			return res


RESOLVER: MimeResolver | None = None


def resolver() -> MimeResolver:
	"""Returns the shared resolver backed by the system registry."""
	global RESOLVER
	if RESOLVER is None:
		RESOLVER = MimeResolver()
	return RESOLVER


def contentType(filename: str | Path, registry: MimeRegistry | None = None) -> str:
	"""Guesses the media type of the given file name."""
	return (
		resolver() if registry is None else MimeResolver(registry)
	).resolve(filename)


TEXT_TYPES: frozenset[str] = frozenset(
	(
		"application/json",
		"application/javascript",
		"application/xml",
		"image/svg+xml",
	)
)


def isTextual(mediaType: str) -> bool:
	"""Tells if the media type denotes text, and should carry a charset."""
	base = mediaType.split(";", 1)[0].strip().lower()
	return (
		base.startswith("text/")
		or base in TEXT_TYPES
		or base.endswith("+json")
		or base.endswith("+xml")
	)


def withCharset(mediaType: str, charset: str = "utf-8") -> str:
	"""Appends `; charset=…` to textual media types that don't have one."""
	if "charset=" in mediaType.lower() or not isTextual(mediaType):
		return mediaType
	else:
		return f"{mediaType}; charset={charset}"


# EOF
