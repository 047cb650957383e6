import os.path
from pathlib import Path
from typing import NamedTuple, TypeAlias
from urllib.parse import parse_qsl

from ..utils.files import readAll

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def normalizeHeader(name: str) -> str:
	"""Normalizes the header name as `Kebab-Case`, without caching it."""
	return "-".join(_.capitalize() for _ in name.split("-"))


def headername(name: str, *, headers: dict[str, str] = {}) -> str:
	"""Normalizes the header name as `Kebab-Case`, caching the result. Only
	names that come from code belong here, see `normalizeHeader` for names
	sent by clients."""
	if name in headers:
		return headers[name]
	key: str = name.lower()
	if key in headers:
		return headers[key]
	else:
		normalized: str = normalizeHeader(name)
		headers[key] = normalized
		return normalized


# -----------------------------------------------------------------------------
#
# REQUEST
#
# -----------------------------------------------------------------------------


class HTTPRequest(NamedTuple):
	"""The parts of an HTTP request that handlers get to see."""

	method: str
	path: str
	query: dict[str, str]
	headers: dict[str, str]
	protocol: str = "HTTP/1.1"

	@staticmethod
	def Create(
		path: str,
		method: str = "GET",
		headers: dict[str, str] | None = None,
		protocol: str = "HTTP/1.1",
	) -> "HTTPRequest":
		"""Creates a request from a request target like `/path?a=1`."""
		p = path.split("?", 1)
		return HTTPRequest(
			method=method.upper(),
			path=p[0] or "/",
			query=dict(parse_qsl(p[1], keep_blank_values=True)) if len(p) > 1 else {},
			headers=(
				{headername(k): v for k, v in headers.items()} if headers else {}
			),
			protocol=protocol,
		)

	def header(self, name: str) -> str | None:
		return self.headers.get(headername(name))

	def param(self, name: str, default: str | None = None) -> str | None:
		return self.query.get(name, default)

	def __str__(self) -> str:
		return f"Request({self.method} {self.path})"


# -----------------------------------------------------------------------------
#
# CONTENT
#
# -----------------------------------------------------------------------------


class ContentBytes(NamedTuple):
	"""Content that is already in memory."""

	payload: bytes

	def load(self) -> bytes:
		return self.payload


class ContentFile(NamedTuple):
	"""Content read lazily from the file at `path`."""

	path: Path

	@property
	def name(self) -> str:
		return self.path.name

	def load(self) -> bytes:
		return readAll(self.path)


TContentSource: TypeAlias = ContentBytes | ContentFile


INLINE: str = "inline"


def attachment(filename: str | Path) -> str:
	"""Returns the attachment disposition for the base name of `filename`."""
	return f"attachment;filename={os.path.basename(str(filename))}"


class ResponseSpec(NamedTuple):
	"""What the response writer needs to produce a response."""

	contentType: str
	source: TContentSource
	disposition: str = INLINE

	@property
	def isAttachment(self) -> bool:
		return self.disposition != INLINE


# EOF
