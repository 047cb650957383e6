from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, TypeAlias
from urllib.parse import unquote

from mypy_extensions import mypyc_attr

from .errors import FSError, NotFound, PathTraversal
from .http.model import (
	INLINE,
	ContentBytes,
	ContentFile,
	HTTPRequest,
	ResponseSpec,
	attachment,
)
from .http.writer import ResponseSink, writeError, writeResponse
from .utils.files import isWithin
from .utils.logging import logged, warning
from .utils.mime import MimeResolver, resolver

# -----------------------------------------------------------------------------
#
# HANDLERS
#
# -----------------------------------------------------------------------------


@mypyc_attr(allow_interpreted_subclasses=True)
class Handler(ABC):
	"""Processes a request by writing a response to a sink. Handlers are
	configured once and hold no per-request state, so they can serve
	concurrent requests."""

	@abstractmethod
	def serve(self, request: HTTPRequest, sink: ResponseSink) -> None: ...

	def __call__(self, request: HTTPRequest, sink: ResponseSink) -> None:
		self.serve(request, sink)


THandler: TypeAlias = Handler | Callable[[HTTPRequest, ResponseSink], None]


class ContentHandler(Handler):
	"""A handler that resolves each request to a `ResponseSpec`, and
	writes it. Filesystem errors become error responses with the status
	of the error."""

	def __init__(self, mime: MimeResolver | None = None):
		self.mime: MimeResolver = resolver() if mime is None else mime

	@abstractmethod
	def resolve(self, request: HTTPRequest) -> ResponseSpec: ...

	def serve(self, request: HTTPRequest, sink: ResponseSink) -> None:
		try:
			writeResponse(sink, self.resolve(request))
		except FSError as e:
			logged(warning) and warning(
				"Could not serve content",
				Handler=self.__class__.__name__,
				Path=request.path,
				Status=e.status,
				Reason=e.message,
			)
			writeError(sink, e)


class StaticContentHandler(ContentHandler):
	"""Serves the given bytes with the given media type, whatever the
	request."""

	def __init__(self, content: bytes, contentType: str):
		super().__init__()
		self.content: ContentBytes = ContentBytes(content)
		self.contentType: str = contentType

	def resolve(self, request: HTTPRequest) -> ResponseSpec:
		return ResponseSpec(self.contentType, self.content)


class DirHandler(ContentHandler):
	"""Serves the files under `root`, mapping the request path (minus the
	optional `prefix`) to a file path relative to the root."""

	def __init__(
		self, root: str | Path, prefix: str = "", mime: MimeResolver | None = None
	):
		super().__init__(mime)
		self.root: Path = Path(root).resolve()
		self.prefix: str = prefix.rstrip("/")

	def resolvePath(self, path: str) -> tuple[Path, Path]:
		"""Returns the file for the request `path` as joined to the root,
		along with the file it resolves to. Raises `PathTraversal` when it
		would be outside of the root and `NotFound` when it's not a file."""
		if self.prefix:
			if path != self.prefix and not path.startswith(self.prefix + "/"):
				raise NotFound(path)
			path = path[len(self.prefix) :]
		relative: str = unquote(path).lstrip("/\\")
		# Paths like `dir/`, `file.html/.` or `a/..` name a directory
		if relative.replace("\\", "/").rsplit("/", 1)[-1] in ("", ".", ".."):
			raise NotFound(path)
		requested: Path = self.root.joinpath(relative)
		try:
			# Symlinks are followed, so links pointing outside are rejected too
			local: Path = requested.resolve()
		except (OSError, ValueError) as e:
			raise NotFound(path) from e
		if not isWithin(self.root, local):
			raise PathTraversal(path)
		elif not local.is_file():
			raise NotFound(path)
		else:
			return requested, local

	def resolve(self, request: HTTPRequest) -> ResponseSpec:
		requested, local = self.resolvePath(request.path)
		# The type comes from the file's name within the root, not from a
		# symlink's target
		return ResponseSpec(self.mime.resolve(requested.name), ContentFile(local))


class StaticFileHandler(ContentHandler):
	"""Serves the file at `path`, whatever the request path. The file is
	read on each request."""

	def __init__(
		self,
		path: str | Path,
		*,
		download: bool = False,
		mime: MimeResolver | None = None,
	):
		super().__init__(mime)
		self.path: Path = Path(path).absolute()
		self.contentType: str = self.mime.resolve(self.path.name)
		self.disposition: str = attachment(self.path) if download else INLINE

	def resolve(self, request: HTTPRequest) -> ResponseSpec:
		return ResponseSpec(self.contentType, ContentFile(self.path), self.disposition)


class FaviconHandler(StaticFileHandler):
	"""Serves an icon file inline, typically mounted on `/favicon.ico`."""

	def __init__(self, path: str | Path, mime: MimeResolver | None = None):
		super().__init__(path, mime=mime)


class SendStaticFileHandler(StaticFileHandler):
	"""Sends a file as a download, named after its base name."""

	def __init__(self, path: str | Path, mime: MimeResolver | None = None):
		super().__init__(path, download=True, mime=mime)


# -----------------------------------------------------------------------------
#
# MUX
#
# -----------------------------------------------------------------------------


class Mux(Handler):
	"""Dispatches requests to handlers mounted on paths. A path ending with
	`/` matches everything below it, other paths match exactly. The longest
	match wins."""

	def __init__(self, handlers: dict[str, THandler] | None = None):
		self.handlers: dict[str, THandler] = {}
		for path, handler in (handlers or {}).items():
			self.mount(path, handler)

	def mount(self, path: str, handler: THandler) -> "Mux":
		if not path.startswith("/"):
			raise ValueError(f"Mount path must start with '/', got: {path!r}")
		self.handlers[path] = handler
		return self

	def match(self, path: str) -> THandler | None:
		if (handler := self.handlers.get(path)) is not None:
			return handler
		best: str | None = None
		for prefix in self.handlers:
			if (
				prefix.endswith("/")
				and path.startswith(prefix)
				and (best is None or len(prefix) > len(best))
			):
				best = prefix
		return None if best is None else self.handlers[best]

	def serve(self, request: HTTPRequest, sink: ResponseSink) -> None:
		handler = self.match(request.path)
		if handler is None:
			writeError(sink, NotFound(request.path))
		else:
			handler(request, sink)


# EOF
