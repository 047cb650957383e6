from abc import ABC, abstractmethod

from mypy_extensions import mypyc_attr

from ..config import DEFAULT_ENCODING
from ..errors import FSError
from ..utils.mime import withCharset
from .model import ResponseSpec, headername
from .status import HTTP_STATUS

# -----------------------------------------------------------------------------
#
# SINKS
#
# -----------------------------------------------------------------------------


@mypyc_attr(allow_interpreted_subclasses=True)
class ResponseSink(ABC):
	"""Where a handler writes its response: headers first, then the status
	line, then the body."""

	@abstractmethod
	def setHeader(self, name: str, value: str) -> None: ...

	@abstractmethod
	def writeHead(self, status: int) -> None: ...

	@abstractmethod
	def write(self, data: bytes) -> None: ...


class ResponseRecorder(ResponseSink):
	"""Records a response in memory, and can serialize it as HTTP/1.1."""

	__slots__ = ["status", "headers", "body", "protocol"]

	def __init__(self, protocol: str = "HTTP/1.1") -> None:
		self.protocol: str = protocol
		self.status: int | None = None
		self.headers: dict[str, str] = {}
		self.body: bytearray = bytearray()

	def setHeader(self, name: str, value: str) -> None:
		if self.status is not None:
			raise RuntimeError(f"Headers already sent, can't set: {name}")
		self.headers[headername(name)] = value

	def header(self, name: str) -> str | None:
		return self.headers.get(headername(name))

	def writeHead(self, status: int) -> None:
		if self.status is not None:
			raise RuntimeError(
				f"Status already sent ({self.status}), can't send: {status}"
			)
		self.status = status

	def write(self, data: bytes) -> None:
		if self.status is None:
			self.writeHead(200)
		self.body += data

	def head(self) -> bytes:
		"""Serializes the status line and headers."""
		status: int = 200 if self.status is None else self.status
		lines: list[str] = [
			f"{self.protocol} {status} {HTTP_STATUS.get(status, 'Unknown')}"
		]
		lines += [f"{headername(k)}: {v}" for k, v in self.headers.items()]
		lines.append("")
		lines.append("")
		# NOTE: Header values like `Content-Disposition` filenames are sent
		# as UTF-8, undecodable file names as their original bytes.
		return "\r\n".join(lines).encode("utf-8", errors="surrogateescape")

	def toBytes(self, withBody: bool = True) -> bytes:
		return self.head() + bytes(self.body) if withBody else self.head()

	def __str__(self) -> str:
		return f"Response({self.status} {self.headers} {len(self.body)}b)"


# -----------------------------------------------------------------------------
#
# WRITER
#
# -----------------------------------------------------------------------------


def writeResponse(sink: ResponseSink, spec: ResponseSpec) -> int:
	"""Writes the complete 200 response described by `spec` to `sink`,
	returning the number of body bytes written. The payload is loaded before
	anything is written, so a `NotFound` or `ContentUnavailable` leaves the
	sink untouched."""
	payload: bytes = spec.source.load()
	sink.setHeader("Content-Type", withCharset(spec.contentType))
	sink.setHeader("Content-Length", str(len(payload)))
	if spec.isAttachment:
		sink.setHeader("Content-Disposition", spec.disposition)
	sink.writeHead(200)
	sink.write(payload)
	return len(payload)


def writeError(sink: ResponseSink, error: FSError | int, message: str | None = None) -> None:
	"""Writes a plain text error response, either for an `FSError` (using
	its status) or for a bare status code."""
	status: int = error if isinstance(error, int) else error.status
	text: str = message or HTTP_STATUS.get(status, "Server Error")
	payload: bytes = text.encode(DEFAULT_ENCODING)
	sink.setHeader("Content-Type", withCharset("text/plain"))
	sink.setHeader("Content-Length", str(len(payload)))
	sink.writeHead(status)
	sink.write(payload)


# EOF
