from urllib.parse import parse_qsl

from .model import HTTPRequest, normalizeHeader

EOL: bytes = b"\r\n"
END_OF_HEAD: bytes = b"\r\n\r\n"
MAX_HEAD_SIZE: int = 64_000


class HTTPParseError(ValueError):
	"""The request head is malformed, or too large."""

	def __init__(self, message: str, status: int = 400):
		super().__init__(message)
		self.status: int = status


class HTTPRequestParser:
	"""Incrementally parses the request line and headers of an HTTP request.
	The body, if any, is left in `rest`."""

	__slots__ = ["buffer", "offset", "maxSize", "rest"]

	def __init__(self, maxSize: int = MAX_HEAD_SIZE) -> None:
		self.buffer: bytearray = bytearray()
		self.offset: int = 0
		self.maxSize: int = maxSize
		self.rest: bytes = b""

	def reset(self) -> "HTTPRequestParser":
		self.buffer.clear()
		self.offset = 0
		self.rest = b""
		return self

	def feed(self, chunk: bytes) -> HTTPRequest | None:
		"""Feeds `chunk`, returning the request once its head is complete."""
		self.buffer += chunk
		end = self.buffer.find(END_OF_HEAD, self.offset)
		if end == -1:
			if len(self.buffer) > self.maxSize:
				raise HTTPParseError("Request head is too large", 431)
			# The delimiter may straddle two chunks
			self.offset = max(0, len(self.buffer) - len(END_OF_HEAD) + 1)
			return None
		head = bytes(self.buffer[:end])
		self.rest = bytes(self.buffer[end + len(END_OF_HEAD) :])
		# Some clients send empty lines before the request line
		return self.parseHead(head.lstrip(EOL))

	@staticmethod
	def parseHead(head: bytes) -> HTTPRequest:
		lines = head.decode("latin-1").split("\r\n")
		parts = lines[0].split(" ")
		if len(parts) != 3 or not parts[0] or not parts[1]:
			raise HTTPParseError(f"Malformed request line: {lines[0]!r}")
		method, target, protocol = parts
		if not protocol.startswith("HTTP/"):
			raise HTTPParseError(f"Unsupported protocol: {protocol!r}", 505)
		headers: dict[str, str] = {}
		for line in lines[1:]:
			i = line.find(":")
			if i <= 0:
				raise HTTPParseError(f"Malformed header line: {line!r}")
			headers[normalizeHeader(line[:i].strip())] = line[i + 1 :].strip()
		p = target.split("?", 1)
		return HTTPRequest(
			method=method.upper(),
			path=p[0],
			query=dict(parse_qsl(p[1], keep_blank_values=True)) if len(p) > 1 else {},
			headers=headers,
			protocol=protocol,
		)


# EOF
