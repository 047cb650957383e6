import asyncio
import socket
import threading
from dataclasses import dataclass
from signal import SIGINT, SIGTERM
from typing import Any, Callable, NamedTuple

from .config import HOST, LOG_REQUESTS, PORT
from .handlers import THandler
from .http.model import HTTPRequest
from .http.parser import HTTPParseError, HTTPRequestParser
from .http.writer import ResponseRecorder, writeError
from .utils.logging import debug, error, event, exception, info, logged, warning


@dataclass(slots=True)
class ServerState:
	isRunning: bool = True

	def stop(self) -> None:
		info("Server stopping…")
		self.isRunning = False

	def onException(
		self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
	) -> None:
		e = context.get("exception")
		if e:
			exception(e)


class ServerOptions(NamedTuple):
	host: str = "0.0.0.0"  # nosec: B104
	port: int = 8000
	backlog: int = 1_000
	# Time given to a client to send a complete request head
	timeout: float = 10.0
	# Polling timeout for accepting new connections
	polling: float = 1.0
	readsize: int = 4_096
	logRequests: bool = True
	condition: Callable[[], bool] | None = None
	stopSignals: bool = True


OPTIONS: ServerOptions = ServerOptions()


def process(handler: THandler, data: bytes) -> bytes:
	"""Processes the raw request `data` with the given handler, returning
	the raw response. Malformed requests get an error response."""
	parser = HTTPRequestParser()
	recorder = ResponseRecorder()
	try:
		request = parser.feed(data)
	except HTTPParseError as e:
		warning("Malformed request", Reason=str(e), Status=e.status)
		writeError(recorder, e.status)
		return recorder.toBytes()
	if request is None:
		writeError(recorder, 400, "Incomplete request")
		return recorder.toBytes()
	return respond(handler, request, recorder)


def respond(
	handler: THandler, request: HTTPRequest, recorder: ResponseRecorder | None = None
) -> bytes:
	"""Runs `handler` for the request and serializes what it recorded."""
	res = ResponseRecorder(request.protocol) if recorder is None else recorder
	try:
		handler(request, res)
	except Exception as e:
		exception(e, f"Handler failed for {request.method} {request.path}")
		# The handler may have written part of the response already
		res = ResponseRecorder(request.protocol)
		writeError(res, 500)
	if res.status is None:
		warning("Handler did not write a response", Path=request.path)
		writeError(res, 500)
	res.headers["Connection"] = "close"
	return res.toBytes(withBody=request.method != "HEAD")


class AIOSocketServer:
	"""AsyncIO server using sockets directly, one request per connection."""

	@classmethod
	async def OnRequest(
		cls,
		handler: THandler,
		client: socket.socket,
		*,
		loop: asyncio.AbstractEventLoop,
		options: ServerOptions,
	) -> None:
		parser = HTTPRequestParser()
		request: HTTPRequest | None = None
		try:
			while request is None:
				try:
					chunk = await asyncio.wait_for(
						loop.sock_recv(client, options.readsize),
						timeout=options.timeout,
					)
				except asyncio.TimeoutError:
					warning("Client timed out", Client=f"{id(client):x}")
					return
				if not chunk:
					logged(debug) and debug(
						"Client closed before sending a request",
						Client=f"{id(client):x}",
					)
					return
				try:
					request = parser.feed(chunk)
				except HTTPParseError as e:
					warning("Malformed request", Reason=str(e), Status=e.status)
					recorder = ResponseRecorder()
					writeError(recorder, e.status)
					await loop.sock_sendall(client, recorder.toBytes())
					return
			if options.logRequests:
				event(request.method, request.path)
			# Handlers are synchronous, and only block on file reads
			await loop.sock_sendall(client, respond(handler, request))
		except (BrokenPipeError, ConnectionResetError):
			# Client did an early close
			pass
		except Exception as e:
			exception(e)
		finally:
			client.close()

	@classmethod
	async def Serve(
		cls,
		handler: THandler,
		options: ServerOptions = OPTIONS,
	) -> None:
		"""Main server coroutine."""
		server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
		server.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
		try:
			server.bind((options.host, options.port))
		except OSError as e:
			error(
				f"Unable to bind to {options.host}:{options.port}, aborting.",
				"HOSTPORTERR",
			)
			server.close()
			raise e from e
		server.listen(options.backlog)
		server.setblocking(False)

		tasks: set[asyncio.Task[None]] = set()
		loop = asyncio.get_running_loop()
		state = ServerState()
		# Signal handlers can only be set from the main thread
		if (
			options.stopSignals
			and threading.current_thread() is threading.main_thread()
		):
			loop.add_signal_handler(SIGINT, state.stop)
			loop.add_signal_handler(SIGTERM, state.stop)
		loop.set_exception_handler(state.onException)

		info(
			"webfs server listening",
			Host=options.host,
			Port=server.getsockname()[1],
		)
		try:
			while state.isRunning:
				if options.condition and not options.condition():
					break
				try:
					client, _ = await asyncio.wait_for(
						loop.sock_accept(server), timeout=options.polling or 1.0
					)
				except asyncio.TimeoutError:
					continue
				except OSError as e:
					# This can be: [OSError] [Errno 24] Too many open files
					if e.errno == 24:
						await asyncio.sleep(0.1)
					else:
						exception(e)
					continue
				task = loop.create_task(
					cls.OnRequest(handler, client, loop=loop, options=options)
				)
				tasks.add(task)
				task.add_done_callback(tasks.discard)
		finally:
			server.close()
			for task in tasks:
				task.cancel()
			await asyncio.gather(*tasks, return_exceptions=True)


def run(
	handler: THandler,
	*,
	host: str = HOST,
	port: int = PORT,
	backlog: int = OPTIONS.backlog,
	timeout: float = OPTIONS.timeout,
	condition: Callable[[], bool] | None = None,
	logRequests: bool = LOG_REQUESTS,
) -> None:
	"""Serves `handler` over HTTP until interrupted."""
	options = ServerOptions(
		host=host,
		port=port,
		backlog=backlog,
		timeout=timeout,
		condition=condition,
		logRequests=logRequests,
	)
	try:
		asyncio.run(AIOSocketServer.Serve(handler, options))
	except KeyboardInterrupt:
		event("ManualShutdown")
	event("EOK")


# EOF
