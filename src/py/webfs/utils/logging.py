import os
import sys
import time
from contextvars import ContextVar
from enum import Enum
from typing import Any, Callable, ClassVar, NamedTuple

from ..config import LOG_LEVEL

# --
# # Logging
#
# Structured, human-readable logging to stderr. Each entry has an origin,
# a level, a message and a keyword context rendered as `Key=value` pairs.

ERR = sys.stderr

LogOrigin: ContextVar[str] = ContextVar("LogOrigin", default="webfs")

# SEE: https://no-color.org/
NO_COLOR: bool = "NO_COLOR" in os.environ
FORCE_COLOR: bool = "FORCE_COLOR" in os.environ
COLOR: bool = FORCE_COLOR or (not NO_COLOR and ERR.isatty())


class Term:
	BOLD: ClassVar[str] = "\033[1m" if COLOR else ""
	RESET: ClassVar[str] = "\033[0m" if COLOR else ""

	@staticmethod
	def Color(color: int) -> str:
		return f"\033[0;38;5;{color}m" if COLOR else ""


class LogType(Enum):
	Message = 0
	Event = 20


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30
	Error = 40
	Exception = 50


LOG_LEVEL_COLOR: dict[LogLevel, int] = {
	LogLevel.Debug: 31,
	LogLevel.Info: 75,
	LogLevel.Warning: 202,
	LogLevel.Error: 160,
	LogLevel.Exception: 124,
}

TContext = str | int | float | bool | None


class LogEntry(NamedTuple):
	origin: str
	time: float
	type: LogType = LogType.Message
	level: LogLevel = LogLevel.Info
	message: str | None = None
	name: str | None = None
	value: Any = None
	context: dict[str, TContext] | None = None


def parseLevel(name: str, default: LogLevel = LogLevel.Info) -> LogLevel:
	"""Returns the `LogLevel` matching `name` (case insensitive)."""
	for level in LogLevel:
		if level.name.lower() == name.strip().lower():
			return level
	return default


class LogState:
	level: ClassVar[LogLevel] = parseLevel(LOG_LEVEL)


def setLevel(level: LogLevel | str) -> LogLevel:
	LogState.level = parseLevel(level) if isinstance(level, str) else level
	return LogState.level


def formatData(value: Any) -> str:
	if value is None or value == () or value == [] or value == {}:
		return "◌"
	elif isinstance(value, dict):
		return " ".join(
			f"{Term.BOLD}{k}{Term.RESET}={formatData(v)}" for k, v in value.items()
		)
	elif isinstance(value, (list, tuple)):
		return ",".join(formatData(v) for v in value)
	elif isinstance(value, str):
		return repr(value) if " " in value else value
	elif isinstance(value, bool):
		return "✓" if value else "✗"
	elif isinstance(value, float):
		return f"{value:0.2f}"
	else:
		return str(value)


def send(entry: LogEntry) -> LogEntry:
	if entry.level.value < LogState.level.value:
		return entry
	clr: str = Term.Color(LOG_LEVEL_COLOR[entry.level])
	if entry.type == LogType.Event:
		ERR.write(
			f"{clr}{Term.BOLD}[{entry.origin}] {entry.name}{Term.RESET} {formatData(entry.value)} {formatData(entry.context)}{Term.RESET}\n"
		)
	else:
		ERR.write(
			f"{clr}{Term.BOLD}[{entry.origin}]{Term.RESET} {entry.message} {formatData(entry.context)}{Term.RESET}\n"
		)
	ERR.flush()
	return entry


def entry(
	*,
	origin: str | None = None,
	type: LogType = LogType.Message,
	level: LogLevel = LogLevel.Info,
	message: str | None = None,
	name: str | None = None,
	value: Any = None,
	context: dict[str, TContext],
) -> LogEntry:
	return LogEntry(
		origin=origin or LogOrigin.get(),
		time=time.time(),
		type=type,
		level=level,
		message=message,
		name=name,
		value=value,
		context=context,
	)


def debug(message: str, *, origin: str | None = None, **context: TContext) -> LogEntry:
	return send(
		entry(message=message, level=LogLevel.Debug, origin=origin, context=context)
	)


def info(message: str, *, origin: str | None = None, **context: TContext) -> LogEntry:
	return send(entry(message=message, origin=origin, context=context))


def warning(
	message: str, *, origin: str | None = None, **context: TContext
) -> LogEntry:
	return send(
		entry(message=message, level=LogLevel.Warning, origin=origin, context=context)
	)


def error(
	message: str,
	code: int | str | None,
	*,
	origin: str | None = None,
	**context: TContext,
) -> LogEntry:
	return send(
		entry(
			message=message,
			value=code,
			level=LogLevel.Error,
			origin=origin,
			context=context,
		)
	)


def event(
	event: str,
	value: Any = None,
	*,
	origin: str | None = None,
	**context: TContext,
) -> LogEntry:
	return send(
		entry(
			name=event, value=value, type=LogType.Event, origin=origin, context=context
		)
	)


def exception(exception: BaseException, message: str | None = None) -> BaseException:
	try:
		stream = ERR
		stream.write(
			f"!!! EXCP {f'{message}: [{exception.__class__.__name__}] {exception}' if message else f'[{exception.__class__.__name__}] {exception}'}\n"
		)
		tb = exception.__traceback__
		while tb:
			code = tb.tb_frame.f_code
			stream.write(
				f"... in {code.co_name:15s} at {tb.tb_lineno:4d} in {code.co_filename}\n",
			)
			tb = tb.tb_next
		stream.flush()
	except Exception:  # nosec: B110
		# This is called from exception handlers, so it must never raise.
		pass
	# So that it can be used as `raise exception(e)`
	return exception


LOGGED_LEVELS: dict[Callable[..., Any], LogLevel] = {
	debug: LogLevel.Debug,
	info: LogLevel.Info,
	event: LogLevel.Info,
	warning: LogLevel.Warning,
	error: LogLevel.Error,
}


def logged(item: Callable[..., Any]) -> bool:
	"""Takes one of the logging functions, and tells if it would currently
	output anything. Use as `logged(debug) and debug(…)` to skip building
	expensive entries."""
	return LOGGED_LEVELS.get(item, LogLevel.Info).value >= LogState.level.value


# EOF
