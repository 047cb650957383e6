import io

import pytest

from webfs.utils import logging
from webfs.utils.logging import LogLevel, debug, info, logged, parseLevel, setLevel, warning


@pytest.fixture
def stream(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
	buffer = io.StringIO()
	monkeypatch.setattr(logging, "ERR", buffer)
	previous = logging.LogState.level
	yield buffer
	setLevel(previous)


def test_parse_level():
	assert parseLevel("warning") == LogLevel.Warning
	assert parseLevel(" DEBUG ") == LogLevel.Debug
	assert parseLevel("nonsense") == LogLevel.Info


def test_entries_carry_context(stream: io.StringIO):
	setLevel(LogLevel.Info)
	entry = info("Serving directory", Directory="/srv/www", Port=8000)
	assert entry.level == LogLevel.Info
	assert entry.origin == "webfs"
	assert entry.context == {"Directory": "/srv/www", "Port": 8000}
	assert "Serving directory" in stream.getvalue()
	assert "8000" in stream.getvalue()


def test_level_filtering(stream: io.StringIO):
	setLevel("Warning")
	assert not logged(debug)
	assert not logged(info)
	assert logged(warning)
	info("hidden")
	warning("shown", Path="/favicon.ico")
	output = stream.getvalue()
	assert "hidden" not in output
	assert "shown" in output


# EOF
