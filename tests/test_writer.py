from pathlib import Path

import pytest

from webfs.errors import NotFound, PathTraversal
from webfs.http.model import ContentBytes, ContentFile, ResponseSpec, attachment
from webfs.http.writer import ResponseRecorder, writeError, writeResponse


def test_write_bytes():
	res = ResponseRecorder()
	n = writeResponse(res, ResponseSpec("text/plain", ContentBytes(b"Hello")))
	assert n == 5
	assert res.status == 200
	assert res.header("Content-Type") == "text/plain; charset=utf-8"
	assert res.header("content-length") == "5"
	assert res.header("Content-Disposition") is None
	assert bytes(res.body) == b"Hello"


def test_write_binary_type_has_no_charset():
	res = ResponseRecorder()
	writeResponse(res, ResponseSpec("image/png", ContentBytes(b"\x89PNG")))
	assert res.header("Content-Type") == "image/png"


def test_write_attachment(tmp_path: Path):
	path = tmp_path / "first.zip"
	path.write_bytes(b"PK\x03\x04data")
	res = ResponseRecorder()
	writeResponse(
		res, ResponseSpec("application/zip", ContentFile(path), attachment(path))
	)
	assert res.status == 200
	assert res.header("Content-Disposition") == "attachment;filename=first.zip"
	assert bytes(res.body) == b"PK\x03\x04data"


def test_missing_file_leaves_sink_untouched(tmp_path: Path):
	res = ResponseRecorder()
	with pytest.raises(NotFound):
		writeResponse(res, ResponseSpec("text/plain", ContentFile(tmp_path / "nope")))
	assert res.status is None
	assert res.headers == {}
	assert not res.body


def test_write_error():
	res = ResponseRecorder()
	writeError(res, NotFound("/missing"))
	assert res.status == 404
	assert bytes(res.body) == b"Not Found"
	res = ResponseRecorder()
	writeError(res, PathTraversal("/../etc/passwd"))
	assert res.status == 403
	res = ResponseRecorder()
	writeError(res, 400, "Incomplete request")
	assert res.status == 400
	assert bytes(res.body) == b"Incomplete request"


def test_recorder_serialization():
	res = ResponseRecorder()
	writeResponse(res, ResponseSpec("text/html", ContentBytes(b"<p>hi</p>")))
	data = res.toBytes()
	assert data.startswith(b"HTTP/1.1 200 OK\r\n")
	assert b"Content-Type: text/html; charset=utf-8\r\n" in data
	assert b"Content-Length: 9\r\n" in data
	assert data.endswith(b"\r\n\r\n<p>hi</p>")
	assert res.toBytes(withBody=False).endswith(b"\r\n\r\n")


def test_recorder_rejects_late_headers():
	res = ResponseRecorder()
	res.writeHead(200)
	with pytest.raises(RuntimeError):
		res.setHeader("Content-Type", "text/plain")
	with pytest.raises(RuntimeError):
		res.writeHead(404)


# EOF
