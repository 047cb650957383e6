import zipfile
from pathlib import Path

import pytest

from webfs.__main__ import main


def test_type(capsys: pytest.CaptureFixture[str]):
	assert main(["type", "archive.7z", "blob.xyzabc"]) == 0
	out = capsys.readouterr().out
	assert "archive.7z\tapplication/x-7z-compressed" in out
	assert "blob.xyzabc\tapplication/octet-stream" in out


def test_copy(tmp_path: Path):
	(tmp_path / "src" / "sub").mkdir(parents=True)
	(tmp_path / "src" / "sub" / "f.txt").write_text("copied")
	assert main(["copy", str(tmp_path / "src"), str(tmp_path / "dst")]) == 0
	assert (tmp_path / "dst" / "sub" / "f.txt").read_text() == "copied"


def test_copy_not_a_directory(tmp_path: Path):
	(tmp_path / "f.txt").write_text("file")
	assert main(["copy", str(tmp_path / "f.txt"), str(tmp_path / "dst")]) == 1


def test_unzip(tmp_path: Path):
	archive = tmp_path / "bundle.zip"
	with zipfile.ZipFile(archive, "w") as z:
		z.writestr("bundle/index.html", "<h1>Hi</h1>")
	assert main(["unzip", str(archive), str(tmp_path / "out")]) == 0
	assert (tmp_path / "out" / "bundle" / "index.html").read_text() == "<h1>Hi</h1>"


def test_requires_command():
	with pytest.raises(SystemExit):
		main([])


# EOF
