from webfs.utils.mime import (
	DEFAULT_CONTENT_TYPE,
	FALLBACK_TYPES,
	MimeResolver,
	StaticMimeRegistry,
	SystemMimeRegistry,
	contentType,
	extension,
	withCharset,
)

EMPTY = MimeResolver(StaticMimeRegistry())


def test_extension():
	assert extension("file.zip") == ".zip"
	assert extension("archive.tar.gz") == ".gz"
	assert extension("Makefile") == ""
	assert extension("a/b.d/file") == ""
	assert extension("a/b.d/file.TXT") == ".TXT"
	assert extension(".bashrc") == ".bashrc"


def test_fallback_table_on_registry_miss():
	for ext, expected in FALLBACK_TYPES.items():
		assert EMPTY.resolve(f"file{ext}") == expected
	assert EMPTY.resolve("file.zip") == "application/zip"
	assert EMPTY.resolve("favicon.ico") == "image/x-icon"


def test_unknown_and_missing_extensions():
	assert EMPTY.resolve("file.xyzabc") == DEFAULT_CONTENT_TYPE
	assert EMPTY.resolve("Makefile") == "application/octet-stream"
	assert EMPTY.resolve("trailing.") == "application/octet-stream"


def test_multiple_dots_use_last_extension():
	assert EMPTY.resolve("backup.json.zip") == "application/zip"
	assert EMPTY.resolve("data.zip.json") == "application/json"


def test_fallback_is_case_insensitive():
	assert EMPTY.resolve("IMAGE.PNG") == "image/png"
	assert EMPTY.resolve("Script.Js") == "application/javascript"


def test_registry_takes_precedence():
	resolver = MimeResolver(
		StaticMimeRegistry({".ico": "image/vnd.microsoft.icon", ".md": "text/markdown"})
	)
	assert resolver.resolve("favicon.ico") == "image/vnd.microsoft.icon"
	assert resolver.resolve("README.md") == "text/markdown"
	# Static registries match exactly, the fallback still applies
	assert resolver.resolve("FAVICON.ICO") == "image/x-icon"


def test_javascript_reported_as_plain_text_is_corrected():
	for reported in ("text/plain", "text/plain; charset=utf-8"):
		resolver = MimeResolver(StaticMimeRegistry({".js": reported}))
		assert resolver.resolve("app.js") == "application/javascript"
		assert resolver.resolve("lib/vendor.min.js") == "application/javascript"


def test_plain_text_is_kept_for_other_extensions():
	resolver = MimeResolver(
		StaticMimeRegistry({".txt": "text/plain", ".js": "text/javascript"})
	)
	assert resolver.resolve("notes.txt") == "text/plain"
	# Only plain text is corrected
	assert resolver.resolve("app.js") == "text/javascript"


def test_resolution_is_idempotent():
	resolver = MimeResolver(StaticMimeRegistry({".html": "text/html"}))
	names = ["index.html", "app.js", "file.xyzabc", "photo.png", "noext"]
	first = [resolver.resolve(_) for _ in names]
	for _ in range(3):
		assert [resolver.resolve(_) for _ in names] == first
	assert contentType("file.zip") == contentType("file.zip")


def test_content_type_with_registry():
	registry = StaticMimeRegistry({".go": "text/x-go"})
	assert contentType("fs.go", registry) == "text/x-go"
	assert contentType("fs.7z", registry) == "application/x-7z-compressed"


def test_system_registry():
	registry = SystemMimeRegistry(files=[])
	assert registry.lookup(".html") == "text/html"
	assert registry.lookup(".HTML") == "text/html"
	assert registry.lookup("") is None
	assert registry.lookup(".xyzabc") is None
	assert MimeResolver(registry).resolve("index.html") == "text/html"


def test_system_registry_reads_host_tables(tmp_path):
	table = tmp_path / "mime.types"
	table.write_text("application/x-webfs-test\twfst\n")
	registry = SystemMimeRegistry(files=[str(table), str(tmp_path / "missing.types")])
	assert registry.lookup(".wfst") == "application/x-webfs-test"


def test_with_charset():
	assert withCharset("text/html") == "text/html; charset=utf-8"
	assert withCharset("application/json") == "application/json; charset=utf-8"
	assert withCharset("application/javascript") == "application/javascript; charset=utf-8"
	assert withCharset("application/ld+json") == "application/ld+json; charset=utf-8"
	assert withCharset("image/png") == "image/png"
	assert withCharset("application/zip") == "application/zip"
	assert withCharset("text/plain; charset=latin-1") == "text/plain; charset=latin-1"


# EOF
