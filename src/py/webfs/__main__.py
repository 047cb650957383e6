import argparse
import sys

from .config import HOST, PORT, VERSION
from .errors import FSError
from .handlers import DirHandler, FaviconHandler, Mux, SendStaticFileHandler
from .server import run
from .utils.files import copyDir, unzip
from .utils.logging import error, info
from .utils.mime import contentType


def serve(options: argparse.Namespace) -> int:
	mux = Mux()
	prefix: str = options.prefix if options.prefix.endswith("/") else f"{options.prefix}/"
	mux.mount(prefix, DirHandler(options.directory, prefix=prefix.rstrip("/")))
	if options.favicon:
		mux.mount("/favicon.ico", FaviconHandler(options.favicon))
	for item in options.downloads or ():
		path, sep, file = item.partition("=")
		if not sep or not path.startswith("/"):
			raise ValueError(f"Expected /URL=FILE, got: {item!r}")
		mux.mount(path, SendStaticFileHandler(file))
	info("Serving directory", Directory=options.directory, Prefix=prefix)
	run(mux, host=options.host, port=options.port)
	return 0


def types(options: argparse.Namespace) -> int:
	for name in options.files:
		sys.stdout.write(f"{name}\t{contentType(name)}\n")
	return 0


def copy(options: argparse.Namespace) -> int:
	copyDir(options.source, options.dest)
	info("Copied directory", Source=options.source, Destination=options.dest)
	return 0


def extract(options: argparse.Namespace) -> int:
	created = unzip(options.archive, options.target)
	info("Extracted archive", Archive=options.archive, Created=created or None)
	return 0


def main(args: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(
		prog="webfs",
		description="Serves, copies and extracts file trees",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,
	)
	parser.add_argument("--version", action="version", version=VERSION)
	commands = parser.add_subparsers(dest="command", required=True)

	p = commands.add_parser("serve", help="Serves a directory over HTTP")
	p.add_argument("directory", nargs="?", default=".", help="Root directory")
	p.add_argument("-p", "--port", type=int, default=PORT, help="Specifies the port")
	p.add_argument("-H", "--host", default=HOST, help="Specifies the host")
	p.add_argument("--prefix", default="/", help="URL prefix of the directory")
	p.add_argument("--favicon", help="Icon file served on /favicon.ico")
	p.add_argument(
		"-d",
		"--download",
		action="append",
		dest="downloads",
		metavar="/URL=FILE",
		help="Serves FILE as an attachment on /URL (can be repeated)",
	)
	p.set_defaults(run=serve)

	p = commands.add_parser("type", help="Prints the media type of files")
	p.add_argument("files", nargs="+", metavar="FILE")
	p.set_defaults(run=types)

	p = commands.add_parser("copy", help="Recursively copies a directory")
	p.add_argument("source")
	p.add_argument("dest")
	p.set_defaults(run=copy)

	p = commands.add_parser("unzip", help="Extracts a zip archive")
	p.add_argument("archive")
	p.add_argument("target")
	p.set_defaults(run=extract)

	options = parser.parse_args(args=args)
	try:
		return int(options.run(options))
	except FSError as e:
		error(str(e), e.__class__.__name__)
		return 1
	except ValueError as e:
		parser.error(str(e))
		return 2


if __name__ == "__main__":
	sys.exit(main())

# EOF
