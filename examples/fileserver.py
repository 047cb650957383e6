"""
Static File Server Example

Serves a directory, an icon and a downloadable file.

Usage:
    python fileserver.py [DIRECTORY]

Test with:
    http://localhost:8000/files/README.md   # Inline, with its media type
    http://localhost:8000/favicon.ico       # The icon, whatever is asked
    http://localhost:8000/download          # README.md as an attachment
"""

import sys
from pathlib import Path

from webfs import DirHandler, FaviconHandler, Mux, SendStaticFileHandler, run
from webfs.utils.logging import info

if __name__ == "__main__":
	root = Path(sys.argv[1] if len(sys.argv) > 1 else ".").absolute()
	mux = Mux().mount("/files/", DirHandler(root, prefix="/files"))
	if (icon := root / "favicon.ico").exists():
		mux.mount("/favicon.ico", FaviconHandler(icon))
	mux.mount("/download", SendStaticFileHandler(root / "README.md"))
	info("Starting static file server", Root=str(root))
	run(mux)

# EOF
