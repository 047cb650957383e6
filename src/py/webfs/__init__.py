from .config import VERSION  # NOQA: F401
from .errors import (  # NOQA: F401
	FSError,
	NotFound,
	ContentUnavailable,
	PathTraversal,
	NotADirectory,
	InvalidArchive,
	FileOperationError,
)
from .utils.mime import (  # NOQA: F401
	contentType,
	MimeResolver,
	MimeRegistry,
	StaticMimeRegistry,
	SystemMimeRegistry,
)
from .http.model import HTTPRequest, ResponseSpec  # NOQA: F401
from .http.writer import ResponseSink, ResponseRecorder, writeResponse  # NOQA: F401
from .handlers import (  # NOQA: F401
	Handler,
	StaticContentHandler,
	DirHandler,
	FaviconHandler,
	SendStaticFileHandler,
	Mux,
)
from .server import run  # NOQA: F401

# EOF
