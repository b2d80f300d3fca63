"""Async client for the WebDevPack API.

Security notes:
- Treat server responses as untrusted input.
- The API key is sent only in the WDP-API-Key header and is never logged.
"""

from .api import Client  # noqa: F401
from .exceptions import (  # noqa: F401
    ApiError,
    EmptyDownloadError,
    InvalidArgumentError,
    MissingArgumentError,
    NetworkError,
    PreflightError,
    ServerError,
    SourceNotFoundError,
    SourceNotReadableError,
    TargetNotWritableError,
    TransportError,
    UnknownServerError,
    WebDevPackError,
)
from .filesystem import LocalFileSystem  # noqa: F401
from .models import KeyPair  # noqa: F401
