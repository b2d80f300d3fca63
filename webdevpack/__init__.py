"""WebDevPack SDK for Python.

Thin async wrapper around the WebDevPack HTTP API: image optimization and
conversion, OCR, minification, QR code and barcode generation, WHOIS,
password and key pair generation, HTML-to-PDF.
"""

from webdevpack.client import (  # noqa: F401
    ApiError,
    Client,
    EmptyDownloadError,
    InvalidArgumentError,
    KeyPair,
    LocalFileSystem,
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
from webdevpack.config import ClientConfig  # noqa: F401

__version__ = "0.1.0"
