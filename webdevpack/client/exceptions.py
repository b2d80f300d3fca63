from __future__ import annotations

from typing import Optional


class WebDevPackError(Exception):
    """
    Base exception for all client failures.
    """

    pass


class ApiError(WebDevPackError):
    """
    Raised when a request to the service fails.
    """

    pass


class TransportError(ApiError):
    """
    Raised when the service answers with a non-2xx HTTP status.
    """

    def __init__(self, status_code: int):
        super().__init__(f"HTTP error {status_code}")
        self.status_code = status_code


class NetworkError(ApiError):
    """
    Raised when a request could not be completed at all.
    """

    pass


class UnknownServerError(ApiError):
    """
    Raised when the response body is not a recognized envelope.
    """

    def __init__(self, raw_text: str):
        super().__init__(f"Unknown error: {raw_text}")
        self.raw_text = raw_text


class MissingArgumentError(ApiError):
    """
    Raised when the service reports a required argument as missing.
    """

    def __init__(self, argument: str):
        super().__init__(f"Missing argument: {argument}")
        self.argument = argument


class InvalidArgumentError(ApiError):
    """
    Raised when the service rejects an argument value.
    """

    def __init__(self, argument: str):
        super().__init__(f"Invalid argument: {argument}")
        self.argument = argument


class ServerError(ApiError):
    """
    Raised for server errors that carry a human-readable message.
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(f"Error: {message}")
        self.message = message
        self.code = code


class EmptyDownloadError(ApiError):
    """
    Raised when a download succeeds at the HTTP level but returns no bytes.
    """

    def __init__(self, file_handle: str):
        super().__init__("Download error: file empty")
        self.file_handle = file_handle


class PreflightError(WebDevPackError):
    """
    Base exception for local filesystem checks that run before any request.
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class SourceNotFoundError(PreflightError, FileNotFoundError):
    """
    Raised when a source file does not exist.
    """

    def __init__(self, path: str):
        super().__init__(f"The source file ({path}) does not exist!", path)


class SourceNotReadableError(PreflightError, PermissionError):
    """
    Raised when a source file exists but cannot be read.
    """

    def __init__(self, path: str):
        super().__init__(f"The source file ({path}) is not readable", path)


class TargetNotWritableError(PreflightError, PermissionError):
    """
    Raised when a target path cannot be written or created.
    """

    def __init__(self, path: str):
        super().__init__(f"The target file ({path}) is not writable", path)
