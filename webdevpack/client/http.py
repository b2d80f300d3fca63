"""HTTP dispatch for the WebDevPack API.

Security notes:
- Treat server responses as untrusted input.
- Never log the API key, request bodies or raw file bytes.
"""
from __future__ import annotations

import json
import logging
import mimetypes
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import httpx
from pydantic import ValidationError

from webdevpack.client.exceptions import (
    ApiError,
    InvalidArgumentError,
    MissingArgumentError,
    NetworkError,
    ServerError,
    TransportError,
    UnknownServerError,
)
from webdevpack.client.models import ErrorCode, ErrorEnvelope, OkEnvelope, ResponseEnvelope
from webdevpack.config import API_KEY_HEADER, ClientConfig

log = logging.getLogger("webdevpack.client")

_METHODS = frozenset({"GET", "POST"})

HttpxFiles = Dict[str, Tuple[str, bytes, str]]


@dataclass(frozen=True, slots=True)
class MultipartFile:
    """One file sent as a multipart/form-data field.

    httpx encodes the body and sets the content type (boundary included);
    the dispatcher does not override it.

    Security notes:
    - The whole file is held in memory. No size cap is applied.

    """

    field_name: str
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"

    @staticmethod
    def from_bytes(field_name: str, filename: str, data: bytes) -> "MultipartFile":
        """Wrap file bytes, guessing the content type from the filename."""

        ct = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return MultipartFile(field_name=field_name, filename=filename, data=data, content_type=ct)

    def as_httpx_files(self) -> HttpxFiles:
        return {self.field_name: (self.filename, self.data, self.content_type)}


Payload = Union[Mapping[str, Any], MultipartFile, bytes]


@dataclass(frozen=True, slots=True)
class RequestEnvelope:
    """One request to the service: built per call, discarded after."""

    pathname: str
    method: str = "POST"
    payload: Optional[Payload] = None
    encode_as_json: bool = True

    def __post_init__(self) -> None:
        if not self.pathname or not self.pathname.startswith("/"):
            raise ValueError(f"pathname must start with '/': {self.pathname!r}")
        if self.method not in _METHODS:
            raise ValueError(f"unsupported HTTP method: {self.method!r}")

    def encode(self) -> Tuple[Dict[str, str], Optional[bytes], Optional[HttpxFiles]]:
        """Return (headers, body, files) for this request. GET requests carry no body."""

        headers: Dict[str, str] = {}
        if self.method != "POST":
            return headers, None, None

        if self.encode_as_json:
            headers["Content-Type"] = "application/json"
            data = self.payload if self.payload is not None else {}
            return headers, json.dumps(data).encode("utf-8"), None

        if isinstance(self.payload, MultipartFile):
            return headers, None, self.payload.as_httpx_files()
        if isinstance(self.payload, (bytes, bytearray)):
            return headers, bytes(self.payload), None
        if self.payload is None:
            return headers, b"", None
        raise TypeError("raw request payload must be bytes or MultipartFile")


class ApiDispatcher:
    """Sends one request and interprets the response envelope.

    Policy:
    - Exactly one HTTP request per call. No retry.
    - GET returns the raw response bytes.
    - Anything else is parsed as a `{status, result|code/message}` envelope.

    """

    def __init__(self, config: ClientConfig, http: httpx.AsyncClient):
        self._config = config
        self._http = http

    async def send(
        self,
        pathname: str,
        payload: Optional[Payload] = None,
        method: str = "POST",
        encode_as_json: bool = True,
    ) -> Union[ResponseEnvelope, bytes]:
        """Send a request and return the success envelope (or raw bytes for GET)."""

        request = RequestEnvelope(
            pathname=pathname,
            method=method.upper(),
            payload=payload,
            encode_as_json=encode_as_json,
        )
        response = await self._do_request(request)

        if request.method == "GET":
            return response.content

        return parse_envelope(response.text)

    async def _do_request(self, request: RequestEnvelope) -> httpx.Response:
        headers, body, files = request.encode()
        if self._config.api_key:
            headers[API_KEY_HEADER] = self._config.api_key

        url = self._config.url_for(request.pathname)
        start = time.monotonic()
        try:
            response = await self._http.request(
                request.method, url, headers=headers, content=body, files=files,
            )
        except httpx.RequestError as e:
            raise NetworkError(f"network error: {e}") from e

        log.debug(
            "api_request",
            extra={
                "method": request.method,
                "path": request.pathname,
                "status_code": response.status_code,
                "duration_ms": int((time.monotonic() - start) * 1000),
            },
        )

        if not response.is_success:
            raise TransportError(response.status_code)
        return response


def parse_envelope(text: str) -> ResponseEnvelope:
    """Parse a response body into a success envelope, or raise the matching error."""

    try:
        parsed = json.loads(text)
    except ValueError:
        raise UnknownServerError(text) from None

    status = parsed.get("status") if isinstance(parsed, dict) else None

    if status == "ok":
        try:
            ok = OkEnvelope.model_validate(parsed)
        except ValidationError:
            raise UnknownServerError(text) from None
        return ResponseEnvelope(result=ok.result, raw_text=text)

    if status == "error":
        try:
            err = ErrorEnvelope.model_validate(parsed)
        except ValidationError:
            raise UnknownServerError(text) from None
        log.debug("api_error", extra={"code": err.code})
        raise _error_from_envelope(err, text)

    raise UnknownServerError(text)


def _error_from_envelope(err: ErrorEnvelope, raw_text: str) -> ApiError:
    code = ErrorCode.parse(err.code)
    if code.type == "missingArgument":
        return MissingArgumentError(code.argument)
    if code.type == "invalidArgument":
        return InvalidArgumentError(code.argument)
    if err.message is not None and err.message != "":
        return ServerError(str(err.message), code=err.code or None)
    return UnknownServerError(raw_text)
