from __future__ import annotations

import base64
import hashlib
import json
import re
import secrets
import string
import uuid
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote, unquote

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import Body, FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from webdevpack.client import Client

BASE_URL = "https://api.webdevpack.com"


def ok(**result: Any) -> Dict[str, Any]:
    return {"status": "ok", "result": result}


def error(code: str, message: Optional[str] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"status": "error", "code": code}
    if message is not None:
        out["message"] = message
    return out


def create_fake_service() -> FastAPI:
    """An in-memory stand-in for the WebDevPack API.

    Files are kept in `app.state.files`; every request is recorded in
    `app.state.requests` as (method, path, api_key).

    """

    app = FastAPI()
    app.state.files = {}
    app.state.requests = []
    app.state.uploaded_names = []

    @app.middleware("http")
    async def record_requests(request: Request, call_next):
        app.state.requests.append(
            (request.method, request.url.path, request.headers.get("wdp-api-key"))
        )
        return await call_next(request)

    def _store(data: bytes) -> str:
        file_id = uuid.uuid4().hex
        app.state.files[file_id] = data
        return file_id

    def _missing(payload: Dict[str, Any], *names: str) -> Optional[Dict[str, Any]]:
        for name in names:
            if name not in payload:
                return error(f"missingArgument:{name}")
        return None

    def _load(payload: Dict[str, Any]):
        file_id = payload.get("file")
        if file_id not in app.state.files:
            return None, error("invalidArgument:file")
        return app.state.files[file_id], None

    def _process(payload: Dict[str, Any], transform: Callable[[bytes], bytes]):
        data, err = _load(payload)
        if err:
            return err
        return ok(file=_store(transform(data)))

    @app.post("/v0/upload")
    async def upload(file: UploadFile = File(...)):
        data = await file.read()
        app.state.uploaded_names.append(file.filename)
        return ok(file=_store(data))

    @app.get("/v0/download/{file_id}")
    async def download(file_id: str):
        if file_id not in app.state.files:
            return JSONResponse(status_code=404, content=error("invalidArgument:file"))
        return Response(content=app.state.files[file_id], media_type="application/octet-stream")

    @app.post("/v0/image-optimize")
    async def image_optimize(payload: Dict[str, Any] = Body(...)):
        return _missing(payload, "file", "quality") or _process(
            payload, lambda d: b"optimized:%d:" % payload["quality"] + d
        )

    @app.post("/v0/image-convert")
    async def image_convert(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "file", "format", "quality")
        if err:
            return err
        if payload["format"] not in {"png", "jpg", "webp", "gif"}:
            return error("invalidArgument:format")
        fmt = payload["format"].encode("ascii")
        return _process(payload, lambda d: fmt + b":" + d)

    @app.post("/v0/text-from-image")
    async def text_from_image(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "file", "language")
        if err:
            return err
        data, err = _load(payload)
        if err:
            return err
        return ok(text=f"[{payload['language']}] " + data.decode("utf-8"))

    @app.post("/v0/qrcode")
    async def qrcode(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "text", "size", "format")
        if err:
            return err
        if payload["format"] not in {"png", "svg"}:
            return error("invalidArgument:format")
        return ok(file=_store(f"QR {payload['size']} {payload['text']}".encode("utf-8")))

    @app.post("/v0/barcode")
    async def barcode(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "text", "width", "height", "format")
        if err:
            return err
        body = f"BAR {payload['width']}x{payload['height']} {payload['text']}"
        return ok(file=_store(body.encode("utf-8")))

    def _minify(text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()

    @app.post("/v0/js-minify-text")
    @app.post("/v0/css-minify-text")
    async def minify_text(payload: Dict[str, Any] = Body(...)):
        return _missing(payload, "text") or ok(text=_minify(payload["text"]))

    @app.post("/v0/js-minify-file")
    @app.post("/v0/css-minify-file")
    async def minify_file(payload: Dict[str, Any] = Body(...)):
        return _missing(payload, "file") or _process(
            payload, lambda d: _minify(d.decode("utf-8")).encode("utf-8")
        )

    @app.post("/v0/html-to-pdf")
    async def html_to_pdf(payload: Dict[str, Any] = Body(...)):
        return _missing(payload, "text") or ok(
            file=_store(b"%PDF-1.4\n" + payload["text"].encode("utf-8"))
        )

    @app.post("/v0/html-file-to-pdf")
    async def html_file_to_pdf(payload: Dict[str, Any] = Body(...)):
        return _missing(payload, "file") or _process(payload, lambda d: b"%PDF-1.4\n" + d)

    def _transform(payload: Dict[str, Any], encode, decode):
        err = _missing(payload, "text", "transform")
        if err:
            return err
        if payload["transform"] == "encode":
            return ok(text=encode(payload["text"]))
        if payload["transform"] == "decode":
            return ok(text=decode(payload["text"]))
        return error("invalidArgument:transform")

    @app.post("/v0/base64-encode-decode")
    async def base64_encode_decode(payload: Dict[str, Any] = Body(...)):
        return _transform(
            payload,
            lambda t: base64.b64encode(t.encode("utf-8")).decode("ascii"),
            lambda t: base64.b64decode(t.encode("ascii")).decode("utf-8"),
        )

    @app.post("/v0/url-encode-decode")
    async def url_encode_decode(payload: Dict[str, Any] = Body(...)):
        return _transform(payload, lambda t: quote(t, safe=""), unquote)

    @app.post("/v0/json-encode-decode")
    async def json_encode_decode(payload: Dict[str, Any] = Body(...)):
        return _transform(payload, json.dumps, json.loads)

    @app.post("/v0/text-transform")
    async def text_transform(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "text", "transform")
        if err:
            return err
        transforms = {"uppercase": str.upper, "lowercase": str.lower, "reverse": lambda t: t[::-1]}
        fn = transforms.get(payload["transform"])
        if fn is None:
            return error("invalidArgument:transform")
        return ok(text=fn(payload["text"]))

    @app.post("/v0/text-hash")
    async def text_hash(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "text", "algorithm")
        if err:
            return err
        if payload["algorithm"] not in hashlib.algorithms_guaranteed:
            return error("invalidArgument:algorithm")
        h = hashlib.new(payload["algorithm"], payload["text"].encode("utf-8"))
        return ok(text=h.hexdigest())

    @app.post("/v0/domain-whois")
    async def domain_whois(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "domain")
        if err:
            return err
        if "." not in payload["domain"]:
            return error("lookupFailed:domain", "Invalid domain name")
        return ok(raw=f"Domain Name: {payload['domain'].upper()}\nRegistrar: Example Registrar")

    @app.post("/v0/password")
    async def password(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "length", "uppercase", "symbols", "numbers")
        if err:
            return err
        alphabet = string.ascii_lowercase
        if payload["uppercase"]:
            alphabet += string.ascii_uppercase
        if payload["numbers"]:
            alphabet += string.digits
        if payload["symbols"]:
            alphabet += "!@#$%^&*"
        return ok(password="".join(secrets.choice(alphabet) for _ in range(payload["length"])))

    @app.post("/v0/keypair")
    async def keypair(payload: Dict[str, Any] = Body(...)):
        err = _missing(payload, "bits")
        if err:
            return err
        if payload["bits"] not in {1024, 2048, 4096}:
            return error("invalidArgument:bits")
        key = rsa.generate_private_key(public_exponent=65537, key_size=payload["bits"])
        private_pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        public_pem = key.public_key().public_bytes(
            serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
        )
        return ok(privateKey=private_pem.decode("ascii"), publicKey=public_pem.decode("ascii"))

    return app


class RecordingHandler:
    """httpx.MockTransport handler that answers every request the same way."""

    def __init__(self, status_code: int = 200, content: bytes = b"", json_body: Any = None):
        self.status_code = status_code
        self.content = content
        self.json_body = json_body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, content=self.content)


@pytest.fixture()
def fake_service() -> FastAPI:
    return create_fake_service()


@pytest.fixture()
def service_client(fake_service: FastAPI) -> Client:
    return Client(api_key="testkey", transport=httpx.ASGITransport(app=fake_service))


@pytest.fixture()
def mock_client() -> Callable[..., Client]:
    """Build a client whose transport answers with a fixed response."""

    def _make(handler: RecordingHandler, api_key: Optional[str] = "testkey", **kwargs) -> Client:
        return Client(api_key=api_key, transport=httpx.MockTransport(handler), **kwargs)

    return _make
