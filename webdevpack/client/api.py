from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

import httpx

from webdevpack.client.filesystem import LocalFileSystem, PathLike, check_source, check_target
from webdevpack.client.http import ApiDispatcher
from webdevpack.client.models import KeyPair, ResponseEnvelope
from webdevpack.client.transfer import FileTransfer
from webdevpack.config import ClientConfig


class Client:
    """Async client for the WebDevPack API.

    Every operation is: preflight checks (optional) -> upload (optional) ->
    one API call -> download (optional). Preflight runs before any request,
    so a bad local path never costs an upload.

    Concurrent calls on one client are independent. There is no retry and no
    timeout: a hung connection hangs the call.

    A failed download after a successful processing call leaves the remote
    file orphaned; no cleanup request is made.

    Usage:
        async with Client(api_key="...") as client:
            await client.optimize_image("in.png", "out/in.png", quality=80)

    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        filesystem: Optional[LocalFileSystem] = None,
    ):
        if config is None:
            config = ClientConfig(api_key=api_key)
        elif api_key is not None:
            config = replace(config, api_key=api_key)
        self.config = config

        self._fs = filesystem or LocalFileSystem()
        self._http = httpx.AsyncClient(transport=transport, timeout=None)
        self._dispatcher = ApiDispatcher(config, self._http)
        self._files = FileTransfer(self._dispatcher, self._fs)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _call(self, pathname: str, payload: Dict[str, Any]) -> ResponseEnvelope:
        return await self._dispatcher.send(pathname, payload)

    async def _text(self, pathname: str, payload: Dict[str, Any]) -> str:
        r = await self._call(pathname, payload)
        return r.field("text")

    async def _process_file(
        self, source: PathLike, target: PathLike, pathname: str, **params: Any
    ) -> None:
        check_source(source, self._fs)
        check_target(target, self._fs)
        file_handle = await self._files.upload(source)
        r = await self._call(pathname, {"file": file_handle, **params})
        await self._files.download(r.field("file"), target)

    async def _generate_file(
        self, target: PathLike, pathname: str, payload: Dict[str, Any]
    ) -> None:
        check_target(target, self._fs)
        r = await self._call(pathname, payload)
        await self._files.download(r.field("file"), target)

    # --- text ---

    async def transform_text(self, text: str, transform: str) -> str:
        return await self._text("/v0/text-transform", {"text": text, "transform": transform})

    async def base64_encode(self, text: str) -> str:
        return await self._text("/v0/base64-encode-decode", {"text": text, "transform": "encode"})

    async def base64_decode(self, text: str) -> str:
        return await self._text("/v0/base64-encode-decode", {"text": text, "transform": "decode"})

    async def hash_text(self, text: str, algorithm: str) -> str:
        return await self._text("/v0/text-hash", {"text": text, "algorithm": algorithm})

    async def encode_url(self, url: str) -> str:
        return await self._text("/v0/url-encode-decode", {"text": url, "transform": "encode"})

    async def decode_url(self, url: str) -> str:
        return await self._text("/v0/url-encode-decode", {"text": url, "transform": "decode"})

    async def encode_json(self, text: str) -> str:
        return await self._text("/v0/json-encode-decode", {"text": text, "transform": "encode"})

    async def decode_json(self, text: str) -> str:
        return await self._text("/v0/json-encode-decode", {"text": text, "transform": "decode"})

    async def domain_whois(self, domain: str) -> str:
        r = await self._call("/v0/domain-whois", {"domain": domain})
        return r.field("raw")

    # --- images ---

    async def optimize_image(self, source: PathLike, target: PathLike, quality: int = 100) -> None:
        await self._process_file(source, target, "/v0/image-optimize", quality=quality)

    async def convert_image(
        self, source: PathLike, target: PathLike, format: str, quality: int = 100
    ) -> None:
        await self._process_file(
            source, target, "/v0/image-convert", format=format, quality=quality
        )

    async def get_text_from_image(self, source: PathLike, language: str = "eng") -> str:
        """Run OCR on a local image and return the recognized text."""

        check_source(source, self._fs)
        file_handle = await self._files.upload(source)
        return await self._text("/v0/text-from-image", {"file": file_handle, "language": language})

    async def generate_qr_code(self, text: str, target: PathLike, size: int, format: str) -> None:
        await self._generate_file(
            target, "/v0/qrcode", {"text": text, "size": size, "format": format}
        )

    async def generate_barcode(
        self, text: str, target: PathLike, width: int, height: int, format: str
    ) -> None:
        await self._generate_file(
            target,
            "/v0/barcode",
            {"text": text, "width": width, "height": height, "format": format},
        )

    # --- minification ---

    async def minify_javascript(self, code: str) -> str:
        return await self._text("/v0/js-minify-text", {"text": code})

    async def minify_javascript_file(self, source: PathLike, target: PathLike) -> None:
        await self._process_file(source, target, "/v0/js-minify-file")

    async def minify_css(self, code: str) -> str:
        return await self._text("/v0/css-minify-text", {"text": code})

    async def minify_css_file(self, source: PathLike, target: PathLike) -> None:
        await self._process_file(source, target, "/v0/css-minify-file")

    # --- generators ---

    async def generate_password(
        self,
        length: int,
        include_uppercase: bool,
        include_symbols: bool,
        include_numbers: bool,
    ) -> str:
        r = await self._call(
            "/v0/password",
            {
                "length": length,
                "uppercase": include_uppercase,
                "symbols": include_symbols,
                "numbers": include_numbers,
            },
        )
        return r.field("password")

    async def generate_key_pair(self, bits: int) -> KeyPair:
        r = await self._call("/v0/keypair", {"bits": bits})
        return KeyPair(private_key=r.field("privateKey"), public_key=r.field("publicKey"))

    # --- PDF ---

    async def convert_html_to_pdf(self, code: str, target: PathLike) -> None:
        await self._generate_file(target, "/v0/html-to-pdf", {"text": code})

    async def convert_html_file_to_pdf(self, source: PathLike, target: PathLike) -> None:
        await self._process_file(source, target, "/v0/html-file-to-pdf")
