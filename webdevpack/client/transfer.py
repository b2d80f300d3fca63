"""Upload and download of files through the WebDevPack API.

Security notes:
- Uploads read the whole source file into memory. There is no client-side
  size cap and no streaming.
- Downloaded bytes are untrusted; they are written as-is.
"""
from __future__ import annotations

import asyncio
import logging
import os
from urllib.parse import quote

from webdevpack.client.exceptions import EmptyDownloadError
from webdevpack.client.filesystem import LocalFileSystem, PathLike
from webdevpack.client.http import ApiDispatcher, MultipartFile
from webdevpack.config import DOWNLOAD_PATH, UPLOAD_PATH

log = logging.getLogger("webdevpack.client")

FileHandle = str


class FileTransfer:
    """Moves files between the local filesystem and the service."""

    def __init__(self, dispatcher: ApiDispatcher, fs: LocalFileSystem):
        self._dispatcher = dispatcher
        self._fs = fs

    async def upload(self, local_path: PathLike) -> FileHandle:
        """Upload a local file and return the server-assigned file handle."""

        p = os.fspath(local_path)
        data = await asyncio.to_thread(self._fs.read_bytes, p)
        form = MultipartFile.from_bytes("file", os.path.basename(p), data)
        envelope = await self._dispatcher.send(UPLOAD_PATH, form, "POST", encode_as_json=False)
        return envelope.field("file")

    async def download(self, file_handle: FileHandle, target_path: PathLike) -> None:
        """Download a file handle's bytes to `target_path`.

        Missing parent directories are created. An existing file is overwritten.

        """

        pathname = DOWNLOAD_PATH.format(file_handle=quote(str(file_handle), safe=""))
        data = await self._dispatcher.send(pathname, None, "GET", encode_as_json=False)
        if not data:
            raise EmptyDownloadError(file_handle)

        p = os.fspath(target_path)
        await asyncio.to_thread(self._write, p, data)
        log.debug("file_downloaded", extra={"size_bytes": len(data)})

    def _write(self, path: str, data: bytes) -> None:
        parent = os.path.dirname(path)
        if parent and not self._fs.exists(parent):
            self._fs.make_dirs(parent)
        self._fs.write_bytes(path, data)
