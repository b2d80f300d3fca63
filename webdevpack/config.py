from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://api.webdevpack.com"
API_KEY_HEADER = "WDP-API-Key"

UPLOAD_PATH = "/v0/upload"
DOWNLOAD_PATH = "/v0/download/{file_handle}"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Configuration for a WebDevPack client.

    Security notes:
    - api_key is optional. If not provided, requests are sent without the
      WDP-API-Key header.
    - The key is never logged.

    """

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL

    def url_for(self, pathname: str) -> str:
        """Join the base URL and a `/v0/...` pathname."""

        return self.base_url.rstrip("/") + pathname

    @staticmethod
    def from_env() -> "ClientConfig":
        """Create a config from environment variables.

        - WDP_API_KEY (default: no key)
        - WDP_BASE_URL (default: the production origin)

        Only the CLI calls this; library users pass the key explicitly.

        """

        api_key = os.environ.get("WDP_API_KEY", "").strip() or None
        base_url = os.environ.get("WDP_BASE_URL", "").strip() or DEFAULT_BASE_URL
        return ClientConfig(api_key=api_key, base_url=base_url)
