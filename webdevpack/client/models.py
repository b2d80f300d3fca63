from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from webdevpack.client.exceptions import UnknownServerError


class OkEnvelope(BaseModel):
    """Success envelope. `result` fields are operation-specific."""

    status: Literal["ok"]
    result: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    """Error envelope with a `type:argument` code.

    `code` may be null and `message` may be any JSON value; a non-empty
    message is shown as text.

    """

    status: Literal["error"]
    code: Optional[str] = None
    message: Any = None


@dataclass(frozen=True, slots=True)
class ErrorCode:
    """A parsed server error code.

    The code is split on the first colon only, so the argument may itself
    contain colons. A code without a colon has an empty argument.

    """

    type: str
    argument: str = ""

    @staticmethod
    def parse(code: Optional[str]) -> "ErrorCode":
        kind, _sep, argument = (code or "").partition(":")
        return ErrorCode(type=kind, argument=argument)


@dataclass(frozen=True, slots=True)
class ResponseEnvelope:
    """A parsed success response.

    Security notes:
    - Treat `result` as untrusted server data.

    """

    result: Dict[str, Any]
    raw_text: str

    def field(self, name: str) -> Any:
        """Return one result field, or fail as an unknown server response."""

        if name not in self.result:
            raise UnknownServerError(self.raw_text)
        return self.result[name]


@dataclass(frozen=True, slots=True)
class KeyPair:
    """A generated key pair (PEM strings as returned by the service)."""

    private_key: str
    public_key: str
