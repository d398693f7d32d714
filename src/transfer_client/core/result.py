"""Outcome of one execute() call."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import TransferError


@dataclass(frozen=True)
class TransferResult:
    """
    Either a successful body or a TransferError, never both.

    Truthiness is the success flag, so an empty body from a successful
    transfer is still truthy and a failed transfer is always falsy.

    Attributes:
        body: Raw response body (None on failure)
        info: Engine metadata (http_code, total_time, effective_url ...)
        error: The engine error (None on success)

    Example:
        >>> result = client.simple_get("https://api.example.com/users")
        >>> if result:
        ...     users = result.json()
        ... else:
        ...     print(result.error_code, result.error_string)
    """

    body: Optional[bytes] = None
    info: Dict[str, Any] = field(default_factory=dict)
    error: Optional[TransferError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def status_code(self) -> Optional[int]:
        """HTTP (or FTP) response code reported by the engine."""
        return self.info.get("http_code")

    @property
    def error_code(self) -> Optional[int]:
        return self.error.code if self.error is not None else None

    @property
    def error_string(self) -> str:
        return self.error.message if self.error is not None else ""

    @property
    def encoding(self) -> str:
        """Charset from the Content-Type, utf-8 when absent."""
        content_type = self.info.get("content_type") or ""
        for part in content_type.split(";")[1:]:
            key, _, value = part.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"

    @property
    def text(self) -> str:
        if self.body is None:
            return ""
        return self.body.decode(self.encoding, errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON (raises on failure results)."""
        return json.loads(self.unwrap())

    def raise_for_error(self) -> "TransferResult":
        """Raise the captured TransferError, otherwise return self."""
        if self.error is not None:
            raise self.error
        return self

    def unwrap(self) -> bytes:
        """Body of a successful transfer; raises the TransferError otherwise."""
        self.raise_for_error()
        return self.body if self.body is not None else b""
