from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_URL = "INVALID_URL"
    INVALID_TAG = "INVALID_TAG"
    INVALID_INPUT = "INVALID_INPUT"


class LinkMetaError(Exception):
    """Raised by tool handlers when the caller's input is unusable.

    Caught by server.py and serialised into the MCP error response.
    Metadata extraction itself never raises this: a bad page degrades to
    a fallback result, only a bad request is an error.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
