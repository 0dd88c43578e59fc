# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""HttpFailure — structured HTTP error outcomes (status, headers, payload)."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

_INTERNAL_MESSAGE = "An internal server error occurred"


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


@dataclass
class FailureOutput:
    """What gets written to the wire for a failure."""

    status_code: int
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


class HttpFailure(Exception):
    """An HTTP-level error outcome.

    Can be raised from any stage (the capability stage renders it) or passed
    directly to ``ctx.respond_with_failure``.  The rendered payload is::

        {"statusCode": 404, "error": "Not Found", "message": "..."}

    Server errors (5xx) never leak their message to the client.

    Args:
        message: Human-readable description.
        status_code: HTTP status code, must be >= 400.
        headers: Extra response headers (e.g. ``WWW-Authenticate``).
        data: Arbitrary diagnostic data, kept server-side only.
    """

    is_failure = True

    def __init__(
        self,
        message: str = "",
        status_code: int = 500,
        headers: dict[str, str] | None = None,
        data: Any = None,
    ) -> None:
        if status_code < 400:
            raise ValueError(f"HttpFailure status_code must be >= 400, got {status_code}")
        super().__init__(message or _reason(status_code))
        self.status_code = status_code
        self.data = data
        self.output = FailureOutput(
            status_code=status_code,
            payload=self._build_payload(message, status_code),
            headers=dict(headers or {}),
        )

    @property
    def is_server(self) -> bool:
        return self.status_code >= 500

    @staticmethod
    def _build_payload(message: str, status_code: int) -> dict[str, Any]:
        payload: dict[str, Any] = {"statusCode": status_code, "error": _reason(status_code)}
        if status_code >= 500:
            payload["message"] = _INTERNAL_MESSAGE
        elif message:
            payload["message"] = message
        return payload

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def wrap(cls, error: BaseException, status_code: int = 500, message: str | None = None) -> HttpFailure:
        """Turn an arbitrary exception into an HttpFailure.

        An existing HttpFailure is returned unchanged.
        """
        if isinstance(error, HttpFailure):
            return error
        text = str(error)
        if message:
            text = f"{message}: {text}" if text else message
        failure = cls(text, status_code=status_code)
        failure.__cause__ = error
        return failure

    @classmethod
    def bad_request(cls, message: str = "", data: Any = None) -> HttpFailure:
        return cls(message, 400, data=data)

    @classmethod
    def unauthorized(cls, message: str = "", scheme: str | None = None) -> HttpFailure:
        headers = {"WWW-Authenticate": scheme} if scheme else None
        return cls(message, 401, headers=headers)

    @classmethod
    def forbidden(cls, message: str = "", data: Any = None) -> HttpFailure:
        return cls(message, 403, data=data)

    @classmethod
    def not_found(cls, message: str = "", data: Any = None) -> HttpFailure:
        return cls(message, 404, data=data)

    @classmethod
    def method_not_allowed(cls, message: str = "", allow: list[str] | None = None) -> HttpFailure:
        headers = {"Allow": ", ".join(allow)} if allow else None
        return cls(message, 405, headers=headers)

    @classmethod
    def conflict(cls, message: str = "", data: Any = None) -> HttpFailure:
        return cls(message, 409, data=data)

    @classmethod
    def unprocessable(cls, message: str = "", data: Any = None) -> HttpFailure:
        return cls(message, 422, data=data)

    @classmethod
    def internal(cls, message: str = "", data: Any = None) -> HttpFailure:
        return cls(message, 500, data=data)


def is_failure(value: Any) -> bool:
    """Return True when *value* is a structured failure that can be rendered."""
    return isinstance(value, HttpFailure)
