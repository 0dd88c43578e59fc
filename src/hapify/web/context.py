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
"""Per-request state handed down the stage chain.

Each request gets a fresh RequestContext from the router adapter.  It carries
the incoming request, the response under construction, values produced by the
validation stage, and the failure responder installed by the capability stage.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from starlette.responses import JSONResponse, Response

from hapify.kernel.exceptions import CapabilityNotInstalledError, ResponseAlreadyFinalizedError

if TYPE_CHECKING:
    from hapify.kernel.failures import HttpFailure
    from hapify.web.capability import FailureResponder

_request_context_var: ContextVar[RequestContext | None] = ContextVar(
    "hapify_request_context", default=None
)


class ResponseSink:
    """The response being built for one request.

    Stages may set a status and headers, then finalize exactly once with
    :meth:`json` or :meth:`send`.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.headers: dict[str, str] = {}
        self._final: Response | None = None

    @property
    def finalized(self) -> bool:
        return self._final is not None

    @property
    def final(self) -> Response | None:
        return self._final

    def status(self, status_code: int) -> ResponseSink:
        self.status_code = status_code
        return self

    def set_headers(self, headers: Mapping[str, str]) -> ResponseSink:
        self.headers.update(headers)
        return self

    def json(self, payload: Any) -> Response:
        """Finalize with a JSON body using the current status and headers."""
        return self.send(JSONResponse(payload, status_code=self.status_code))

    def send(self, response: Response) -> Response:
        """Finalize with a ready response; sink headers are merged into it."""
        if self._final is not None:
            raise ResponseAlreadyFinalizedError("Response has already been finalized")
        for name, value in self.headers.items():
            response.headers[name] = value
        self._final = response
        return response


class RequestContext:
    """Holds per-request state: request, response sink, validated facets, attributes.

    Use ``RequestContext.current()`` from code that is not handed the context
    explicitly.
    """

    def __init__(self, request: Any, request_id: str | None = None) -> None:
        self.request = request
        self.response = ResponseSink()
        self.validated: dict[str, Any] = {}
        self._request_id = request_id or uuid.uuid4().hex
        self._attributes: dict[str, Any] = {}
        self._responder: FailureResponder | None = None

    @property
    def request_id(self) -> str:
        return self._request_id

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    # ------------------------------------------------------------------
    # Failure capability
    # ------------------------------------------------------------------

    @property
    def responder(self) -> FailureResponder | None:
        return self._responder

    def install_responder(self, responder: FailureResponder) -> None:
        self._responder = responder

    def respond_with_failure(self, failure: HttpFailure) -> Response:
        """Finalize this request's response from a structured failure."""
        if self._responder is None:
            raise CapabilityNotInstalledError(
                "respond_with_failure is not available: the failure capability stage has not run"
            )
        return self._responder(failure)

    # ------------------------------------------------------------------
    # Task-local access
    # ------------------------------------------------------------------

    def activate(self) -> None:
        """Make this the current context for the running async task."""
        _request_context_var.set(self)

    @classmethod
    def current(cls) -> RequestContext | None:
        return _request_context_var.get()

    @classmethod
    def clear(cls) -> None:
        _request_context_var.set(None)
