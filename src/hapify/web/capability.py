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
"""Failure capability — the first stage of every compiled chain.

Installs a fresh :class:`FailureResponder` on the request context so later
stages can call ``ctx.respond_with_failure(failure)``, and renders any
:class:`HttpFailure` raised further down the chain.
"""

from __future__ import annotations

from typing import Any

import structlog
from starlette.responses import Response

from hapify.core.options import FailureOptions
from hapify.kernel.exceptions import InvalidFailureObjectError
from hapify.kernel.failures import HttpFailure, is_failure
from hapify.web.context import RequestContext, ResponseSink
from hapify.web.ports.stage import CallNext, Stage

logger = structlog.get_logger("hapify.web")


class FailureResponder:
    """Turns an HttpFailure into the finalized JSON response of one request."""

    __slots__ = ("_sink", "_transform")

    def __init__(self, sink: ResponseSink, options: FailureOptions) -> None:
        self._sink = sink
        self._transform = options.transform

    def __call__(self, failure: Any) -> Response:
        if not is_failure(failure):
            raise InvalidFailureObjectError(
                f"respond_with_failure expects an HttpFailure, got {type(failure).__name__}"
            )
        output = failure.output
        if output.headers:
            self._sink.set_headers(output.headers)

        payload: Any = dict(output.payload)
        if self._transform is not None:
            payload = self._transform(payload)

        logger.debug("failure_response", status_code=output.status_code, message=str(failure))
        return self._sink.status(output.status_code).json(payload)


def failure_capability(options: FailureOptions) -> Stage:
    """Build the capability stage bound to the given failure options."""

    async def install_failure_capability(ctx: RequestContext, call_next: CallNext) -> Any:
        ctx.install_responder(FailureResponder(ctx.response, options))
        try:
            return await call_next(ctx)
        except HttpFailure as failure:
            if ctx.response.finalized:
                logger.warning(
                    "http_failure_after_response",
                    status_code=failure.status_code,
                    request_id=ctx.request_id,
                )
                return ctx.response.final
            logger.info(
                "http_failure_raised",
                status_code=failure.status_code,
                message=str(failure),
                request_id=ctx.request_id,
            )
            return ctx.respond_with_failure(failure)

    return install_failure_capability
