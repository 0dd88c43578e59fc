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
"""StarletteRouter — the RouterPort implementation backed by Starlette routes.

Usage::

    router = StarletteRouter(prefix="/api")
    Hapify(router).add_routes(ROUTES)
    app = Starlette(routes=[router.to_starlette_routes()])
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from hapify.kernel.failures import HttpFailure
from hapify.routing.descriptor import HttpMethod
from hapify.web.adapters.starlette.response import handle_return_value
from hapify.web.context import RequestContext
from hapify.web.ports.router import Chain
from hapify.web.ports.stage import CallNext, Stage

# Starlette maps methods=None on a function endpoint to GET only.
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


@dataclass
class RouteRecord:
    """One registration received from the compiler."""

    method: HttpMethod
    path: str
    chain: Chain


class StarletteRouter:
    """Collects compiled chains and exposes them as Starlette routes."""

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix.rstrip("/")
        self._records: list[RouteRecord] = []
        self._routes: list[Route] = []

    # ------------------------------------------------------------------
    # RouterPort entry points
    # ------------------------------------------------------------------

    def get(self, path: str, chain: Chain) -> None:
        self._add(HttpMethod.GET, path, chain)

    def post(self, path: str, chain: Chain) -> None:
        self._add(HttpMethod.POST, path, chain)

    def put(self, path: str, chain: Chain) -> None:
        self._add(HttpMethod.PUT, path, chain)

    def delete(self, path: str, chain: Chain) -> None:
        self._add(HttpMethod.DELETE, path, chain)

    def options(self, path: str, chain: Chain) -> None:
        self._add(HttpMethod.OPTIONS, path, chain)

    def trace(self, path: str, chain: Chain) -> None:
        self._add(HttpMethod.TRACE, path, chain)

    def all(self, path: str, chain: Chain) -> None:
        """Register *chain* for every HTTP method on *path*."""
        self._add(HttpMethod.ALL, path, chain)

    # ------------------------------------------------------------------
    # Starlette integration
    # ------------------------------------------------------------------

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    def to_starlette_routes(self) -> Mount:
        """Wrap the collected routes in a Starlette ``Mount``."""
        return Mount("", routes=self.routes)

    def get_route_metadata(self) -> list[RouteRecord]:
        """Return a copy of all registrations, in registration order."""
        return list(self._records)

    def _add(self, method: HttpMethod, path: str, chain: Chain) -> None:
        record = RouteRecord(method=method, path=self._prefix + path, chain=chain)
        self._records.append(record)
        methods = ANY_METHOD if method is HttpMethod.ALL else [method.value]
        self._routes.append(Route(record.path, endpoint=chain_endpoint(chain), methods=methods))


# ---------------------------------------------------------------------------
# Chain execution
# ---------------------------------------------------------------------------


def chain_endpoint(chain: Chain) -> Callable[[Request], Awaitable[Response]]:
    """Build the Starlette endpoint that runs *chain* for each request."""

    async def endpoint(request: Request) -> Response:
        ctx = RequestContext(request, request_id=request.headers.get("x-request-id"))
        ctx.activate()
        try:
            result = await run_chain(chain, ctx)
        finally:
            RequestContext.clear()
        return handle_return_value(ctx, result)

    return endpoint


async def run_chain(chain: Chain, ctx: RequestContext) -> Any:
    """Run *chain* against *ctx*; stepping past the last stage is a 404."""

    async def _exhausted(ctx: RequestContext) -> Any:
        raise HttpFailure.not_found()

    call_next: CallNext = _exhausted
    for stage in reversed(chain):
        call_next = _wrap(stage, call_next)
    return await call_next(ctx)


def _wrap(stage: Stage, next_call: CallNext) -> CallNext:
    async def _inner(ctx: RequestContext) -> Any:
        result = stage(ctx, next_call)
        if inspect.isawaitable(result):
            result = await result
        return result

    return _inner
