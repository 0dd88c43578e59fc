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
"""Hapify — compiles route descriptors into stage chains and registers them.

Usage::

    router = StarletteRouter()
    routes = Hapify(router, {"failure": {"transform": to_problem_json}})
    routes.add_routes([
        {"method": "GET", "path": "/users/{id}", "config": {
            "handler": get_user,
            "validate": {"params": UserParams},
        }},
    ])
    app = Starlette(routes=router.routes)

Every compiled chain has the fixed shape::

    failure capability -> validation (if any) -> middleware... -> handler
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from hapify.core.config import Config
from hapify.core.options import HapifyOptions, PayloadTransform, resolve_options
from hapify.kernel.exceptions import TypeMismatchError
from hapify.logging.port import LoggingPort
from hapify.logging.structlog_adapter import StructlogAdapter
from hapify.routing.descriptor import HttpMethod, RouteDescriptor, as_mapping, describe
from hapify.routing.validator import validate_descriptor
from hapify.web.capability import failure_capability
from hapify.web.ports.router import Chain, RouterPort
from hapify.web.ports.stage import Stage
from hapify.web.validation import build_validation_stage

logger = structlog.get_logger("hapify.routing")

# Registration entry point on the router for each method.
_ENTRY_POINTS: dict[HttpMethod, str] = {
    HttpMethod.GET: "get",
    HttpMethod.POST: "post",
    HttpMethod.PUT: "put",
    HttpMethod.DELETE: "delete",
    HttpMethod.OPTIONS: "options",
    HttpMethod.TRACE: "trace",
    HttpMethod.ALL: "all",
}


class Hapify:
    """Declarative route registration on top of a :class:`RouterPort`.

    Args:
        router: Receives ``(path, chain)`` on its method-specific entry point.
        options: A :class:`HapifyOptions`, or a mapping with ``failure``
            (alias ``boom``) and ``validation`` (alias ``joi``) sections.
    """

    def __init__(
        self,
        router: RouterPort,
        options: HapifyOptions | Mapping[str, Any] | None = None,
    ) -> None:
        self._router = router
        self._options = resolve_options(options)
        self._capability = failure_capability(self._options.failure)

    @classmethod
    def from_config(
        cls,
        router: RouterPort,
        config: Config,
        *,
        transform: PayloadTransform | None = None,
        logging_port: LoggingPort | None = None,
    ) -> Hapify:
        """Bootstrap from configuration.

        Configures logging from ``hapify.logging.*`` (structlog unless another
        port is given) and binds validation options from ``hapify.validation.*``.
        """
        (logging_port or StructlogAdapter()).configure(config)
        return cls(router, HapifyOptions.from_config(config, transform=transform))

    @property
    def options(self) -> HapifyOptions:
        return self._options

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_route(self, route: Any) -> None:
        """Validate, compile and register a single route descriptor."""
        descriptor, chain = self._prepare(route)
        self._dispatch(descriptor, chain)

    def add_routes(self, routes: Any, *, atomic: bool = False) -> None:
        """Register descriptors in order.

        By default each descriptor is registered as soon as it is compiled, so
        a failure part-way leaves the earlier routes registered.  With
        ``atomic=True`` every descriptor is validated and compiled before any
        of them reaches the router.
        """
        if not isinstance(routes, (list, tuple)):
            raise TypeMismatchError("routes must be a list", describe(routes))

        if atomic:
            prepared = [self._prepare(route) for route in routes]
            for descriptor, chain in prepared:
                self._dispatch(descriptor, chain)
            return

        for index, route in enumerate(routes):
            try:
                self.add_route(route)
            except Exception:
                logger.error("route_batch_aborted", index=index, registered=index, total=len(routes))
                raise

    def compile(self, route: Any) -> Chain:
        """Return the stage chain *route* would be registered with."""
        return self._prepare(route)[1]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _prepare(self, route: Any) -> tuple[RouteDescriptor, Chain]:
        if as_mapping(route) is None:
            raise TypeMismatchError("route must be an object", describe(route))
        validate_descriptor(route)
        descriptor = RouteDescriptor.from_mapping(route)
        return descriptor, self._build_chain(descriptor, describe(route))

    def _build_chain(self, descriptor: RouteDescriptor, route_str: str) -> Chain:
        config = descriptor.config
        stages: list[Stage] = [self._capability]

        if config.validate is not None:
            stages.append(
                build_validation_stage(config.validate, self._options.validation, route_str)
            )

        stages.extend(config.middleware)
        stages.append(config.handler)
        return tuple(stages)

    def _dispatch(self, descriptor: RouteDescriptor, chain: Chain) -> None:
        method = HttpMethod.parse(descriptor.method)
        register = getattr(self._router, _ENTRY_POINTS[method])
        register(descriptor.path, chain)
        logger.info(
            "route_registered",
            method=method.value,
            path=descriptor.path,
            stages=len(chain),
        )
