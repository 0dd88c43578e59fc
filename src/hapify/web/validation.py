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
"""Validation stage — checks request facets against pydantic schemas.

Given ``{"body": CreateUser, "query": SearchParams}``, the produced stage
validates each configured facet in the fixed order headers, body, query,
params, cookies.  The first mismatch ends the request with a 400 through
``ctx.respond_with_failure``; later facets are not evaluated and the rest of
the chain never runs.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError

from hapify.core.options import ValidationOptions
from hapify.kernel.exceptions import MalformedDescriptorError, MissingSchemaError
from hapify.kernel.failures import HttpFailure
from hapify.routing.descriptor import FACET_ORDER, Facet
from hapify.web.context import RequestContext
from hapify.web.ports.stage import CallNext, Stage

logger = structlog.get_logger("hapify.web.validation")


class BodyDecodeError(ValueError):
    """The request body could not be decoded as JSON."""


def build_validation_stage(
    schema_map: Mapping[Any, Any] | None,
    options: ValidationOptions | None = None,
    descriptor: str = "",
) -> Stage:
    """Build the stage validating the facets named in *schema_map*.

    Raises:
        MissingSchemaError: If *schema_map* is ``None`` or empty.
        MalformedDescriptorError: If pydantic cannot build a validator for a schema.
    """
    if not schema_map:
        raise MissingSchemaError("Please provide a validation schema", descriptor)

    checks = _compile_checks(schema_map, descriptor)
    kwargs = (options or ValidationOptions()).as_kwargs()

    async def validate_request(ctx: RequestContext, call_next: CallNext) -> Any:
        for facet, adapter in checks:
            try:
                value = await extract_facet(ctx.request, facet)
                ctx.validated[facet.value] = adapter.validate_python(value, **kwargs)
            except ValidationError as exc:
                return ctx.respond_with_failure(_facet_failure(ctx, facet, exc))
            except BodyDecodeError as exc:
                logger.info("request_body_invalid", request_id=ctx.request_id, error=str(exc))
                return ctx.respond_with_failure(
                    HttpFailure.bad_request(str(exc), data={"facet": facet.value})
                )
        return await call_next(ctx)

    return validate_request


def _compile_checks(
    schema_map: Mapping[Any, Any], descriptor: str
) -> tuple[tuple[Facet, TypeAdapter[Any]], ...]:
    by_facet: dict[Facet, Any] = {}
    for key, schema in schema_map.items():
        facet = Facet.lookup(key)
        if facet is None:
            logger.warning("unknown_facet_ignored", facet=str(key))
            continue
        # A facet mapped to None carries no schema.
        if schema is not None:
            by_facet[facet] = schema

    checks: list[tuple[Facet, TypeAdapter[Any]]] = []
    for facet in FACET_ORDER:
        if facet in by_facet:
            checks.append((facet, _adapter_for(facet, by_facet[facet], descriptor)))
    return tuple(checks)


def _adapter_for(facet: Facet, schema: Any, descriptor: str) -> TypeAdapter[Any]:
    if isinstance(schema, TypeAdapter):
        return schema
    try:
        return TypeAdapter(schema)
    except (PydanticUserError, TypeError) as exc:
        raise MalformedDescriptorError(
            f"schema for facet '{facet.value}' is not usable: {exc}", descriptor
        ) from exc


def _facet_failure(ctx: RequestContext, facet: Facet, exc: ValidationError) -> HttpFailure:
    errors = exc.errors(include_url=False)
    detail = "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc']) or facet.value}: {e['msg']}" for e in errors
    )
    logger.info(
        "request_validation_failed",
        facet=facet.value,
        error_count=len(errors),
        request_id=ctx.request_id,
    )
    failure = HttpFailure.bad_request(
        f"{facet.value} validation failed: {detail}",
        data={"facet": facet.value, "errors": errors},
    )
    failure.__cause__ = exc
    return failure


# ---------------------------------------------------------------------------
# Facet extraction
# ---------------------------------------------------------------------------


async def extract_facet(request: Any, facet: Facet) -> Any:
    """Return the plain value of one request facet, as a schema sees it."""
    if facet is Facet.HEADERS:
        return dict(request.headers)
    if facet is Facet.BODY:
        return await _read_body(request)
    if facet is Facet.QUERY:
        return _flatten(request.query_params)
    if facet is Facet.PARAMS:
        return dict(request.path_params)
    return dict(request.cookies)


async def _read_body(request: Any) -> Any:
    raw: bytes = await request.body()
    if not raw:
        return None
    content_type = request.headers.get("content-type", "")
    if "json" not in content_type:
        return raw.decode("utf-8", errors="replace")
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise BodyDecodeError(f"Invalid JSON body: {exc}") from exc


def _flatten(params: Any) -> dict[str, Any]:
    """Single values stay scalars, repeated keys become lists."""
    flat: dict[str, Any] = {}
    for key in params.keys():
        values = params.getlist(key)
        flat[key] = values[0] if len(values) == 1 else values
    return flat
