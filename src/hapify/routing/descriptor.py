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
"""Route descriptors — routes described as data.

A descriptor can be written as a plain mapping::

    {
        "method": "POST",
        "path": "/users",
        "config": {
            "handler": create_user,
            "validate": {"body": CreateUser},
            "middleware": [require_auth],
        },
    }

or with the :class:`RouteDescriptor` / :class:`RouteConfig` dataclasses.
Either form is checked by :func:`hapify.routing.validator.validate_descriptor`
and then normalized with :meth:`RouteDescriptor.from_mapping`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from hapify.kernel.exceptions import UnsupportedMethodError
from hapify.web.ports.stage import Stage


class HttpMethod(StrEnum):
    """HTTP methods a route can be registered for.  ``ALL`` matches any method."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    ALL = "ALL"

    @classmethod
    def parse(cls, value: Any, descriptor: str = "") -> HttpMethod:
        """Case-insensitive lookup; raises UnsupportedMethodError naming *value*."""
        try:
            return cls(str(value).upper())
        except ValueError:
            raise UnsupportedMethodError(str(value), descriptor) from None


class Facet(StrEnum):
    """Request parts a schema can be attached to, in evaluation order."""

    HEADERS = "headers"
    BODY = "body"
    QUERY = "query"
    PARAMS = "params"
    COOKIES = "cookies"

    @classmethod
    def lookup(cls, key: Any) -> Facet | None:
        if isinstance(key, Facet):
            return key
        if key == "path_params":
            return cls.PARAMS
        try:
            return cls(key)
        except ValueError:
            return None


FACET_ORDER: tuple[Facet, ...] = tuple(Facet)


@dataclass(frozen=True)
class RouteConfig:
    handler: Stage
    validate: Mapping[str, Any] | None = None
    middleware: tuple[Stage, ...] = ()


@dataclass(frozen=True)
class RouteDescriptor:
    method: HttpMethod | str
    path: str
    config: RouteConfig

    @classmethod
    def from_mapping(cls, data: Any) -> RouteDescriptor:
        """Normalize an already validated descriptor into its tagged form."""
        mapping = as_mapping(data)
        if mapping is None:
            raise TypeError(f"Cannot build a RouteDescriptor from {type(data).__name__}")
        config = as_mapping(mapping["config"]) or {}

        middleware = config.get("middleware")
        if middleware is None:
            stages: tuple[Stage, ...] = ()
        elif callable(middleware):
            stages = (middleware,)
        else:
            stages = tuple(middleware)

        validate = config.get("validate")
        return cls(
            method=HttpMethod.parse(mapping["method"], describe(data)),
            path=mapping["path"],
            config=RouteConfig(
                handler=config["handler"],
                validate=dict(validate) if validate is not None else None,
                middleware=stages,
            ),
        )


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    """View a descriptor or config as a mapping; ``None`` when it is not object-like."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, RouteDescriptor):
        return {"method": value.method, "path": value.path, "config": value.config}
    if isinstance(value, RouteConfig):
        data: dict[str, Any] = {"handler": value.handler}
        if value.validate is not None:
            data["validate"] = value.validate
        if value.middleware:
            data["middleware"] = list(value.middleware)
        return data
    return None


def describe(value: Any) -> str:
    """Serialize a descriptor for error messages.

    Callables and schema classes are rendered by qualified name.
    """
    try:
        return json.dumps(_plain(value), default=_label)
    except (TypeError, ValueError):
        return repr(value)


def _plain(value: Any) -> Any:
    mapping = as_mapping(value) if isinstance(value, (RouteDescriptor, RouteConfig)) else value
    if isinstance(mapping, Mapping):
        return {str(k): _plain(v) for k, v in mapping.items()}
    if isinstance(mapping, (list, tuple)):
        return [_plain(v) for v in mapping]
    return mapping


def _label(obj: Any) -> str:
    name = getattr(obj, "__qualname__", None)
    if name is not None:
        return f"<{name}>"
    return repr(obj)
