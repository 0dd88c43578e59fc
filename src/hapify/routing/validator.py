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
"""Structural checks run on every descriptor before a chain is compiled."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from hapify.kernel.exceptions import MalformedDescriptorError
from hapify.routing.descriptor import as_mapping, describe


def validate_descriptor(descriptor: Any) -> None:
    """Raise MalformedDescriptorError unless *descriptor* has the required shape.

    Only structure is checked: ``path`` syntax and schema contents are left to
    the router and the validation stage.  Unknown fields are ignored.
    """
    route = as_mapping(descriptor) or {}
    route_str = describe(descriptor)

    for key in ("method", "path", "config"):
        if key not in route:
            raise MalformedDescriptorError(f"'{key}' missing from route : {route_str}", route_str)

    config = as_mapping(route["config"])
    if config is None:
        raise MalformedDescriptorError(f"'config' must be an object for route : {route_str}", route_str)

    if "handler" not in config:
        raise MalformedDescriptorError(f"'handler' missing from route.config : {route_str}", route_str)

    if not callable(config["handler"]):
        raise MalformedDescriptorError(
            f"'handler' must be a function for route.config.handler : {route_str}", route_str
        )

    if "validate" in config and not isinstance(config["validate"], Mapping):
        raise MalformedDescriptorError(
            f"'validate' must be an object for route.config.validate : {route_str}", route_str
        )

    if "middleware" in config and not _is_middleware(config["middleware"]):
        raise MalformedDescriptorError(
            "'middleware' must be a function or list of functions for route.config.middleware : "
            f"{route_str}",
            route_str,
        )


def _is_middleware(value: Any) -> bool:
    if callable(value):
        return True
    return isinstance(value, (list, tuple)) and all(callable(stage) for stage in value)
