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
"""Configuration for hapify: a YAML/TOML mapping with env overrides and dataclass binding."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_PREFIX_ATTR = "__hapify_config_prefix__"

_TRUTHY = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable from the ``prefix`` section.

    Usage:
        @config_properties(prefix="hapify.validation")
        @dataclass(frozen=True)
        class ValidationOptions:
            strict: bool | None = None
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """``hapify.validation.strict`` -> ``HAPIFY_VALIDATION_STRICT``."""
    name = key.removeprefix("hapify.").upper().replace(".", "_").replace("-", "_")
    return f"HAPIFY_{name}"


class Config:
    """Nested settings read with dotted keys.

    An environment variable named by :func:`env_key` wins over the stored value.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Read a ``.toml`` file, or YAML for any other suffix.

        A file that does not exist gives an empty configuration.
        """
        path = Path(path)
        if not path.exists():
            return cls()
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return cls(tomllib.load(f))
        with open(path) as f:
            return cls(yaml.safe_load(f) or {})

    def get(self, key: str, default: Any = None) -> Any:
        override = os.environ.get(env_key(key))
        if override is not None:
            return override
        value = self._walk(key)
        return default if value is None else value

    def get_section(self, prefix: str) -> dict[str, Any]:
        section = self._walk(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Instantiate a ``@config_properties`` dataclass from its section.

        Fields missing from both the section and the environment keep their
        defaults; environment strings are converted to the field's scalar type.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(config_cls)
        values: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            if isinstance(value, str):
                value = _from_env_string(value, hints.get(field.name))
            values[field.name] = value
        return config_cls(**values)

    def _walk(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node


def _from_env_string(value: str, annotation: Any) -> Any:
    if annotation in (bool, bool | None):
        return value.strip().lower() in _TRUTHY
    if annotation in (int, int | None):
        return int(value)
    if annotation in (float, float | None):
        return float(value)
    return value
