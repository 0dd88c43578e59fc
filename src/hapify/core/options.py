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
"""Immutable construction options shared by every compiled route."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from hapify.core.config import Config, config_properties

PayloadTransform = Callable[[dict[str, Any]], Any]


@config_properties(prefix="hapify.validation")
@dataclass(frozen=True)
class ValidationOptions:
    """Keyword arguments forwarded to pydantic on every facet validation.

    ``None`` leaves the schema's own setting in place.
    """

    strict: bool | None = None
    from_attributes: bool | None = None
    context: dict[str, Any] | None = None

    def as_kwargs(self) -> dict[str, Any]:
        return {
            "strict": self.strict,
            "from_attributes": self.from_attributes,
            "context": self.context,
        }


@dataclass(frozen=True)
class FailureOptions:
    """How failure payloads are rendered.

    ``transform`` receives the default payload and returns the JSON body to send.
    """

    transform: PayloadTransform | None = None


@dataclass(frozen=True)
class HapifyOptions:
    failure: FailureOptions = field(default_factory=FailureOptions)
    validation: ValidationOptions = field(default_factory=ValidationOptions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> HapifyOptions:
        """Build options from a plain mapping.

        Recognized keys are ``failure`` (alias ``boom``) and ``validation``
        (alias ``joi``); anything else is ignored.
        """
        data = data or {}
        failure = data.get("failure", data.get("boom")) or {}
        validation = data.get("validation", data.get("joi")) or {}
        if not isinstance(failure, FailureOptions):
            failure = FailureOptions(transform=failure.get("transform"))
        if not isinstance(validation, ValidationOptions):
            validation = ValidationOptions(
                strict=validation.get("strict"),
                from_attributes=validation.get("from_attributes"),
                context=validation.get("context"),
            )
        return cls(failure=failure, validation=validation)

    @classmethod
    def from_config(cls, config: Config, transform: PayloadTransform | None = None) -> HapifyOptions:
        """Bind validation options from ``hapify.validation.*``.

        The payload transform is code, so it is passed in rather than configured.
        """
        return cls(
            failure=FailureOptions(transform=transform),
            validation=config.bind(ValidationOptions),
        )


def resolve_options(options: HapifyOptions | Mapping[str, Any] | None) -> HapifyOptions:
    if isinstance(options, HapifyOptions):
        return options
    return HapifyOptions.from_mapping(options)
