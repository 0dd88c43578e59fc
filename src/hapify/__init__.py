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
"""hapify — declarative route registration with validation and structured failures."""

from hapify.core.config import Config
from hapify.core.options import FailureOptions, HapifyOptions, ValidationOptions
from hapify.kernel.exceptions import (
    CapabilityNotInstalledError,
    HapifyException,
    InvalidFailureObjectError,
    MalformedDescriptorError,
    MissingSchemaError,
    RegistrationError,
    TypeMismatchError,
    UnsupportedMethodError,
)
from hapify.kernel.failures import HttpFailure
from hapify.routing.compiler import Hapify
from hapify.routing.descriptor import Facet, HttpMethod, RouteConfig, RouteDescriptor
from hapify.web.adapters.starlette.router import StarletteRouter
from hapify.web.context import RequestContext

__version__ = "0.1.0"

__all__ = [
    "CapabilityNotInstalledError",
    "Config",
    "Facet",
    "FailureOptions",
    "Hapify",
    "HapifyException",
    "HapifyOptions",
    "HttpFailure",
    "HttpMethod",
    "InvalidFailureObjectError",
    "MalformedDescriptorError",
    "MissingSchemaError",
    "RegistrationError",
    "RequestContext",
    "RouteConfig",
    "RouteDescriptor",
    "StarletteRouter",
    "TypeMismatchError",
    "UnsupportedMethodError",
    "ValidationOptions",
    "__version__",
]
