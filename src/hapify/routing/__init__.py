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
"""hapify routing — descriptors, descriptor validation and chain compilation."""

from hapify.routing.compiler import Hapify
from hapify.routing.descriptor import Facet, HttpMethod, RouteConfig, RouteDescriptor, describe
from hapify.routing.validator import validate_descriptor

__all__ = [
    "Facet",
    "Hapify",
    "HttpMethod",
    "RouteConfig",
    "RouteDescriptor",
    "describe",
    "validate_descriptor",
]
