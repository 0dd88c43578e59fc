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
"""RouterPort — the registration entry points hapify dispatches compiled chains to.

Framework-agnostic: a concrete router (see ``hapify.web.adapters.starlette``)
receives ``(path, chain)`` and owns path matching and running the chain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hapify.web.ports.stage import Stage

Chain = tuple[Stage, ...]


@runtime_checkable
class RouterPort(Protocol):
    """One registration method per supported HTTP method, plus ``all``."""

    def get(self, path: str, chain: Chain) -> None: ...
    def post(self, path: str, chain: Chain) -> None: ...
    def put(self, path: str, chain: Chain) -> None: ...
    def delete(self, path: str, chain: Chain) -> None: ...
    def options(self, path: str, chain: Chain) -> None: ...
    def trace(self, path: str, chain: Chain) -> None: ...
    def all(self, path: str, chain: Chain) -> None: ...
