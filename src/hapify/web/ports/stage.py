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
"""Stage types — one unit of the per-route request-processing chain."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hapify.web.context import RequestContext

# Continuation handed to every stage: runs the rest of the chain.
CallNext = Callable[["RequestContext"], Awaitable[Any]]

# ``async def stage(ctx, call_next)``.  Plain functions are accepted too and
# called without awaiting.  A stage returns the response (or a value the
# adapter converts into one), returns ``await call_next(ctx)`` to continue,
# or raises.
Stage = Callable[["RequestContext", CallNext], Any]
