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
"""Return value handler — converts stage results into Starlette Responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from starlette.responses import JSONResponse, Response

from hapify.web.context import RequestContext


def _to_json_data(result: Any) -> Any:
    """Normalize a handler result into a JSON-serializable value."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list) and result and isinstance(result[0], BaseModel):
        return [item.model_dump(mode="json") for item in result]
    return result


def handle_return_value(ctx: RequestContext, result: Any) -> Response:
    """Pick the response for a finished chain.

    - ``Response`` -> passed through unchanged
    - response finalized on ``ctx.response`` -> that response
    - ``None`` -> empty response (204 unless a status was set on the sink)
    - ``BaseModel``, ``dict``, ``list``, ``str``, etc. -> JSON
    """
    if isinstance(result, Response):
        return result

    sink = ctx.response
    if sink.final is not None:
        return sink.final

    if result is None:
        status_code = sink.status_code if sink.status_code != 200 else 204
        return sink.send(Response(status_code=status_code))

    return sink.send(JSONResponse(_to_json_data(result), status_code=sink.status_code))
