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
"""Tests for the failure capability stage and FailureResponder."""

import json

import pytest

from hapify.core.options import FailureOptions
from hapify.kernel.exceptions import (
    CapabilityNotInstalledError,
    InvalidFailureObjectError,
    ResponseAlreadyFinalizedError,
)
from hapify.kernel.failures import HttpFailure
from hapify.web.capability import FailureResponder, failure_capability
from hapify.web.context import RequestContext, ResponseSink


def _body(response):
    return json.loads(response.body)


class TestFailureResponder:
    def test_renders_status_and_payload(self):
        sink = ResponseSink()
        response = FailureResponder(sink, FailureOptions())(HttpFailure.not_found("no such item"))
        assert response.status_code == 404
        assert _body(response) == {"statusCode": 404, "error": "Not Found", "message": "no such item"}
        assert sink.finalized
        assert sink.final is response

    def test_applies_failure_headers(self):
        sink = ResponseSink()
        response = FailureResponder(sink, FailureOptions())(HttpFailure.unauthorized(scheme="Bearer"))
        assert response.headers["www-authenticate"] == "Bearer"

    def test_applies_transform(self):
        def transform(payload):
            return {"code": payload["statusCode"], "detail": payload.get("message")}

        sink = ResponseSink()
        response = FailureResponder(sink, FailureOptions(transform=transform))(
            HttpFailure.bad_request("bad input")
        )
        assert response.status_code == 400
        assert _body(response) == {"code": 400, "detail": "bad input"}

    def test_transform_cannot_mutate_failure(self):
        def transform(payload):
            payload["statusCode"] = 999
            return payload

        failure = HttpFailure.conflict()
        FailureResponder(ResponseSink(), FailureOptions(transform=transform))(failure)
        assert failure.output.payload["statusCode"] == 409

    @pytest.mark.parametrize("value", [None, {"statusCode": 400}, ValueError("x"), "error"])
    def test_rejects_non_failures(self, value):
        sink = ResponseSink()
        with pytest.raises(InvalidFailureObjectError):
            FailureResponder(sink, FailureOptions())(value)
        assert not sink.finalized

    def test_second_failure_rejected(self):
        responder = FailureResponder(ResponseSink(), FailureOptions())
        responder(HttpFailure.bad_request())
        with pytest.raises(ResponseAlreadyFinalizedError):
            responder(HttpFailure.bad_request())


class TestCapabilityStage:
    @pytest.mark.asyncio
    async def test_installs_responder_before_continuing(self):
        ctx = RequestContext(request=None)
        seen = []

        async def call_next(inner):
            seen.append(inner.responder)
            return "done"

        result = await failure_capability(FailureOptions())(ctx, call_next)
        assert result == "done"
        assert isinstance(seen[0], FailureResponder)

    @pytest.mark.asyncio
    async def test_fresh_responder_per_request(self):
        stage = failure_capability(FailureOptions())

        async def call_next(inner):
            return None

        first, second = RequestContext(request=None), RequestContext(request=None)
        await stage(first, call_next)
        await stage(second, call_next)
        assert first.responder is not second.responder

        first.respond_with_failure(HttpFailure.forbidden())
        assert first.response.finalized
        assert not second.response.finalized

    @pytest.mark.asyncio
    async def test_renders_raised_failure(self):
        async def call_next(inner):
            raise HttpFailure.conflict("already exists")

        ctx = RequestContext(request=None)
        response = await failure_capability(FailureOptions())(ctx, call_next)
        assert response.status_code == 409
        assert _body(response)["message"] == "already exists"

    @pytest.mark.asyncio
    async def test_raised_failure_after_response_keeps_first(self):
        async def call_next(inner):
            inner.respond_with_failure(HttpFailure.bad_request("first"))
            raise HttpFailure.internal("second")

        ctx = RequestContext(request=None)
        response = await failure_capability(FailureOptions())(ctx, call_next)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        async def call_next(inner):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await failure_capability(FailureOptions())(RequestContext(request=None), call_next)


class TestRequestContext:
    def test_respond_before_install_raises(self):
        with pytest.raises(CapabilityNotInstalledError):
            RequestContext(request=None).respond_with_failure(HttpFailure.bad_request())

    def test_request_id_generated_or_kept(self):
        assert RequestContext(request=None, request_id="abc").request_id == "abc"
        assert len(RequestContext(request=None).request_id) == 32

    def test_attributes(self):
        ctx = RequestContext(request=None)
        ctx.set("user", "ada")
        assert ctx.get("user") == "ada"
        assert ctx.get("missing", 1) == 1

    def test_current(self):
        ctx = RequestContext(request=None)
        ctx.activate()
        try:
            assert RequestContext.current() is ctx
        finally:
            RequestContext.clear()
        assert RequestContext.current() is None


class TestResponseSink:
    def test_status_and_headers_applied_on_json(self):
        sink = ResponseSink()
        response = sink.status(201).set_headers({"Location": "/items/1"}).json({"id": 1})
        assert response.status_code == 201
        assert response.headers["location"] == "/items/1"
        assert _body(response) == {"id": 1}
