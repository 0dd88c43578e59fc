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
"""Tests for HttpFailure — status, headers, payload, and wrapping."""

from http import HTTPStatus

import pytest

from hapify.kernel.failures import HttpFailure, is_failure


class TestHttpFailurePayload:
    def test_client_error_payload(self):
        failure = HttpFailure.not_found("user 42 does not exist")
        assert failure.output.status_code == 404
        assert failure.output.payload == {
            "statusCode": 404,
            "error": "Not Found",
            "message": "user 42 does not exist",
        }
        assert failure.output.headers == {}

    def test_message_omitted_when_empty(self):
        failure = HttpFailure.bad_request()
        assert failure.output.payload == {"statusCode": 400, "error": "Bad Request"}
        assert str(failure) == "Bad Request"

    def test_server_error_hides_message(self):
        failure = HttpFailure.internal("database password is hunter2")
        assert failure.output.payload["message"] == "An internal server error occurred"
        assert failure.is_server is True
        assert "hunter2" in str(failure)

    def test_unknown_status_reason(self):
        failure = HttpFailure("odd", status_code=499)
        assert failure.output.payload["error"] == "Unknown"

    def test_status_below_400_rejected(self):
        with pytest.raises(ValueError):
            HttpFailure("fine", status_code=200)


class TestHttpFailureHeaders:
    def test_unauthorized_sets_www_authenticate(self):
        failure = HttpFailure.unauthorized("token expired", scheme="Bearer")
        assert failure.output.headers == {"WWW-Authenticate": "Bearer"}
        assert failure.output.status_code == 401

    def test_method_not_allowed_sets_allow(self):
        failure = HttpFailure.method_not_allowed(allow=["GET", "POST"])
        assert failure.output.headers == {"Allow": "GET, POST"}

    def test_headers_are_copied(self):
        headers = {"Retry-After": "30"}
        failure = HttpFailure("slow down", status_code=429, headers=headers)
        headers["Retry-After"] = "0"
        assert failure.output.headers == {"Retry-After": "30"}


class TestWrap:
    def test_wrap_plain_exception(self):
        error = ValueError("age must be positive")
        failure = HttpFailure.wrap(error, 400)
        assert failure.output.status_code == 400
        assert failure.output.payload["message"] == "age must be positive"
        assert failure.__cause__ is error

    def test_wrap_with_message_prefix(self):
        failure = HttpFailure.wrap(KeyError("id"), 422, message="Lookup failed")
        assert failure.output.payload["message"] == "Lookup failed: 'id'"

    def test_wrap_existing_failure_is_identity(self):
        original = HttpFailure.conflict("duplicate")
        assert HttpFailure.wrap(original, 500) is original

    def test_wrap_defaults_to_500(self):
        failure = HttpFailure.wrap(RuntimeError("boom"))
        assert failure.output.status_code == 500


class TestIsFailure:
    def test_recognizes_failures(self):
        assert is_failure(HttpFailure.forbidden())
        assert HttpFailure.forbidden().is_failure is True

    @pytest.mark.parametrize("value", [None, {}, ValueError("x"), {"is_failure": True}])
    def test_rejects_other_values(self, value):
        assert is_failure(value) is False


class TestConvenienceConstructors:
    @pytest.mark.parametrize(
        ("factory", "status"),
        [
            (HttpFailure.bad_request, 400),
            (HttpFailure.forbidden, 403),
            (HttpFailure.not_found, 404),
            (HttpFailure.conflict, 409),
            (HttpFailure.unprocessable, 422),
        ],
    )
    def test_status_and_reason(self, factory, status):
        failure = factory("nope")
        assert failure.output.status_code == status
        assert failure.output.payload == {"statusCode": status, "error": HTTPStatus(status).phrase, "message": "nope"}

    def test_data_kept_but_not_rendered(self):
        failure = HttpFailure.unprocessable("bad item", data={"field": "price"})
        assert failure.data == {"field": "price"}
        assert "data" not in failure.output.payload
