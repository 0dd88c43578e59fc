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
"""Tests for the hapify exception hierarchy."""

import pytest

from hapify.kernel.exceptions import (
    CapabilityNotInstalledError,
    HapifyException,
    InvalidFailureObjectError,
    MalformedDescriptorError,
    MissingSchemaError,
    RegistrationError,
    RequestHandlingError,
    ResponseAlreadyFinalizedError,
    TypeMismatchError,
    UnsupportedMethodError,
)


class TestRegistrationErrors:
    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (MalformedDescriptorError, "MALFORMED_DESCRIPTOR"),
            (TypeMismatchError, "TYPE_MISMATCH"),
            (MissingSchemaError, "MISSING_SCHEMA"),
        ],
    )
    def test_code_and_descriptor(self, exc_type, code):
        exc = exc_type("bad route", descriptor='{"path": "/x"}')
        assert isinstance(exc, RegistrationError)
        assert exc.code == code
        assert exc.descriptor == '{"path": "/x"}'
        assert exc.context == {"descriptor": '{"path": "/x"}'}

    def test_unsupported_method_names_input(self):
        exc = UnsupportedMethodError("patch")
        assert str(exc) == "'patch' not supported"
        assert exc.method == "patch"
        assert exc.code == "UNSUPPORTED_METHOD"


class TestRequestHandlingErrors:
    @pytest.mark.parametrize(
        "exc_type",
        [InvalidFailureObjectError, CapabilityNotInstalledError, ResponseAlreadyFinalizedError],
    )
    def test_caught_as_request_handling_error(self, exc_type):
        with pytest.raises(RequestHandlingError) as info:
            raise exc_type("misuse")
        assert isinstance(info.value, HapifyException)
        assert not isinstance(info.value, RegistrationError)
        assert info.value.context == {}
