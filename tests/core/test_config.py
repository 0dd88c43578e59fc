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
"""Tests for Config — dotted keys, env overrides, file loading, binding."""

from dataclasses import dataclass

import pytest

from hapify.core.config import Config, config_properties, env_key
from hapify.core.options import ValidationOptions


@config_properties(prefix="hapify.server")
@dataclass
class ServerSettings:
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    ratio: float | None = None


class TestEnvKey:
    def test_strips_namespace_and_upper_cases(self):
        assert env_key("hapify.validation.strict") == "HAPIFY_VALIDATION_STRICT"

    def test_dashes_become_underscores(self):
        assert env_key("hapify.validation.from-attributes") == "HAPIFY_VALIDATION_FROM_ATTRIBUTES"


class TestConfigGet:
    def test_dotted_key(self):
        config = Config({"hapify": {"validation": {"strict": True}}})
        assert config.get("hapify.validation.strict") is True

    def test_false_value_is_not_the_default(self):
        config = Config({"hapify": {"validation": {"strict": False}}})
        assert config.get("hapify.validation.strict", "fallback") is False

    def test_missing_key_returns_default(self):
        assert Config({}).get("hapify.nothing", "fallback") == "fallback"

    def test_key_below_scalar_is_missing(self):
        config = Config({"hapify": {"logging": "loud"}})
        assert config.get("hapify.logging.level") is None

    def test_env_var_overrides(self, monkeypatch):
        monkeypatch.setenv("HAPIFY_VALIDATION_STRICT", "true")
        config = Config({"hapify": {"validation": {"strict": False}}})
        assert config.get("hapify.validation.strict") == "true"

    def test_get_section(self):
        config = Config({"hapify": {"logging": {"level": {"root": "DEBUG"}}}})
        assert config.get_section("hapify.logging.level") == {"root": "DEBUG"}
        assert config.get_section("hapify.absent") == {}


class TestConfigFromFile:
    def test_yaml(self, tmp_path):
        (tmp_path / "app.yaml").write_text("hapify:\n  validation:\n    strict: true\n")
        config = Config.from_file(tmp_path / "app.yaml")
        assert config.get("hapify.validation.strict") is True

    def test_empty_yaml(self, tmp_path):
        (tmp_path / "app.yml").write_text("")
        assert Config.from_file(tmp_path / "app.yml").get_section("hapify") == {}

    def test_toml(self, tmp_path):
        (tmp_path / "app.toml").write_text("[hapify.validation]\nfrom_attributes = true\n")
        config = Config.from_file(str(tmp_path / "app.toml"))
        assert config.get("hapify.validation.from_attributes") is True

    def test_missing_file_gives_empty_config(self, tmp_path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get_section("hapify") == {}


class TestConfigBind:
    def test_bind_dataclass_defaults(self):
        assert Config({}).bind(ServerSettings) == ServerSettings()

    def test_bind_dataclass_values(self):
        config = Config({"hapify": {"server": {"host": "0.0.0.0", "port": 9000}}})
        settings = config.bind(ServerSettings)
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000

    def test_bind_converts_env_strings(self, monkeypatch):
        monkeypatch.setenv("HAPIFY_SERVER_PORT", "9090")
        monkeypatch.setenv("HAPIFY_SERVER_DEBUG", "yes")
        monkeypatch.setenv("HAPIFY_SERVER_RATIO", "0.5")
        settings = Config({}).bind(ServerSettings)
        assert settings.port == 9090
        assert settings.debug is True
        assert settings.ratio == 0.5

    def test_bind_optional_bool_from_env(self, monkeypatch):
        monkeypatch.setenv("HAPIFY_VALIDATION_STRICT", "off")
        assert Config({}).bind(ValidationOptions).strict is False

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            x: int = 1

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)
