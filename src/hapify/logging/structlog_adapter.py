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
"""structlog-backed LoggingPort, configured from ``hapify.logging.*``.

Example ``hapify.yaml``::

    hapify:
      logging:
        format: json
        level:
          root: INFO
          hapify.web.validation: WARNING
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog

from hapify.core.config import Config

_RENDERERS: dict[str, Callable[[], structlog.types.Processor]] = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}


def _level_number(name: str) -> int:
    levels = logging.getLevelNamesMapping()
    try:
        return levels[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level '{name}'") from None


class StructlogAdapter:
    """Routes hapify's structlog events through stdlib logging to stdout."""

    def __init__(self) -> None:
        self.root_level = "INFO"
        self.format = "console"
        self.module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        levels = {str(k): str(v).upper() for k, v in config.get_section("hapify.logging.level").items()}
        fmt = str(config.get("hapify.logging.format", "console")).lower()
        if fmt not in _RENDERERS:
            raise ValueError(f"Unknown log format '{fmt}', expected one of {sorted(_RENDERERS)}")
        root = levels.pop("root", "INFO")
        root_number = _level_number(root)

        self.root_level, self.format, self.module_levels = root, fmt, levels

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                _RENDERERS[fmt](),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=root_number, force=True)
        for name, level in levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level_number(level))
