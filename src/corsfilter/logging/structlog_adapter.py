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
"""StructlogAdapter — LoggingPort driven by the ``cors.logging`` section.

Example ``cors.yaml``::

    cors:
      logging:
        format: json
        level:
          root: WARNING
          corsfilter.handler: DEBUG   # show cors_rejected events

``Cors.from_config`` applies this section automatically when present.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any

import structlog

from corsfilter.core.config import Config, config_properties
from corsfilter.exceptions import ConfigurationException

RENDERERS = ("console", "json")


@config_properties(prefix="cors.logging")
@dataclass
class LoggingProperties:
    """Bindable view of ``cors.logging``; ``level`` maps logger name to level."""

    format: str = "console"
    level: dict = field(default_factory=dict)


class StructlogAdapter:
    """Routes corsfilter's structlog events through stdlib logging."""

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}

    @property
    def root_level(self) -> str:
        return self._root_level

    @property
    def format(self) -> str:
        return self._format

    @property
    def module_levels(self) -> dict[str, str]:
        return dict(self._module_levels)

    def configure(self, config: Config) -> None:
        props = config.bind(LoggingProperties)
        renderer = str(props.format).lower()
        if renderer not in RENDERERS:
            raise ConfigurationException(
                f"Unknown log format {props.format!r}, expected one of {', '.join(RENDERERS)}",
                code="CONFIG_003",
                context={"key": "cors.logging.format", "value": props.format},
            )

        levels = {str(name): str(level).upper() for name, level in props.level.items()}
        self._root_level = levels.pop("root", "INFO")
        self._module_levels = levels
        self._format = renderer

        structlog.configure(
            processors=self._processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=_to_level(self._root_level),
            force=True,
        )
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_to_level(level))

    def _processors(self) -> list[structlog.types.Processor]:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))
        return processors


def _to_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(config: Config) -> StructlogAdapter:
    """Configure logging from ``cors.logging`` and return the adapter."""
    adapter = StructlogAdapter()
    adapter.configure(config)
    return adapter
