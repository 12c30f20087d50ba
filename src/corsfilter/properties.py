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
"""CORS configuration properties (cors.*)."""

from __future__ import annotations

from dataclasses import dataclass, field

from corsfilter.core.config import config_properties
from corsfilter.policy import CORSOptions


@config_properties(prefix="cors")
@dataclass
class CorsProperties:
    """Bindable view of the ``cors`` configuration section.

    Example ``cors.yaml``::

        cors:
          allowed_origins: [https://app.example.com]
          allowed_methods: [GET, POST, DELETE]
          allow_credentials: true
          max_age: 600
    """

    allowed_origins: list[str] = field(default_factory=list)
    allowed_methods: list[str] = field(default_factory=list)
    allowed_headers: list[str] = field(default_factory=list)
    exposed_headers: list[str] = field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 0

    def to_options(self) -> CORSOptions:
        return CORSOptions(
            allowed_origins=list(self.allowed_origins),
            allowed_methods=list(self.allowed_methods),
            allowed_headers=list(self.allowed_headers),
            exposed_headers=list(self.exposed_headers),
            allow_credentials=self.allow_credentials,
            max_age=self.max_age,
        )
