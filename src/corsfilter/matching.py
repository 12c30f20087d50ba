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
"""Request classification and the origin, method and header predicates."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from corsfilter.policy import CORSPolicy


class RequestKind(Enum):
    PREFLIGHT = "preflight"
    ACTUAL = "actual"


def classify_request(method: str) -> RequestKind:
    """``OPTIONS`` (exact, case-sensitive) is a preflight; anything else is actual."""
    if method == "OPTIONS":
        return RequestKind.PREFLIGHT
    return RequestKind.ACTUAL


def is_origin_allowed(policy: CORSPolicy, origin: str | None) -> bool:
    """Check if *origin* may perform cross-domain requests.

    An empty or missing origin means the request is not cross-origin at all
    and is never allowed.
    """
    if not origin:
        return False
    return policy.allows_any_origin or origin.lower() in policy.allowed_origins


def is_method_allowed(policy: CORSPolicy, method: str | None) -> bool:
    """Check if *method* can be used as part of a cross-domain request.

    ``OPTIONS`` is always allowed so preflight requests for it work, unless the
    policy has no methods at all, in which case nothing is allowed.
    """
    if not policy.allowed_methods:
        return False
    method = (method or "").upper()
    if method == "OPTIONS":
        return True
    return method in policy.allowed_methods


def parse_header_list(value: str | None) -> list[str]:
    """Split an ``Access-Control-Request-Headers`` value into trimmed tokens.

    A missing or empty value yields no tokens. Empty tokens from malformed
    input (``"X-Foo,"`` or a whitespace-only value) are kept so they fail
    matching.
    """
    if not value:
        return []
    return [token.strip() for token in value.split(",")]


def are_headers_allowed(policy: CORSPolicy, requested: Sequence[str]) -> bool:
    """Every requested header must appear, case-sensitively, in the policy."""
    return all(header in policy.allowed_headers for header in requested)
