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
"""Response header composition for preflight and actual CORS requests.

Both composers are pure: they take the policy and the relevant request
values and return a :class:`CorsResult` describing which headers to set.
A failed check never raises; the result simply carries no headers and a
``reason`` naming the checkpoint that failed.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from corsfilter.matching import (
    RequestKind,
    are_headers_allowed,
    classify_request,
    is_method_allowed,
    is_origin_allowed,
    parse_header_list,
)
from corsfilter.policy import CORSPolicy

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
MAX_AGE = "Access-Control-Max-Age"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"

REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"


class CorsState(Enum):
    """Checkpoints a request passes through before headers are written."""

    START = "start"
    ORIGIN_CHECKED = "origin_checked"
    METHOD_CHECKED = "method_checked"
    HEADERS_CHECKED = "headers_checked"
    HEADERS_WRITTEN = "headers_written"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CorsResult:
    """Outcome of evaluating one request against a :class:`CORSPolicy`.

    ``headers`` is a read-only view that preserves insertion order, which is
    the order the headers are emitted in. For a rejected request ``reached``
    is the last checkpoint that passed and ``reason`` names the one that
    failed.
    """

    kind: RequestKind
    state: CorsState
    headers: Mapping[str, str] = field(default_factory=dict)
    reached: CorsState = CorsState.START
    reason: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def allowed(self) -> bool:
        return self.state is CorsState.HEADERS_WRITTEN


def _rejected(kind: RequestKind, reached: CorsState, reason: str) -> CorsResult:
    return CorsResult(kind=kind, state=CorsState.REJECTED, reached=reached, reason=reason)


def compose_preflight(
    policy: CORSPolicy,
    method: str,
    origin: str | None,
    request_method: str | None,
    request_headers: str | None,
) -> CorsResult:
    """Negotiate a preflight request.

    The allowed method and headers are echoed from the request rather than
    listing everything the policy permits.
    """
    kind = classify_request(method)
    state = CorsState.START
    if kind is not RequestKind.PREFLIGHT:
        return _rejected(kind, state, "not_preflight")
    if not origin:
        return _rejected(kind, state, "missing_origin")
    if not is_origin_allowed(policy, origin):
        return _rejected(kind, state, "origin_not_allowed")
    state = CorsState.ORIGIN_CHECKED

    if not is_method_allowed(policy, request_method):
        return _rejected(kind, state, "method_not_allowed")
    state = CorsState.METHOD_CHECKED

    requested = parse_header_list(request_headers)
    if not are_headers_allowed(policy, requested):
        return _rejected(kind, state, "headers_not_allowed")

    headers = {
        ALLOW_ORIGIN: origin,
        ALLOW_METHODS: (request_method or "").upper(),
    }
    if requested:
        headers[ALLOW_HEADERS] = ", ".join(requested)
    if policy.allow_credentials:
        headers[ALLOW_CREDENTIALS] = "true"
    if policy.max_age > 0:
        headers[MAX_AGE] = str(policy.max_age)

    return CorsResult(
        kind=kind,
        state=CorsState.HEADERS_WRITTEN,
        headers=headers,
        reached=CorsState.HEADERS_CHECKED,
    )


def compose_actual(policy: CORSPolicy, method: str, origin: str | None) -> CorsResult:
    """Annotate a simple or actual cross-origin request.

    The allowed method list is enforced here too, even though browsers only
    consult ``Access-Control-Allow-Methods`` at preflight; this lets a
    policy refuse a simple ``GET`` or ``POST``.
    """
    kind = classify_request(method)
    if kind is RequestKind.PREFLIGHT:
        return _rejected(kind, CorsState.START, "preflight")
    if not origin:
        return _rejected(kind, CorsState.START, "missing_origin")
    if not is_origin_allowed(policy, origin):
        return _rejected(kind, CorsState.START, "origin_not_allowed")
    if not is_method_allowed(policy, method):
        return _rejected(kind, CorsState.ORIGIN_CHECKED, "method_not_allowed")

    headers = {ALLOW_ORIGIN: origin}
    if policy.exposed_headers:
        headers[EXPOSE_HEADERS] = ", ".join(policy.exposed_headers)
    if policy.allow_credentials:
        headers[ALLOW_CREDENTIALS] = "true"
    return CorsResult(
        kind=kind,
        state=CorsState.HEADERS_WRITTEN,
        headers=headers,
        reached=CorsState.METHOD_CHECKED,
    )


def merge_missing(target: MutableMapping[str, str], headers: Mapping[str, str]) -> None:
    """Copy *headers* into *target* without replacing values already set.

    Used once the wrapped handler has run, so headers it set itself win.
    """
    for name, value in headers.items():
        if name not in target:
            target[name] = value
