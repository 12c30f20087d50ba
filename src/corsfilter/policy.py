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
"""CORS options and the normalized, immutable policy built from them."""

from __future__ import annotations

import string
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

DEFAULT_ALLOWED_ORIGINS: tuple[str, ...] = ("*",)
DEFAULT_ALLOWED_METHODS: tuple[str, ...] = ("GET", "POST")

# RFC 7230 tchar
_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


@dataclass(frozen=True)
class CORSOptions:
    """Raw CORS options as supplied by the caller.

    Nothing is normalized here; empty lists fall back to the defaults when
    the options are turned into a :class:`CORSPolicy`.

    Attributes:
        allowed_origins: Origins a cross-domain request can be executed from.
            ``"*"`` allows every origin. Default ``["*"]``.
        allowed_methods: Methods the client may use with cross-domain
            requests. Default ``["GET", "POST"]``.
        allowed_headers: Non-simple headers the client may send. ``Origin``
            is always added.
        exposed_headers: Headers safe to expose to the client script.
        allow_credentials: Whether the request can include cookies, HTTP
            authentication or client side TLS certificates.
        max_age: How long (seconds) preflight results may be cached.
            ``0`` or less omits the header.
    """

    allowed_origins: list[str] = field(default_factory=list)
    allowed_methods: list[str] = field(default_factory=list)
    allowed_headers: list[str] = field(default_factory=list)
    exposed_headers: list[str] = field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 0


def canonical_header_key(name: str) -> str:
    """Return the canonical MIME form of a header name.

    ``"content-type"`` becomes ``"Content-Type"``. Names containing a space
    or a non-token character are returned unchanged.
    """
    if not name or any(ch not in _TOKEN_CHARS for ch in name):
        return name
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def _convert(values: Iterable[str], fn: Callable[[str], str]) -> tuple[str, ...]:
    return tuple(fn(v) for v in values)


@dataclass(frozen=True)
class CORSPolicy:
    """Normalized CORS policy, safe to share between concurrent requests.

    Origins are stored lowercase, methods uppercase and header names in
    canonical form so that request-time matching is plain comparison.
    Build it with :meth:`from_options`; constructing it directly skips the
    defaults, which is the only way to get an empty method list.
    """

    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    allowed_methods: tuple[str, ...] = DEFAULT_ALLOWED_METHODS
    allowed_headers: tuple[str, ...] = ("Origin",)
    exposed_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 0

    @classmethod
    def from_options(cls, options: CORSOptions | None = None) -> CORSPolicy:
        options = options or CORSOptions()
        origins = _convert(options.allowed_origins, str.lower)
        methods = _convert(options.allowed_methods, str.upper)
        # Some browsers always request Origin at preflight.
        headers = _convert([*options.allowed_headers, "Origin"], canonical_header_key)
        return cls(
            allowed_origins=origins or DEFAULT_ALLOWED_ORIGINS,
            allowed_methods=methods or DEFAULT_ALLOWED_METHODS,
            allowed_headers=headers,
            exposed_headers=_convert(options.exposed_headers, canonical_header_key),
            allow_credentials=options.allow_credentials,
            max_age=options.max_age,
        )

    @property
    def allows_any_origin(self) -> bool:
        return "*" in self.allowed_origins
