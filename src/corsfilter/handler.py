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
"""Cors — applies a CORS policy to requests and annotates responses.

Configure it once and plug it in through whichever entry point the host
framework expects::

    cors = Cors(CORSOptions(
        allowed_origins=["foo.com"],
        allowed_methods=["GET", "POST", "DELETE"],
        allow_credentials=True,
    ))

    app = cors.handler(app)                      # wrap an ASGI app
    response = await cors.serve(request, call_next)  # filter with continuation
    cors.apply(request, response)                # headers only

All three share :meth:`Cors.process`; they only differ in how the wrapped
handler is continued. Preflight (``OPTIONS``) requests are always answered
here and never reach the wrapped handler. Every other request always
reaches it, whether or not CORS headers were added.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from corsfilter.composer import (
    REQUEST_HEADERS,
    REQUEST_METHOD,
    CorsResult,
    compose_actual,
    compose_preflight,
    merge_missing,
)
from corsfilter.core.config import Config
from corsfilter.logging.structlog_adapter import configure_logging
from corsfilter.matching import RequestKind, classify_request
from corsfilter.policy import CORSOptions, CORSPolicy
from corsfilter.properties import CorsProperties
from corsfilter.web.adapters.starlette.cors_middleware import CORSMiddleware
from corsfilter.web.ports.filter import CallNext

logger = structlog.get_logger("corsfilter.handler")


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


class Cors:
    """CORS handler holding one immutable :class:`CORSPolicy`."""

    def __init__(self, options: CORSOptions | None = None) -> None:
        self._policy = CORSPolicy.from_options(options)
        logger.debug(
            "cors_policy_created",
            allowed_origins=list(self._policy.allowed_origins),
            allowed_methods=list(self._policy.allowed_methods),
            allow_credentials=self._policy.allow_credentials,
        )

    @classmethod
    def default(cls) -> Cors:
        """Create a handler with default options."""
        return cls(CORSOptions())

    @classmethod
    def from_config(cls, config: Config) -> Cors:
        """Create a handler from the ``cors`` section of *config*.

        A ``cors.logging`` section, when present, configures logging first
        so the policy's own events are already routed.
        """
        if config.get_section("cors.logging"):
            configure_logging(config)
        return cls(config.bind(CorsProperties).to_options())

    @property
    def policy(self) -> CORSPolicy:
        return self._policy

    def process(
        self,
        method: str,
        request_headers: Mapping[str, str],
        response_headers: MutableMapping[str, str],
    ) -> CorsResult:
        """Evaluate one request and write any CORS headers into *response_headers*.

        Returns the :class:`CorsResult`; ``result.kind`` tells the caller
        whether to short-circuit (preflight) or continue (actual).
        """
        origin = _get_header(request_headers, "Origin")
        if classify_request(method) is RequestKind.PREFLIGHT:
            result = compose_preflight(
                self._policy,
                method,
                origin,
                _get_header(request_headers, REQUEST_METHOD),
                _get_header(request_headers, REQUEST_HEADERS),
            )
        else:
            result = compose_actual(self._policy, method, origin)

        if result.allowed:
            for name, value in result.headers.items():
                response_headers[name] = value
        elif origin:
            logger.debug(
                "cors_rejected",
                kind=result.kind.value,
                method=method,
                origin=origin,
                reason=result.reason,
            )
        return result

    def handler(self, app: ASGIApp) -> ASGIApp:
        """Wrap an ASGI application."""
        return CORSMiddleware(app, cors=self)

    async def serve(self, request: Request, call_next: CallNext) -> Response:
        """Handle *request*, continuing with *call_next* for actual requests."""
        cors_headers: dict[str, str] = {}
        result = self.process(request.method, request.headers, cors_headers)
        if result.kind is RequestKind.PREFLIGHT:
            return Response(status_code=200, headers=cors_headers)

        response: Any = await call_next(request)
        merge_missing(response.headers, cors_headers)
        return response

    def apply(self, request: Request, response: Response) -> CorsResult:
        """Annotate *response* only; the caller decides how to continue."""
        return self.process(request.method, request.headers, response.headers)
