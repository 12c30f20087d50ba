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
"""CORS middleware for Starlette — pure ASGI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from corsfilter.composer import merge_missing
from corsfilter.matching import RequestKind

if TYPE_CHECKING:
    from corsfilter.handler import Cors


class CORSMiddleware:
    """Runs a :class:`Cors` handler in front of an ASGI application.

    Preflight requests are answered with an empty ``200`` and never reach
    the application. Any other request is passed through; negotiated CORS
    headers are added to the response start message unless the application
    already set them.

    Uses raw ASGI protocol instead of ``BaseHTTPMiddleware`` so the
    response body is streamed through untouched.
    """

    def __init__(self, app: ASGIApp, cors: Cors) -> None:
        self.app = app
        self._cors = cors

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        cors_headers: dict[str, str] = {}
        result = self._cors.process(scope["method"], Headers(scope=scope), cors_headers)

        if result.kind is RequestKind.PREFLIGHT:
            response = Response(status_code=200, headers=cors_headers)
            await response(scope, receive, send)
            return

        if not cors_headers:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Any) -> None:
            if message["type"] == "http.response.start":
                merge_missing(MutableHeaders(scope=message), cors_headers)
            await send(message)

        await self.app(scope, receive, send_with_cors)
