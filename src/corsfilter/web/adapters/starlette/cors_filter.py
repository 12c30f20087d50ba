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
"""CORS filter — runs a :class:`Cors` handler inside the web filter chain."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.requests import Request
from starlette.responses import Response

from corsfilter.handler import Cors
from corsfilter.ordering import HIGHEST_PRECEDENCE, order
from corsfilter.web.filters import OncePerRequestFilter
from corsfilter.web.ports.filter import CallNext


@order(HIGHEST_PRECEDENCE + 100)
class CorsFilter(OncePerRequestFilter):
    """Answers preflight requests and tags actual requests with CORS headers.

    Runs near the front of the chain so preflights are answered before
    filters that would reject an unauthenticated ``OPTIONS`` request.
    """

    def __init__(
        self,
        cors: Cors | None = None,
        url_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self._cors = cors or Cors.default()
        self.url_patterns = tuple(url_patterns)
        self.exclude_patterns = tuple(exclude_patterns)

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        return await self._cors.serve(request, call_next)
