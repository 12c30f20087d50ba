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
"""Tests for the Cors handler and its three entry points."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from corsfilter.core.config import Config
from corsfilter.handler import Cors
from corsfilter.matching import RequestKind
from corsfilter.policy import CORSOptions

ALL_METHODS = ["GET", "POST", "PUT", "DELETE"]


def _request(method: str, headers: dict[str, str] | None = None) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": method, "path": "/", "query_string": b"", "headers": raw})


class _CountingApp:
    """Starlette app that records how often its route handler ran."""

    def __init__(self, cors: Cors) -> None:
        self.calls = 0

        async def hello(request: Request) -> PlainTextResponse:
            self.calls += 1
            return PlainTextResponse("hello")

        app = Starlette(routes=[Route("/hello", hello, methods=ALL_METHODS)])
        self.client = TestClient(cors.handler(app))


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestCorsConstruction:
    def test_default(self):
        cors = Cors.default()
        assert cors.policy.allowed_origins == ("*",)
        assert cors.policy.allowed_methods == ("GET", "POST")

    def test_options_normalized_once(self):
        cors = Cors(CORSOptions(allowed_origins=["Foo.com"], allowed_headers=["x-foo"]))
        assert cors.policy.allowed_origins == ("foo.com",)
        assert cors.policy.allowed_headers == ("X-Foo", "Origin")

    def test_from_config(self):
        config = Config(
            {
                "cors": {
                    "allowed_origins": ["https://app.example.com"],
                    "allowed_methods": ["get", "delete"],
                    "allow_credentials": True,
                    "max_age": 300,
                }
            }
        )
        cors = Cors.from_config(config)

        assert cors.policy.allowed_origins == ("https://app.example.com",)
        assert cors.policy.allowed_methods == ("GET", "DELETE")
        assert cors.policy.allow_credentials is True
        assert cors.policy.max_age == 300


# ---------------------------------------------------------------------------
# process()
# ---------------------------------------------------------------------------


class TestProcess:
    def test_writes_headers_into_sink(self):
        cors = Cors(CORSOptions(allow_credentials=True))
        sink: dict[str, str] = {}
        result = cors.process("GET", {"Origin": "foo.com"}, sink)

        assert result.kind is RequestKind.ACTUAL
        assert sink == {
            "Access-Control-Allow-Origin": "foo.com",
            "Access-Control-Allow-Credentials": "true",
        }

    def test_request_header_lookup_is_case_insensitive(self):
        sink: dict[str, str] = {}
        Cors.default().process(
            "OPTIONS",
            {"origin": "foo.com", "access-control-request-method": "GET"},
            sink,
        )
        assert sink["Access-Control-Allow-Methods"] == "GET"

    def test_rejected_request_leaves_sink_untouched(self):
        sink = {"X-Existing": "1"}
        result = Cors(CORSOptions(allowed_origins=["foo.com"])).process("GET", {"Origin": "bar.com"}, sink)

        assert not result.allowed
        assert sink == {"X-Existing": "1"}

    def test_no_origin_is_not_cross_origin(self):
        sink: dict[str, str] = {}
        result = Cors.default().process("GET", {}, sink)
        assert result.reason == "missing_origin"
        assert sink == {}

    def test_identical_requests_produce_identical_headers(self):
        cors = Cors(CORSOptions(allowed_headers=["X-Foo"], max_age=60))
        headers = {
            "Origin": "foo.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-Foo",
        }
        first: dict[str, str] = {}
        second: dict[str, str] = {}
        cors.process("OPTIONS", headers, first)
        cors.process("OPTIONS", headers, second)
        assert first == second


# ---------------------------------------------------------------------------
# handler(): wrapping an ASGI app
# ---------------------------------------------------------------------------


class TestHandlerEntryPoint:
    def test_scenario_a_preflight_allowed(self):
        app = _CountingApp(Cors(CORSOptions(allowed_origins=["foo.com"], allowed_methods=["GET", "POST"])))
        resp = app.client.options(
            "/hello",
            headers={"Origin": "foo.com", "Access-Control-Request-Method": "POST"},
        )

        assert resp.status_code == 200
        assert resp.text == ""
        assert resp.headers["access-control-allow-origin"] == "foo.com"
        assert resp.headers["access-control-allow-methods"] == "POST"
        assert "access-control-allow-headers" not in resp.headers
        assert app.calls == 0

    def test_scenario_b_preflight_from_unknown_origin(self):
        app = _CountingApp(Cors(CORSOptions(allowed_origins=["foo.com"], allowed_methods=["GET", "POST"])))
        resp = app.client.options(
            "/hello",
            headers={"Origin": "bar.com", "Access-Control-Request-Method": "POST"},
        )

        assert resp.status_code == 200
        assert not [h for h in resp.headers if h.startswith("access-control-")]
        assert app.calls == 0

    def test_scenario_c_credentials_echo_origin(self):
        app = _CountingApp(Cors(CORSOptions(allowed_origins=["*"], allow_credentials=True)))
        resp = app.client.get("/hello", headers={"Origin": "anything.com"})

        assert resp.status_code == 200
        assert resp.text == "hello"
        assert resp.headers["access-control-allow-origin"] == "anything.com"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert app.calls == 1

    def test_scenario_d_disallowed_method_still_reaches_handler(self):
        app = _CountingApp(Cors.default())
        resp = app.client.delete("/hello", headers={"Origin": "foo.com"})

        assert resp.status_code == 200
        assert resp.text == "hello"
        assert "access-control-allow-origin" not in resp.headers
        assert app.calls == 1

    def test_scenario_e_requested_headers_echoed_in_order(self):
        cors = Cors(CORSOptions(allowed_headers=["Content-Type", "X-Custom"]))
        app = _CountingApp(cors)
        resp = app.client.options(
            "/hello",
            headers={
                "Origin": "foo.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "X-Custom, Content-Type",
            },
        )

        assert resp.headers["access-control-allow-headers"] == "X-Custom, Content-Type"

    def test_request_without_origin_passes_through(self):
        app = _CountingApp(Cors.default())
        resp = app.client.get("/hello")

        assert resp.text == "hello"
        assert "access-control-allow-origin" not in resp.headers

    def test_app_headers_are_not_overwritten(self):
        async def custom(request: Request) -> PlainTextResponse:
            return PlainTextResponse("ok", headers={"Access-Control-Allow-Origin": "https://fixed.example"})

        app = Starlette(routes=[Route("/custom", custom)])
        client = TestClient(Cors(CORSOptions(allow_credentials=True)).handler(app))
        resp = client.get("/custom", headers={"Origin": "foo.com"})

        assert resp.headers["access-control-allow-origin"] == "https://fixed.example"
        assert resp.headers["access-control-allow-credentials"] == "true"


# ---------------------------------------------------------------------------
# serve(): explicit continuation callback
# ---------------------------------------------------------------------------


class TestServeEntryPoint:
    @pytest.mark.asyncio
    async def test_actual_request_calls_next_and_annotates(self):
        calls = []

        async def call_next(request: Request) -> PlainTextResponse:
            calls.append(request)
            return PlainTextResponse("ok")

        cors = Cors(CORSOptions(exposed_headers=["x-total-count"]))
        response = await cors.serve(_request("GET", {"Origin": "foo.com"}), call_next)

        assert len(calls) == 1
        assert response.body == b"ok"
        assert response.headers["access-control-allow-origin"] == "foo.com"
        assert response.headers["access-control-expose-headers"] == "X-Total-Count"

    @pytest.mark.asyncio
    async def test_rejected_actual_request_still_calls_next(self):
        calls = []

        async def call_next(request: Request) -> PlainTextResponse:
            calls.append(request)
            return PlainTextResponse("ok")

        cors = Cors(CORSOptions(allowed_origins=["foo.com"]))
        response = await cors.serve(_request("GET", {"Origin": "bar.com"}), call_next)

        assert len(calls) == 1
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_preflight_never_calls_next(self):
        async def call_next(request: Request) -> PlainTextResponse:
            raise AssertionError("preflight must not reach the handler")

        response = await Cors.default().serve(
            _request("OPTIONS", {"Origin": "foo.com", "Access-Control-Request-Method": "GET"}),
            call_next,
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-methods"] == "GET"

    @pytest.mark.asyncio
    async def test_rejected_preflight_never_calls_next(self):
        async def call_next(request: Request) -> PlainTextResponse:
            raise AssertionError("preflight must not reach the handler")

        response = await Cors.default().serve(
            _request("OPTIONS", {"Origin": "foo.com", "Access-Control-Request-Method": "DELETE"}),
            call_next,
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers


# ---------------------------------------------------------------------------
# apply(): headers only
# ---------------------------------------------------------------------------


class TestApplyEntryPoint:
    def test_annotates_response(self):
        response = PlainTextResponse("ok")
        result = Cors.default().apply(_request("POST", {"Origin": "foo.com"}), response)

        assert result.allowed
        assert response.headers["access-control-allow-origin"] == "foo.com"

    def test_preflight_annotates_response(self):
        response = PlainTextResponse("")
        result = Cors(CORSOptions(max_age=120)).apply(
            _request("OPTIONS", {"Origin": "foo.com", "Access-Control-Request-Method": "post"}),
            response,
        )

        assert result.kind is RequestKind.PREFLIGHT
        assert response.headers["access-control-allow-methods"] == "POST"
        assert response.headers["access-control-max-age"] == "120"

    def test_rejected_request_leaves_response_alone(self):
        response = PlainTextResponse("ok")
        result = Cors.default().apply(_request("PUT", {"Origin": "foo.com"}), response)

        assert not result.allowed
        assert "access-control-allow-origin" not in response.headers
