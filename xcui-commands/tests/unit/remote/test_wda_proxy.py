from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from xcui_commands.errors import RemoteCommandError
from xcui_commands.remote.proxy import WdaProxy


def _proxy(handler, *, session_id: str | None = "S1") -> WdaProxy:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WdaProxy("http://wda.local:8100/", session_id=session_id, client=client)


def test_session_commands_are_prefixed_and_value_is_unwrapped() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"value": {"width": 390, "height": 844}, "sessionId": "S1"})

    proxy = _proxy(handler)
    value = asyncio.run(proxy.command("/window/size", "GET"))

    assert value == {"width": 390, "height": 844}
    assert str(seen[0].url) == "http://wda.local:8100/session/S1/window/size"
    assert seen[0].method == "GET"
    assert seen[0].content == b""


def test_non_session_command_and_post_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"value": None})

    proxy = _proxy(handler)
    asyncio.run(proxy.command("/wda/homescreen", "POST", {}, is_session_command=False))
    asyncio.run(proxy.command("/wda/deactivateApp", "post", {"duration": 2.0}))

    assert str(seen[0].url) == "http://wda.local:8100/wda/homescreen"
    assert json.loads(seen[0].content) == {}
    assert str(seen[1].url) == "http://wda.local:8100/session/S1/wda/deactivateApp"
    assert json.loads(seen[1].content) == {"duration": 2.0}


def test_no_session_id_means_no_prefix() -> None:
    proxy = WdaProxy("http://wda.local:8100", client=httpx.AsyncClient())
    assert proxy.url_for("wda/screen") == "http://wda.local:8100/wda/screen"


def test_w3c_error_envelope_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"value": {"error": "invalid argument", "message": "bad button", "traceback": ""}},
        )

    proxy = _proxy(handler)
    with pytest.raises(RemoteCommandError) as exc_info:
        asyncio.run(proxy.command("/wda/pressButton", "POST", {"name": "nope"}))

    err = exc_info.value
    assert err.status_code == 400
    assert err.error == "invalid argument"
    assert err.path == "/wda/pressButton"
    assert "bad button" in str(err)


def test_error_value_with_200_status_still_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"value": {"error": "unknown error", "message": "x"}})

    with pytest.raises(RemoteCommandError, match="unknown error"):
        asyncio.run(_proxy(handler).command("/wda/screen"))


def test_legacy_status_code_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": 13, "value": "An unknown server-side error"})

    with pytest.raises(RemoteCommandError):
        asyncio.run(_proxy(handler).command("/wda/screen"))


def test_transport_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteCommandError, match="ConnectError"):
        asyncio.run(_proxy(handler).command("/wda/screen"))


def test_non_json_error_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(RemoteCommandError) as exc_info:
        asyncio.run(_proxy(handler).command("/wda/screen"))
    assert exc_info.value.status_code == 502
    assert "Bad Gateway" in str(exc_info.value)


def test_unsupported_method() -> None:
    proxy = WdaProxy("http://wda.local:8100", client=httpx.AsyncClient())
    with pytest.raises(RemoteCommandError, match="unsupported HTTP method"):
        asyncio.run(proxy.command("/wda/screen", "PATCH"))
