"""
Tests for HttpxTransport — mock httpx.AsyncClient, verify the kwargs it
receives and how responses are classified.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from apinodes.transport import ApiRequest, HttpxTransport, TransportFailure, TransportResponse


def _make_response(status_code=200, json_data=None, text=None):
    """Helper to create a mock httpx response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.http_version = "HTTP/2"
    if json_data is None and text is None:
        resp.content = b""
        resp.text = ""
        resp.json.side_effect = ValueError("no body")
    elif json_data is not None:
        resp.content = b"{...}"
        resp.text = str(json_data)
        resp.json.return_value = json_data
    else:
        resp.content = text.encode()
        resp.text = text
        resp.json.side_effect = ValueError("not json")
    return resp


@pytest.fixture
def mock_httpx_client(monkeypatch):
    """Mocks httpx.AsyncClient to prevent actual network calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.request.return_value = _make_response(json_data={"ok": True})
    mock_client.aclose = AsyncMock()

    monkeypatch.setattr("httpx.AsyncClient", lambda **kwargs: mock_client)
    return mock_client


@pytest.mark.asyncio
async def test_get_without_body_sends_no_json(mock_httpx_client):
    transport = HttpxTransport()
    request = ApiRequest(
        method="GET",
        url="https://api.test/things",
        headers={"Content-Type": "application/json"},
        query={"limit": 100, "offset": 0},
    )

    result = await transport.send(request)

    assert result == TransportResponse(status_code=200, data={"ok": True})
    call = mock_httpx_client.request.call_args
    assert call.args == ("GET", "https://api.test/things")
    assert call.kwargs["params"] == {"limit": 100, "offset": 0}
    assert "json" not in call.kwargs


@pytest.mark.asyncio
async def test_post_body_sent_as_json(mock_httpx_client):
    transport = HttpxTransport()

    await transport.send(ApiRequest(method="POST", url="https://api.test/x", body={"a": 1}))

    call = mock_httpx_client.request.call_args
    assert call.kwargs["json"] == {"a": 1}
    assert "params" not in call.kwargs


@pytest.mark.asyncio
async def test_error_status_returns_failure_with_structured_body(mock_httpx_client):
    mock_httpx_client.request.return_value = _make_response(403, json_data={"message": "Invalid key"})
    transport = HttpxTransport()

    result = await transport.send(ApiRequest(method="GET", url="https://api.test/x"))

    assert isinstance(result, TransportFailure)
    assert result.status_code == 403
    assert result.structured_body == {"message": "Invalid key"}


@pytest.mark.asyncio
async def test_error_status_with_text_body(mock_httpx_client):
    mock_httpx_client.request.return_value = _make_response(404, text="Lead not found")
    transport = HttpxTransport()

    result = await transport.send(ApiRequest(method="GET", url="https://api.test/x"))

    assert isinstance(result, TransportFailure)
    assert result.raw_body == "Lead not found"
    assert result.structured_body is None


@pytest.mark.asyncio
async def test_no_content_returns_none(mock_httpx_client):
    mock_httpx_client.request.return_value = _make_response(204)
    transport = HttpxTransport()

    result = await transport.send(ApiRequest(method="DELETE", url="https://api.test/x"))

    assert result == TransportResponse(status_code=204, data=None)


@pytest.mark.asyncio
async def test_malformed_success_body_raises(mock_httpx_client):
    mock_httpx_client.request.return_value = _make_response(200, text="<html>")
    transport = HttpxTransport()

    with pytest.raises(ValueError):
        await transport.send(ApiRequest(method="GET", url="https://api.test/x"))


@pytest.mark.asyncio
async def test_network_errors_are_not_wrapped(mock_httpx_client):
    mock_httpx_client.request.side_effect = httpx.ReadTimeout("timed out")
    transport = HttpxTransport()

    with pytest.raises(httpx.ReadTimeout):
        await transport.send(ApiRequest(method="GET", url="https://api.test/x"))


@pytest.mark.asyncio
async def test_unknown_method_rejected(mock_httpx_client):
    transport = HttpxTransport()

    with pytest.raises(ValueError, match="Unsupported HTTP method"):
        await transport.send(ApiRequest(method="FETCH", url="https://api.test/x"))
    mock_httpx_client.request.assert_not_called()


@pytest.mark.asyncio
async def test_aclose_closes_pool(mock_httpx_client):
    transport = HttpxTransport()

    await transport.aclose()

    mock_httpx_client.aclose.assert_awaited_once()
