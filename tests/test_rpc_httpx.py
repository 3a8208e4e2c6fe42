import json

import httpx
import pytest

from rpcbench.adapters.rpc_httpx import HttpxBatchRPC
from rpcbench.domain.errors import TransportError

URL = "http://rpc.test/"


def _client(handler) -> HttpxBatchRPC:
    return HttpxBatchRPC(URL, timeout_s=5, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_post_batch_sends_json_array():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"jsonrpc": "2.0", "id": 1, "result": "0x1"}])

    payload = [{"jsonrpc": "2.0", "id": 1, "method": "eth_getBlockReceipts", "params": ["0x1"]}]
    async with _client(handler) as rpc:
        reply = await rpc.post_batch(payload)

    assert seen == {"method": "POST", "content_type": "application/json", "body": payload}
    assert json.loads(reply.body) == [{"jsonrpc": "2.0", "id": 1, "result": "0x1"}]
    assert reply.latency_ms >= 0


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 429, 500, 503])
async def test_non_success_status_is_transport_error(status):
    async with _client(lambda request: httpx.Response(status, text="nope")) as rpc:
        with pytest.raises(TransportError) as ei:
            await rpc.post_batch([])
    assert ei.value.status_code == status
    assert str(status) in str(ei.value)


@pytest.mark.asyncio
async def test_network_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as rpc:
        with pytest.raises(TransportError) as ei:
            await rpc.post_batch([])
    assert ei.value.status_code is None
    assert "ConnectError" in str(ei.value)
