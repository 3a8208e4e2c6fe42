from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import pytest

from rpcbench.domain.errors import TransportError
from rpcbench.ports.rpc import BatchReply

Responder = Callable[[list[dict[str, Any]]], Any]


def echo_logs(per_call: int = 2) -> Responder:
    """Answer every eth_getLogs call in the batch with `per_call` dummy logs."""
    def respond(payload: list[dict[str, Any]]) -> Any:
        return [{"jsonrpc": "2.0", "id": c["id"], "result": [{"logIndex": hex(i)} for i in range(per_call)]}
                for c in payload]
    return respond


class FakeBatchClient:
    """In-memory BatchRPCClient: records payloads, replies via `responder`."""

    def __init__(self, responder: Responder | None = None, *, latency_ms: float = 10.0,
                 fail_status: int | None = None, delay_s: float = 0.0) -> None:
        self.responder = responder or (lambda payload: [{"jsonrpc": "2.0", "id": c["id"], "result": {}} for c in payload])
        self.latency_ms = latency_ms
        self.fail_status = fail_status
        self.delay_s = delay_s
        self.payloads: list[list[dict[str, Any]]] = []
        self.closed = False

    async def post_batch(self, payload: list[dict[str, Any]]) -> BatchReply:
        self.payloads.append(payload)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.fail_status is not None:
            raise TransportError(f"RPC request failed with status {self.fail_status}", self.fail_status)
        body = json.dumps(self.responder(payload)).encode()
        return BatchReply(latency_ms=self.latency_ms, body=body)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeBatchClient:
    return FakeBatchClient()
