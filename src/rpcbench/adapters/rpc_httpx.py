from __future__ import annotations
import time, httpx
from typing import Any
from ..application.utils import elapsed_ms
from ..domain.errors import TransportError
from ..ports.rpc import BatchReply, BatchRPCClient


class HttpxBatchRPC(BatchRPCClient):
    def __init__(
        self,
        rpc_url: str,
        timeout_s: float | None = None,
        max_conn: int = 64,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        # timeout_s=None waits indefinitely; a hung request then holds its slot
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_conn, max_keepalive_connections=max(1, max_conn//2)),
            transport=transport,
        )

    async def post_batch(self, payload: list[dict[str, Any]]) -> BatchReply:
        t0 = time.perf_counter()
        try:
            r = await self.client.post(self.rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        latency = elapsed_ms(t0)
        if not r.is_success:
            raise TransportError(f"RPC request failed with status {r.status_code}", r.status_code)
        return BatchReply(latency_ms=latency, body=r.content)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "HttpxBatchRPC":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
