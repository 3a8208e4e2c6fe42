# rpcbench/ports/rpc.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(slots=True, frozen=True)
class BatchReply:
    latency_ms: float       # send → full body received
    body: bytes


class BatchRPCClient(Protocol):
    """Port defining the contract for a JSON-RPC batch transport."""

    async def post_batch(self, payload: list[dict[str, Any]]) -> BatchReply:
        """POST one JSON-RPC batch. Raise TransportError on a non-2xx status or network failure."""

    async def aclose(self) -> None:
        """Release pooled connections."""
