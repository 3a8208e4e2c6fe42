from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Callable, Sequence, TypeVar

from ..domain.errors import TransportError
from ..domain.models import LOGS_METHOD, BlockBatch, LogFilter, ParamsBuilder, RangeBatch, RequestResult
from ..domain.value_types import Method
from ..ports.rpc import BatchRPCClient
from .utils import to_hex_block

T = TypeVar("T")


def build_batch(method: str, items: Sequence[T], params_for: Callable[[T], list[Any]]) -> list[dict[str, Any]]:
    """One JSON-RPC call object per item, ids 1..n in item order."""
    return [
        {"jsonrpc": "2.0", "id": i, "method": method, "params": params_for(item)}
        for i, item in enumerate(items, start=1)
    ]


def block_by_number_params(n: int) -> list[Any]: return [to_hex_block(n), False]
def block_receipts_params(n: int) -> list[Any]: return [to_hex_block(n)]

PARAMS_BY_METHOD: dict[str, ParamsBuilder] = {
    "eth_getBlockByNumber": block_by_number_params,
    "eth_getBlockReceipts": block_receipts_params,
}


@dataclass(slots=True, frozen=True)
class LogsCoverage:
    logs_found: int
    from_block: int | None
    to_block: int | None
    rpc_errors: int = 0
    covered_blocks: int = 0     # blocks in answered windows, not the from..to span


def summarize_logs_response(data: Any, windows: Sequence[tuple[int, int]]) -> LogsCoverage:
    """Count returned logs and the blocks actually answered.

    Entries are matched back to `windows` by their 1-based id; entries with an
    unknown or repeated id are ignored and entries carrying an `error` cover
    nothing. `from_block`/`to_block` are None when no entry matched.
    """
    entries = data if isinstance(data, list) else [data]
    logs = errors = covered = 0
    lo: int | None = None
    hi: int | None = None
    seen: set[int] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        rid = entry.get("id")
        if not isinstance(rid, int) or isinstance(rid, bool) or not 1 <= rid <= len(windows):
            continue
        if rid in seen:
            continue
        seen.add(rid)
        if entry.get("error") is not None:
            errors += 1
            continue
        result = entry.get("result")
        if isinstance(result, list):
            logs += len(result)
        fb, tb = windows[rid - 1]
        covered += tb - fb + 1
        lo = fb if lo is None else min(lo, fb)
        hi = tb if hi is None else max(hi, tb)
    return LogsCoverage(logs_found=logs, from_block=lo, to_block=hi, rpc_errors=errors, covered_blocks=covered)


class BlockRequestExecutor:
    """Sends one per-block batch (eth_getBlockByNumber / eth_getBlockReceipts) per BlockBatch."""

    def __init__(self, client: BatchRPCClient, method: Method, params_for: ParamsBuilder) -> None:
        self.client = client
        self.method = method
        self.params_for = params_for

    async def __call__(self, unit: BlockBatch) -> RequestResult:
        reply = await self.client.post_batch(build_batch(self.method, unit.blocks, self.params_for))
        return RequestResult(latency_ms=reply.latency_ms, block_count=unit.block_count)


class LogsRequestExecutor:
    """Sends one eth_getLogs call per window of a RangeBatch, all in one HTTP batch."""

    def __init__(self, client: BatchRPCClient, log_filter: LogFilter) -> None:
        self.client = client
        self.log_filter = log_filter

    def _params(self, window: tuple[int, int]) -> list[Any]:
        fb, tb = window
        return [self.log_filter.to_params(to_hex_block(fb), to_hex_block(tb))]

    async def __call__(self, unit: RangeBatch) -> RequestResult:
        reply = await self.client.post_batch(build_batch(LOGS_METHOD, unit.windows, self._params))
        try:
            data = json.loads(reply.body)
        except ValueError as e:
            raise TransportError(f"malformed JSON-RPC response body: {e}") from e
        cov = summarize_logs_response(data, unit.windows)
        return RequestResult(
            latency_ms=reply.latency_ms,
            block_count=cov.covered_blocks,
            logs_found=cov.logs_found,
            from_block=cov.from_block,
            to_block=cov.to_block,
            rpc_errors=cov.rpc_errors,
        )
