from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from rpcbench.adapters.progress_rich import NullProgressReporter
from rpcbench.adapters.rpc_httpx import HttpxBatchRPC
from ..domain.errors import ConfigurationError
from ..domain.models import (
    LOGS_METHOD, BlockBatch, RangeBatch, RequestResult, RunConfig, RunState, RunStats, WorkUnit,
)
from ..ports.progress import ProgressReporter
from ..ports.rpc import BatchRPCClient
from .dispatcher import BoundedDispatcher, Execute
from .executor import BlockRequestExecutor, LogsRequestExecutor
from .planning import create_blocks_list, create_range_batches
from .stats import summarize_state

log = logging.getLogger(__name__)

ProgressText = Callable[[WorkUnit, RequestResult, RunState], str]


@dataclass(slots=True, frozen=True)
class BenchmarkReport:
    config: RunConfig
    state: RunState
    stats: RunStats | None      # None: no request succeeded


async def _dispatch(
    config: RunConfig,
    units: Sequence[WorkUnit],
    execute: Execute,
    progress: ProgressReporter,
    progress_text: ProgressText | None = None,
) -> BenchmarkReport:
    def on_success(unit: WorkUnit, result: RequestResult, state: RunState) -> None:
        progress.advance(progress_text(unit, result, state) if progress_text else None)

    def on_failure(unit: WorkUnit, err: BaseException, state: RunState) -> None:
        progress.advance()

    dispatcher: BoundedDispatcher[WorkUnit] = BoundedDispatcher(
        execute, config.concurrency, on_success=on_success, on_failure=on_failure,
    )
    progress.start(len(units), description=f"{config.start_block:,}-{config.end_block:,}")
    try:
        state = await dispatcher.run(units)
    finally:
        progress.finish()

    stats = summarize_state(state)
    if stats is None:
        log.warning("%s: all %d requests failed, no statistics available", config.method, state.failed)
    elif state.failed:
        log.warning("%s: %d of %d requests failed", config.method, state.failed, state.total_units)
    return BenchmarkReport(config=config, state=state, stats=stats)


async def run_block_benchmark(
    config: RunConfig,
    client: BatchRPCClient,
    progress: ProgressReporter | None = None,
) -> BenchmarkReport:
    """eth_getBlockByNumber / eth_getBlockReceipts over [start, end] in batches of `chunk_size`."""
    if config.params_for is None:
        raise ConfigurationError(f"{config.method} is not a per-block method")
    units: list[BlockBatch] = create_blocks_list(config.start_block, config.end_block, config.chunk_size)
    execute = BlockRequestExecutor(client, config.method, config.params_for)
    return await _dispatch(config, units, execute, progress or NullProgressReporter())


def _logs_progress_text(unit: WorkUnit, result: RequestResult, state: RunState) -> str:
    return (f"logs {state.logs:,} • blocks {state.blocks:,} • "
            f"last {unit.first_block:,}-{unit.last_block:,}: {result.logs_found} logs "
            f"in {result.latency_ms:.0f}ms")


async def run_logs_benchmark(
    config: RunConfig,
    client: BatchRPCClient,
    progress: ProgressReporter | None = None,
) -> BenchmarkReport:
    """eth_getLogs over windows of `block_range` blocks, `batch_size` windows per HTTP request."""
    if config.log_filter is None:
        raise ConfigurationError(f"{config.method} runs carry no log filter")
    units: list[RangeBatch] = create_range_batches(
        config.start_block, config.end_block, config.block_range, config.batch_size)
    execute = LogsRequestExecutor(client, config.log_filter)
    return await _dispatch(config, units, execute, progress or NullProgressReporter(), _logs_progress_text)


async def run_benchmark(config: RunConfig, progress: ProgressReporter | None = None) -> BenchmarkReport:
    """Open an httpx client for `config.rpc_url` and run the benchmark its method calls for."""
    async with HttpxBatchRPC(
        config.rpc_url,
        timeout_s=config.timeout_s,
        max_conn=max(64, config.concurrency),
    ) as client:
        if config.method == LOGS_METHOD:
            return await run_logs_benchmark(config, client, progress)
        return await run_block_benchmark(config, client, progress)
