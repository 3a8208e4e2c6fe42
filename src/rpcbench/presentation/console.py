from __future__ import annotations
import logging
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from ..application.use_cases import BenchmarkReport
from ..domain.models import LOGS_METHOD, RunConfig

console = Console()
# logs and the live progress bar share stderr so log lines render above the bar
err_console = Console(stderr=True)


def setup_logging(level: str = "WARNING") -> None:
    root = logging.getLogger("rpcbench")
    root.setLevel(level.upper())
    if not root.handlers:
        root.addHandler(RichHandler(console=err_console, show_path=False, markup=False))


def render_start(config: RunConfig) -> None:
    lines = [
        f"RPC URL:     {config.rpc_url}",
        f"Start Block: {config.start_block}",
        f"End Block:   {config.end_block}",
        f"Concurrency: {config.concurrency}",
    ]
    if config.method == LOGS_METHOD:
        lines += [
            f"Scenario:    {config.scenario}",
            f"Block Range: {config.block_range}",
            f"Batch Size:  {config.batch_size}",
        ]
    else:
        lines.append(f"Chunk Size:  {config.chunk_size}")
    console.print(Panel("\n".join(lines), title=f"[bold]{config.method}[/]", expand=False))


def render_summary(report: BenchmarkReport) -> None:
    s, st = report.stats, report.state
    console.print("[bold]=== STATS ===[/]")
    if s is None:
        console.print(f"Total requests:         0  ([red]failed[/]={st.failed})")
        console.print("No statistics available: no request succeeded.")
        return
    is_logs = report.config.method == LOGS_METHOD
    console.print(f"Total requests:         {s.requests}")
    console.print(f"Failed requests:        {s.failed}")
    if is_logs:
        console.print(f"Total logs found:       {s.logs}")
        console.print(f"Total blocks scanned:   {s.blocks}")
    else:
        console.print(f"Total blocks processed: {s.blocks}")
    console.print(f"Min request time (ms):  {s.min_ms:.2f}")
    console.print(f"Max request time (ms):  {s.max_ms:.2f}")
    console.print(f"Avg request time (ms):  {s.mean_ms:.2f}")
    console.print(f"p50 request time (ms):  {s.p50_ms:.2f}")
    console.print(f"p95 request time (ms):  {s.p95_ms:.2f}")
    console.print(f"Total time (ms):        {s.total_ms:.2f}")
    console.print(f"Requests per second:    {s.requests_per_s:.2f}")
    if is_logs:
        console.print(f"Logs per second:        {s.logs_per_s:.2f}")
    console.print(f"Blocks per second:      {s.blocks_per_s:.2f}")
    if st.rpc_errors:
        console.print(f"[yellow]JSON-RPC errors:[/]        {st.rpc_errors}")
