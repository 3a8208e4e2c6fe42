import asyncio
import click
from dotenv import load_dotenv

from ..adapters.progress_rich import NullProgressReporter, RichProgressReporter
from ..application.use_cases import run_benchmark
from ..domain.errors import ConfigurationError
from ..domain.scenarios import DEFAULT_SCENARIO, SCENARIOS
from ..domain.value_types import BenchKind
from .console import console, err_console, render_start, render_summary, setup_logging
from .settings import load_settings

USAGE_HINT = "Usage: rpcbench {blocks|receipts|logs} <rpc-url> [scenario-name]"


def _run(kind: BenchKind, rpc_url: str | None, scenario: str | None = None) -> None:
    try:
        config = load_settings(kind, rpc_url, scenario)
    except ConfigurationError as e:
        raise click.ClickException(f"{e}\n{USAGE_HINT}")

    render_start(config)
    progress = (RichProgressReporter(err_console, title=config.method)
                if config.show_progress else NullProgressReporter())
    report = asyncio.run(run_benchmark(config, progress))
    render_summary(report)


@click.group()
@click.option("--log-level", envvar="LOG_LEVEL", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Log verbosity (failed units are logged at WARNING)")
def cli(log_level):
    """rpcbench: load generator and latency benchmark for JSON-RPC endpoints.

    Range, concurrency and batch sizes come from the environment
    (FETCH_CONCURRENCY, START_BLOCK, END_BLOCK, CHUNK_SIZE, BLOCK_RANGE,
    BATCH_SIZE, SHOW_PROGRESS_BAR, RPC_TIMEOUT) or a .env file.
    """
    setup_logging(log_level)


@cli.command("blocks")
@click.argument("rpc_url", required=False)
def blocks_cmd(rpc_url):
    """Benchmark eth_getBlockByNumber, CHUNK_SIZE blocks per batch request."""
    _run("blocks", rpc_url)


@cli.command("receipts")
@click.argument("rpc_url", required=False)
def receipts_cmd(rpc_url):
    """Benchmark eth_getBlockReceipts, CHUNK_SIZE blocks per batch request."""
    _run("receipts", rpc_url)


@cli.command("logs")
@click.argument("rpc_url", required=False)
@click.argument("scenario", required=False, default=DEFAULT_SCENARIO)
def logs_cmd(rpc_url, scenario):
    """Benchmark eth_getLogs for a named scenario, BLOCK_RANGE blocks per call, BATCH_SIZE calls per request."""
    _run("logs", rpc_url, scenario)


@cli.command("scenarios")
def scenarios_cmd():
    """List the log-scan scenarios."""
    for name, sc in SCENARIOS.items():
        default = " [dim](default)[/]" if name == DEFAULT_SCENARIO else ""
        console.print(f"[bold]{name}[/]{default}: {sc.description} "
                      f"(blocks {sc.start_block:,}-{sc.end_block:,}, {len(sc.addresses)} address(es))")


def main() -> None:
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
