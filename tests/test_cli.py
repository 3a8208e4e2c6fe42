import json

import httpx
import pytest
from click.testing import CliRunner

from rpcbench.adapters.rpc_httpx import HttpxBatchRPC
from rpcbench.application import use_cases
from rpcbench.presentation.cli import cli

QUIET = {"SHOW_PROGRESS_BAR": "false", "END_BLOCK": "9", "CHUNK_SIZE": "2", "FETCH_CONCURRENCY": "3"}


@pytest.fixture
def mock_rpc(monkeypatch):
    """Route HttpxBatchRPC through an httpx.MockTransport driven by `handler`."""
    def install(handler):
        def factory(url, timeout_s=None, max_conn=64):
            return HttpxBatchRPC(url, timeout_s=timeout_s, max_conn=max_conn,
                                 transport=httpx.MockTransport(handler))
        monkeypatch.setattr(use_cases, "HttpxBatchRPC", factory)
    return install


def _echo(request: httpx.Request) -> httpx.Response:
    calls = json.loads(request.content)
    return httpx.Response(200, json=[{"jsonrpc": "2.0", "id": c["id"], "result": [{}]} for c in calls])


def test_missing_url_exits_with_1():
    result = CliRunner().invoke(cli, ["blocks"], env=QUIET)
    assert result.exit_code == 1
    assert "RPC URL is required" in result.output


def test_bad_number_exits_with_1():
    result = CliRunner().invoke(cli, ["receipts", "http://rpc.test"], env={"FETCH_CONCURRENCY": "many"})
    assert result.exit_code == 1
    assert "FETCH_CONCURRENCY" in result.output


def test_unknown_scenario_exits_with_1():
    result = CliRunner().invoke(cli, ["logs", "http://rpc.test", "nope"], env=QUIET)
    assert result.exit_code == 1
    assert 'Scenario "nope" not found' in result.output


def test_scenarios_listing():
    result = CliRunner().invoke(cli, ["scenarios"])
    assert result.exit_code == 0
    assert "usdc-approvals" in result.output and "basenames-discounts" in result.output


def test_blocks_run_prints_summary(mock_rpc):
    mock_rpc(_echo)
    result = CliRunner().invoke(cli, ["blocks", "http://rpc.test"], env=QUIET)
    assert result.exit_code == 0, result.output
    assert "=== STATS ===" in result.output
    assert "Total requests:         5" in result.output
    assert "Total blocks processed: 10" in result.output


def test_logs_run_prints_log_totals(mock_rpc):
    mock_rpc(_echo)
    env = dict(QUIET, END_BLOCK="2499", BLOCK_RANGE="1000", BATCH_SIZE="2")
    result = CliRunner().invoke(cli, ["logs", "http://rpc.test", "usdc-aave-withdrawals"], env=env)
    assert result.exit_code == 0, result.output
    assert "Total logs found:       3" in result.output
    assert "Total blocks scanned:   2500" in result.output


def test_all_failures_still_finish(mock_rpc):
    mock_rpc(lambda request: httpx.Response(502))
    result = CliRunner().invoke(cli, ["receipts", "http://rpc.test"], env=QUIET)
    assert result.exit_code == 0, result.output
    assert "No statistics available" in result.output
