"""Environment → RunConfig. The only place that reads process configuration."""
from __future__ import annotations

import os
from typing import Mapping

from ..application.executor import PARAMS_BY_METHOD
from ..domain.errors import ConfigurationError
from ..domain.models import LOGS_METHOD, MAX_CONCURRENCY, RunConfig
from ..domain.scenarios import get_scenario
from ..domain.value_types import BenchKind, Method

METHOD_BY_KIND: dict[BenchKind, Method] = {
    "blocks": "eth_getBlockByNumber",
    "receipts": "eth_getBlockReceipts",
    "logs": LOGS_METHOD,
}

DEFAULT_CONCURRENCY = 5
DEFAULT_START_BLOCK = 0
DEFAULT_END_BLOCK = 1_000
DEFAULT_CHUNK_SIZE = 100
DEFAULT_BLOCK_RANGE = 1_000
DEFAULT_BATCH_SIZE = 1


def _env_int(env: Mapping[str, str], name: str, default: int, *, lo: int | None = None, hi: int | None = None) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw.replace("_", ""))
    except ValueError:
        raise ConfigurationError(f"{name} environment variable must be a number, got {raw!r}") from None
    if lo is not None and value < lo:
        raise ConfigurationError(f"{name} must be >= {lo}, got {value}")
    if hi is not None and value > hi:
        raise ConfigurationError(f"{name} must be <= {hi}, got {value}")
    return value


def _env_float(env: Mapping[str, str], name: str) -> float | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} environment variable must be a number, got {raw!r}") from None


def show_progress_bar(env: Mapping[str, str]) -> bool:
    return env.get("SHOW_PROGRESS_BAR", "true").strip().lower() != "false"


def load_settings(
    kind: BenchKind,
    rpc_url: str | None,
    scenario: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunConfig:
    env = os.environ if environ is None else environ
    if not rpc_url:
        raise ConfigurationError("RPC URL is required as the first argument")
    try:
        method = METHOD_BY_KIND[kind]
    except KeyError:
        raise ConfigurationError(f"unknown benchmark kind {kind!r}") from None

    concurrency = _env_int(env, "FETCH_CONCURRENCY", DEFAULT_CONCURRENCY, lo=0, hi=MAX_CONCURRENCY)
    show_progress = show_progress_bar(env)
    timeout_s = _env_float(env, "RPC_TIMEOUT")

    if method == LOGS_METHOD:
        sc = get_scenario(scenario)
        chunk = _env_int(env, "CHUNK_SIZE", DEFAULT_BLOCK_RANGE, lo=1)
        return RunConfig(
            rpc_url=rpc_url,
            method=method,
            start_block=_env_int(env, "START_BLOCK", sc.start_block, lo=0),
            end_block=_env_int(env, "END_BLOCK", sc.end_block, lo=0),
            concurrency=concurrency,
            block_range=_env_int(env, "BLOCK_RANGE", chunk, lo=1),
            batch_size=_env_int(env, "BATCH_SIZE", DEFAULT_BATCH_SIZE, lo=1),
            log_filter=sc.log_filter(),
            scenario=sc.name,
            show_progress=show_progress,
            timeout_s=timeout_s,
        )

    if scenario:
        raise ConfigurationError(f"scenarios only apply to log scans, got {scenario!r}")
    return RunConfig(
        rpc_url=rpc_url,
        method=method,
        start_block=_env_int(env, "START_BLOCK", DEFAULT_START_BLOCK, lo=0),
        end_block=_env_int(env, "END_BLOCK", DEFAULT_END_BLOCK, lo=0),
        concurrency=concurrency,
        chunk_size=_env_int(env, "CHUNK_SIZE", DEFAULT_CHUNK_SIZE, lo=1),
        params_for=PARAMS_BY_METHOD[method],
        show_progress=show_progress,
        timeout_s=timeout_s,
    )
