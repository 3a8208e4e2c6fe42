from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Union
from .errors import ConfigurationError
from .value_types import Address, DispatchPhase, Method, Topic

MAX_CONCURRENCY = 100_000
BLOCK_METHODS: tuple[Method, ...] = ("eth_getBlockByNumber", "eth_getBlockReceipts")
LOGS_METHOD: Method = "eth_getLogs"

ParamsBuilder = Callable[[int], list[Any]]


@dataclass(slots=True, frozen=True)
class BlockBatch:
    """Block numbers sent together as one multi-call batch request."""
    blocks: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.blocks:
            raise ValueError("BlockBatch must hold at least one block")
        if self.blocks[0] < 0:
            raise ValueError(f"negative block number: {self.blocks[0]}")

    @property
    def first_block(self) -> int: return self.blocks[0]

    @property
    def last_block(self) -> int: return self.blocks[-1]

    @property
    def block_count(self) -> int: return len(self.blocks)

    def label(self) -> str:
        if len(self.blocks) == 1:
            return f"block {self.first_block}"
        return f"blocks {self.first_block}-{self.last_block}"


@dataclass(slots=True, frozen=True)
class RangeBatch:
    """Inclusive (from, to) windows sent together as one eth_getLogs batch."""
    windows: tuple[tuple[int, int], ...]

    def __post_init__(self) -> None:
        if not self.windows:
            raise ValueError("RangeBatch must hold at least one window")
        for fb, tb in self.windows:
            if fb < 0 or fb > tb:
                raise ValueError(f"invalid window ({fb}, {tb})")

    @property
    def first_block(self) -> int: return self.windows[0][0]

    @property
    def last_block(self) -> int: return self.windows[-1][1]

    @property
    def block_count(self) -> int:
        return sum(tb - fb + 1 for fb, tb in self.windows)

    def label(self) -> str:
        n = len(self.windows)
        return f"ranges {self.first_block}-{self.last_block} ({n} window{'s' if n != 1 else ''})"


WorkUnit = Union[BlockBatch, RangeBatch]


@dataclass(slots=True, frozen=True)
class LogFilter:
    addresses: tuple[Address, ...]
    topics: tuple[Topic | None, ...] = ()

    def to_params(self, from_block: str, to_block: str) -> dict[str, Any]:
        return {
            "fromBlock": from_block,
            "toBlock": to_block,
            "address": list(self.addresses),
            "topics": list(self.topics),
        }


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Everything one benchmark run needs, resolved once before dispatch."""
    rpc_url: str
    method: Method
    start_block: int
    end_block: int
    concurrency: int = 5
    chunk_size: int = 100              # blocks per batch (per-block methods)
    block_range: int = 1_000           # window width (eth_getLogs)
    batch_size: int = 1                # windows per HTTP request (eth_getLogs)
    params_for: ParamsBuilder | None = field(default=None, compare=False)
    log_filter: LogFilter | None = None
    scenario: str | None = None
    show_progress: bool = True
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ConfigurationError("RPC URL is required")
        if not self.rpc_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"RPC URL must be http(s): {self.rpc_url!r}")
        if self.start_block < 0:
            raise ConfigurationError(f"start block must be >= 0, got {self.start_block}")
        if self.start_block > self.end_block:
            raise ConfigurationError(
                f"start block ({self.start_block}) must be <= end block ({self.end_block})")
        if not 1 <= self.concurrency <= MAX_CONCURRENCY:
            raise ConfigurationError(
                f"concurrency must be between 1 and {MAX_CONCURRENCY}, got {self.concurrency}")
        if self.chunk_size < 1 or self.block_range < 1 or self.batch_size < 1:
            raise ConfigurationError("chunk size, block range and batch size must be positive")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout_s}")
        if self.method == LOGS_METHOD:
            if self.log_filter is None:
                raise ConfigurationError("eth_getLogs runs need a log filter")
        elif self.method in BLOCK_METHODS:
            if self.params_for is None:
                raise ConfigurationError(f"{self.method} runs need a params builder")
        else:
            raise ConfigurationError(f"unsupported method {self.method!r}")

    @property
    def total_blocks(self) -> int: return self.end_block - self.start_block + 1


@dataclass(slots=True, frozen=True)
class RequestResult:
    latency_ms: float
    block_count: int
    logs_found: int = 0
    from_block: int | None = None      # None: the response covered no requested window
    to_block: int | None = None
    rpc_errors: int = 0


@dataclass(slots=True)
class RunState:
    """Mutable state of a single dispatcher run. Never shared between runs."""
    total_units: int
    next_index: int = 0
    outstanding: int = 0
    peak_outstanding: int = 0
    phase: DispatchPhase = "idle"
    latencies: list[float] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    blocks: int = 0
    logs: int = 0
    rpc_errors: int = 0
    started_at: float = 0.0
    finished_at: float = 0.0

    @property
    def exhausted(self) -> bool: return self.next_index >= self.total_units

    @property
    def completed(self) -> int: return self.succeeded + self.failed

    @property
    def elapsed_ms(self) -> float: return (self.finished_at - self.started_at) * 1000.0


@dataclass(slots=True, frozen=True)
class RunStats:
    requests: int
    failed: int
    blocks: int
    logs: int
    min_ms: float
    max_ms: float
    mean_ms: float
    p50_ms: float
    p95_ms: float
    total_ms: float
    requests_per_s: float
    blocks_per_s: float
    logs_per_s: float
