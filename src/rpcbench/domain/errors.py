# rpcbench/domain/errors.py
from __future__ import annotations


class RpcBenchError(Exception):
    """Base class for every error raised by rpcbench."""


class ConfigurationError(RpcBenchError):
    """Invalid or missing run configuration. Fatal, raised before any dispatch."""


class TransportError(RpcBenchError):
    """A batch request failed at the HTTP level. Fatal only to its own work unit."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AggregationError(RpcBenchError):
    """No successful sample was recorded, so latency stats are undefined."""


EmptyResultError = AggregationError
