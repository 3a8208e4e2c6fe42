from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

from ..domain.models import RequestResult, RunState

log = logging.getLogger(__name__)

W = TypeVar("W")

Execute = Callable[[W], Awaitable[RequestResult]]
SuccessHook = Callable[[W, RequestResult, RunState], None]
FailureHook = Callable[[W, BaseException, RunState], None]
CompleteHook = Callable[[RunState], None]


def describe(unit: object) -> str:
    label = getattr(unit, "label", None)
    return label() if callable(label) else repr(unit)


class BoundedDispatcher(Generic[W]):
    """
    Pumps work units through at most `concurrency` in-flight executor calls.

    A pool of worker tasks pulls units from one shared cursor, so calls are
    launched in sequence order and may complete in any order. A failing unit
    is logged and counted; it never stops the run. `completed` is set exactly
    once, after every unit has either succeeded or failed.

    All RunState mutation happens between awaits on the event loop thread.
    """

    def __init__(
        self,
        execute: Execute[W],
        concurrency: int,
        *,
        on_success: SuccessHook[W] | None = None,
        on_failure: FailureHook[W] | None = None,
        on_complete: CompleteHook | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.execute = execute
        self.concurrency = concurrency
        self.on_success = on_success
        self.on_failure = on_failure
        self.on_complete = on_complete
        self.clock = clock
        self.completed = asyncio.Event()
        self.state: RunState | None = None

    async def run(self, units: Sequence[W]) -> RunState:
        if self.state is not None:
            raise RuntimeError("a BoundedDispatcher can only run once")
        queue = list(units)
        state = self.state = RunState(total_units=len(queue))
        state.started_at = self.clock()
        state.phase = "running"
        log.debug("dispatch start: %d units, concurrency %d", len(queue), self.concurrency)

        if not queue:
            self._finish(state)
            return state

        async def worker() -> None:
            while not state.exhausted:
                unit = queue[state.next_index]
                state.next_index += 1
                self._launched(state)
                try:
                    result = await self.execute(unit)
                except Exception as e:
                    self._landed(state)
                    self._record_failure(unit, e, state)
                else:
                    self._landed(state)
                    self._record_success(unit, result, state)
                if state.exhausted and state.outstanding == 0:
                    self._finish(state)

        workers = [
            asyncio.create_task(worker(), name=f"rpcbench-worker-{i}")
            for i in range(min(self.concurrency, len(queue)))
        ]
        try:
            await asyncio.gather(*workers)
        finally:
            for w in workers:
                if not w.done():
                    w.cancel()
        if not self.completed.is_set():
            raise RuntimeError(f"dispatcher stopped in phase {state.phase!r} before draining")
        return state

    # ── bookkeeping ──────────────────────────────

    def _launched(self, state: RunState) -> None:
        state.outstanding += 1
        if state.outstanding > self.concurrency:
            raise RuntimeError(f"outstanding {state.outstanding} exceeds ceiling {self.concurrency}")
        state.peak_outstanding = max(state.peak_outstanding, state.outstanding)
        if state.exhausted:
            state.phase = "draining"

    def _landed(self, state: RunState) -> None:
        state.outstanding -= 1
        if state.outstanding < 0:
            raise RuntimeError("outstanding counter went negative")

    def _record_success(self, unit: W, result: RequestResult, state: RunState) -> None:
        state.succeeded += 1
        state.latencies.append(result.latency_ms)
        state.blocks += result.block_count
        state.logs += result.logs_found
        state.rpc_errors += result.rpc_errors
        if self.on_success is not None:
            try:
                self.on_success(unit, result, state)
            except Exception:
                log.exception("success hook failed for %s", describe(unit))

    def _record_failure(self, unit: W, err: BaseException, state: RunState) -> None:
        state.failed += 1
        log.warning("request failed for %s: %s: %s", describe(unit), type(err).__name__, err)
        if self.on_failure is not None:
            try:
                self.on_failure(unit, err, state)
            except Exception:
                log.exception("failure hook failed for %s", describe(unit))

    def _finish(self, state: RunState) -> None:
        if state.phase == "done":
            return
        state.finished_at = self.clock()
        state.phase = "done"
        log.debug("dispatch done: %d ok, %d failed", state.succeeded, state.failed)
        self.completed.set()
        if self.on_complete is not None:
            try:
                self.on_complete(state)
            except Exception:
                log.exception("completion hook failed")
