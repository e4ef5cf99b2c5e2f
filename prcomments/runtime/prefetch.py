"""Bounded-concurrency payload prefetching for selectable items.

``run_prefetch_batch`` fetches every item on a small thread pool and collects
per-item outcomes in input order. ``PrefetchScheduler`` runs one batch on a
background thread and hands the finished ``PrefetchBatch`` to the event loop
through a queue, so workers never touch UI state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, replace
from queue import Empty, Queue

from ..items import SelectableItem

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4
MAX_WORKERS_LIMIT = 16
CANCEL_POLL_SECONDS = 0.05

FetchFn = Callable[[SelectableItem, threading.Event], bytes]


class PrefetchFailedError(RuntimeError):
    """Raised when a prefetch batch produced no usable payload at all."""


class PrefetchCancelledError(Exception):
    """Raised inside a job that was acquired after cancellation."""


@dataclass(frozen=True)
class PrefetchSuccess:
    item: SelectableItem
    payload: bytes


@dataclass(frozen=True)
class PrefetchFailure:
    item: SelectableItem
    error: Exception

    @property
    def message(self) -> str:
        return f"{self.item.title}: {self.error}"


@dataclass(frozen=True)
class PrefetchBatch:
    """Outcome of one prefetch run. Both tuples keep input order."""

    successes: tuple[PrefetchSuccess, ...] = ()
    failures: tuple[PrefetchFailure, ...] = ()
    cancelled: bool = False
    batch_id: int = 0

    @property
    def items(self) -> list[SelectableItem]:
        """Successfully fetched items with their payloads attached."""
        return [success.item.with_payload(success.payload) for success in self.successes]

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(failure.message for failure in self.failures)

    @property
    def fatal_error(self) -> PrefetchFailedError | None:
        """Return the error that makes this batch unusable, if any.

        Cancelled batches are never fatal; cancellation is not an error.
        """
        if self.cancelled or self.successes:
            return None
        if not self.failures:
            return PrefetchFailedError("no items to load")
        first = self.failures[0]
        error = PrefetchFailedError(
            f"failed to load all {len(self.failures)} items; first error: {first.message}"
        )
        error.__cause__ = first.error
        return error

    def raise_if_fatal(self) -> None:
        error = self.fatal_error
        if error is not None:
            raise error


def worker_count(item_count: int, max_workers: int = DEFAULT_MAX_WORKERS) -> int:
    """Return the pool size for ``item_count`` items: ``min(max_workers, N)``."""
    return max(1, min(max_workers, item_count))


def clamp_max_workers(value: object) -> int:
    """Coerce a configured worker count into ``1..MAX_WORKERS_LIMIT``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_MAX_WORKERS
    return max(1, min(MAX_WORKERS_LIMIT, value))


def reuse_known_payloads(fetch: FetchFn) -> FetchFn:
    """Wrap ``fetch`` so items that already carry a payload skip fetching."""

    def fetch_or_reuse(item: SelectableItem, cancel_event: threading.Event) -> bytes:
        if item.payload is not None:
            return item.payload
        return fetch(item, cancel_event)

    return fetch_or_reuse


def _as_bytes(payload: bytes | str) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def run_prefetch_batch(
    items: Sequence[SelectableItem],
    fetch: FetchFn,
    cancel_event: threading.Event | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> PrefetchBatch:
    """Fetch all ``items`` with at most ``max_workers`` in flight.

    A failing item is recorded and never cancels its siblings. Once
    ``cancel_event`` is set the batch returns a cancelled result right away;
    jobs that have not started yet are skipped and in-flight results are
    discarded.
    """
    cancel_event = cancel_event if cancel_event is not None else threading.Event()
    if not items:
        return PrefetchBatch()
    if cancel_event.is_set():
        return PrefetchBatch(cancelled=True)

    def job(item: SelectableItem) -> bytes:
        if cancel_event.is_set():
            raise PrefetchCancelledError(item.identity)
        return _as_bytes(fetch(item, cancel_event))

    outcomes: list[PrefetchSuccess | PrefetchFailure | None] = [None] * len(items)
    executor = ThreadPoolExecutor(
        max_workers=worker_count(len(items), max_workers),
        thread_name_prefix="prcomments-prefetch",
    )
    try:
        futures: dict[Future[bytes], int] = {
            executor.submit(job, item): position for position, item in enumerate(items)
        }
        pending = set(futures)
        while pending:
            if cancel_event.is_set():
                logger.debug("prefetch cancelled with %d jobs pending", len(pending))
                return PrefetchBatch(cancelled=True)
            done, pending = wait(pending, timeout=CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED)
            for future in done:
                position = futures[future]
                item = items[position]
                try:
                    payload = future.result()
                except PrefetchCancelledError:
                    continue
                except Exception as exc:
                    logger.warning("failed to prefetch %s: %s", item.title, exc)
                    outcomes[position] = PrefetchFailure(item=item, error=exc)
                else:
                    outcomes[position] = PrefetchSuccess(item=item, payload=payload)
        if cancel_event.is_set():
            return PrefetchBatch(cancelled=True)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return PrefetchBatch(
        successes=tuple(o for o in outcomes if isinstance(o, PrefetchSuccess)),
        failures=tuple(o for o in outcomes if isinstance(o, PrefetchFailure)),
    )


class PrefetchScheduler:
    """Runs prefetch batches off the UI thread.

    Each ``start`` posts exactly one ``PrefetchBatch`` to the result queue.
    ``cancel`` is a broadcast: every running batch observes it.
    """

    def __init__(self, fetch: FetchFn, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._fetch = fetch
        self._max_workers = max_workers
        self._lock = threading.Lock()
        self._next_batch_id = 1
        self._cancel_event = threading.Event()
        self._results: Queue[PrefetchBatch] = Queue()

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    def start(self, items: Sequence[SelectableItem]) -> int:
        """Start fetching ``items`` in the background and return the batch id."""
        with self._lock:
            batch_id = self._next_batch_id
            self._next_batch_id += 1
        snapshot = tuple(items)

        def worker() -> None:
            batch = run_prefetch_batch(snapshot, self._fetch, self._cancel_event, self._max_workers)
            self._results.put(replace(batch, batch_id=batch_id))

        logger.debug("starting prefetch batch %d for %d items", batch_id, len(snapshot))
        thread = threading.Thread(target=worker, name="prcomments-prefetch-batch", daemon=True)
        thread.start()
        return batch_id

    def cancel(self) -> None:
        self._cancel_event.set()

    def drain_results(self) -> list[PrefetchBatch]:
        """Drain all completed batches."""
        out: list[PrefetchBatch] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def wait_for_result(self, timeout: float) -> PrefetchBatch | None:
        """Block until a batch completes or ``timeout`` seconds pass."""
        try:
            return self._results.get(timeout=timeout)
        except Empty:
            return None


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "FetchFn",
    "PrefetchBatch",
    "PrefetchCancelledError",
    "PrefetchFailedError",
    "PrefetchFailure",
    "PrefetchScheduler",
    "PrefetchSuccess",
    "clamp_max_workers",
    "reuse_known_payloads",
    "run_prefetch_batch",
    "worker_count",
]
