"""
Tick Dispatcher

Single-worker orchestrator for the risk pipeline:
    tick -> PriceHistoryStore (mutate) -> MetricsService -> SuggestionService -> publish

Features:
- Bounded tick queue fed by any number of feeds / API submissions
- One worker processes ticks serially under an engine lock
- Rejected ticks are dropped, logged and counted, never retried
- Subscribers receive every published RiskState (drop-oldest when slow)
- Orderly shutdown: feeds stop, queued ticks drain, state is kept
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from liverisk.core.config import Settings, get_settings
from liverisk.schemas.risk import ActivityEntry, RiskState, Tick
from liverisk.services.activity import ActivityLog
from liverisk.services.base import DispatcherStoppedError, InvalidInputError, QueueFullError
from liverisk.services.feed import MockTickFeed, TickFeed
from liverisk.services.history import PriceHistoryStore
from liverisk.services.metrics import MetricsParams, MetricsService
from liverisk.services.suggestions import AlternativeMapper, SuggestionRules, SuggestionService

logger = logging.getLogger(__name__)

SERVICE_NAME = "TickDispatcher"


def _fail_stopped(tick: Tick, future: Optional[asyncio.Future]) -> None:
    if future is not None and not future.done():
        future.set_exception(DispatcherStoppedError(SERVICE_NAME, "Dispatcher stopped", {"symbol": tick.symbol}))


class TickDispatcher:
    """
    Owns the history store and drives recomputation.

    Usage:
        dispatcher = TickDispatcher.from_settings()
        await dispatcher.start()
        dispatcher.attach_feed(MockTickFeed.from_settings())
        state = dispatcher.state
        await dispatcher.stop()
    """

    def __init__(
        self,
        store: PriceHistoryStore,
        metrics_service: MetricsService,
        suggestion_service: SuggestionService,
        seeds: dict[str, float],
        activity_log: Optional[ActivityLog] = None,
        queue_size: int = 1000,
        subscriber_queue_size: int = 100,
        drain_timeout: float = 5.0,
    ):
        self._store = store
        self._metrics = metrics_service
        self._suggestions = suggestion_service
        self._seeds = dict(seeds)
        self._activity = activity_log or ActivityLog()
        self._subscriber_queue_size = subscriber_queue_size
        self._drain_timeout = drain_timeout

        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._lock = asyncio.Lock()
        self._worker_task: Optional[asyncio.Task] = None
        self._feeds: list[TickFeed] = []
        self._feed_tasks: list[asyncio.Task] = []
        self._subscribers: list[asyncio.Queue] = []
        self._running = False

        self._state = RiskState()
        self._ticks_processed = 0
        self._ticks_rejected = 0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TickDispatcher":
        settings = settings or get_settings()
        return cls(
            store=PriceHistoryStore.from_settings(settings),
            metrics_service=MetricsService(MetricsParams.from_settings(settings)),
            suggestion_service=SuggestionService(
                AlternativeMapper.from_settings(settings),
                SuggestionRules.from_settings(settings),
            ),
            seeds=settings.instrument_seeds,
            activity_log=ActivityLog(settings.activity_log_capacity),
            queue_size=settings.tick_queue_size,
            subscriber_queue_size=settings.subscriber_queue_size,
            drain_timeout=settings.shutdown_drain_timeout,
        )

    # ============ Properties ============

    @property
    def store(self) -> PriceHistoryStore:
        return self._store

    @property
    def activity(self) -> ActivityLog:
        return self._activity

    @property
    def alternatives(self) -> AlternativeMapper:
        return self._suggestions.mapper

    @property
    def state(self) -> RiskState:
        """Latest published metrics + suggestions."""
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        """Ticks waiting in the queue."""
        return self._queue.qsize()

    # ============ Lifecycle ============

    async def start(self) -> RiskState:
        """Seed the store, compute the initial state and start the worker."""
        if self._running:
            logger.warning("Tick dispatcher already running")
            return self._state

        async with self._lock:
            for symbol, price in self._seeds.items():
                if symbol not in self._store:
                    self._store.seed(symbol, price)
            state = await self._recompute()
        self._publish(state)

        self._running = True
        self._worker_task = asyncio.create_task(self._worker())
        logger.info(f"Tick dispatcher started with {len(self._store)} instruments")
        return state

    async def stop(self) -> None:
        """
        Stop feeds, drain queued ticks, stop the worker. Applied state is kept.

        Ticks still queued after the drain timeout are dropped; their
        submitters get DispatcherStoppedError.
        """
        if not self._running:
            return
        self._running = False

        for task in self._feed_tasks:
            task.cancel()
        await asyncio.gather(*self._feed_tasks, return_exceptions=True)
        self._feed_tasks.clear()

        for feed in self._feeds:
            await feed.close()
        self._feeds.clear()

        try:
            await asyncio.wait_for(self._queue.join(), timeout=self._drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Tick queue not drained after {self._drain_timeout}s, {self.pending} ticks dropped")

        if self._worker_task:
            self._worker_task.cancel()
            await asyncio.gather(self._worker_task, return_exceptions=True)
            self._worker_task = None

        self._fail_pending()

        logger.info(
            f"Tick dispatcher stopped ({self._ticks_processed} processed, {self._ticks_rejected} rejected)"
        )

    async def health_check(self) -> dict[str, bool]:
        """Health per component, keyed by name."""
        checks = {SERVICE_NAME: self._running}
        for service in (self._metrics, self._suggestions):
            checks[service.name] = await service.health_check()
        return checks

    # ============ Feeds / submission ============

    def attach_feed(self, feed: TickFeed) -> asyncio.Task:
        """Pump a feed into the tick queue until it ends or the dispatcher stops."""
        self._feeds.append(feed)
        task = asyncio.create_task(self._pump(feed))
        self._feed_tasks.append(task)
        logger.info(f"Attached feed {feed.name}")
        return task

    async def submit(self, tick: Tick) -> asyncio.Future:
        """
        Queue a tick, waiting for space if the queue is full.

        Returns:
            Future resolving to the RiskState after the tick was applied,
            or raising InvalidInputError if it was rejected.
        """
        future = asyncio.get_running_loop().create_future()
        await self._queue.put((tick, future))
        return future

    def submit_nowait(self, tick: Tick) -> asyncio.Future:
        """Like submit(), but raises QueueFullError instead of waiting."""
        future = asyncio.get_running_loop().create_future()
        try:
            self._queue.put_nowait((tick, future))
        except asyncio.QueueFull:
            raise QueueFullError(SERVICE_NAME, "Tick queue is full", {"symbol": tick.symbol})
        return future

    def _fail_pending(self) -> None:
        """Drop ticks the worker never reached; their submitters get DispatcherStoppedError."""
        while not self._queue.empty():
            tick, future = self._queue.get_nowait()
            _fail_stopped(tick, future)
            self._queue.task_done()

    async def _pump(self, feed: TickFeed) -> None:
        try:
            async for tick in feed.ticks():
                await self._queue.put((tick, None))
        except Exception:
            logger.exception(f"Feed {feed.name} failed")
        else:
            logger.info(f"Feed {feed.name} ended")

    async def _worker(self) -> None:
        while True:
            tick, future = await self._queue.get()
            try:
                state = await self.process_tick(tick)
            except asyncio.CancelledError:
                _fail_stopped(tick, future)
                raise
            except InvalidInputError as e:
                # already logged and counted by process_tick
                if future is not None and not future.done():
                    future.set_exception(e)
            except Exception as e:
                logger.exception(f"Unexpected error processing tick {tick.symbol}")
                if future is not None and not future.done():
                    future.set_exception(e)
            else:
                if future is not None and not future.done():
                    future.set_result(state)
            finally:
                self._queue.task_done()

    # ============ Processing ============

    async def process_tick(self, tick: Tick) -> RiskState:
        """
        Apply one tick and recompute everything, as one atomic step.

        Raises:
            InvalidInputError: tick rejected; nothing was mutated
        """
        async with self._lock:
            try:
                previous = self._store.apply_tick(tick.symbol, tick.price, tick.timestamp)
            except InvalidInputError as e:
                self._ticks_rejected += 1
                logger.warning(f"Rejected tick {tick.symbol} @ {tick.price}: {e.message}")
                self._activity.record(f"REJECTED tick for {tick.symbol}: {e.message}")
                self._state = self._state.model_copy(update={"ticks_rejected": self._ticks_rejected})
                self._publish(self._state)
                raise

            self._ticks_processed += 1
            change_pct = (tick.price / previous - 1) * 100
            self._activity.record(f"{tick.symbol} -> {tick.price} ({change_pct:.2f}%)", tick.timestamp)
            logger.debug(f"Applied {tick.symbol} -> {tick.price}")

            state = await self._recompute()
        self._publish(state)
        return state

    async def _recompute(self) -> RiskState:
        metrics = await self._metrics.execute(self._store.snapshots())
        suggestions = await self._suggestions.execute(metrics)
        self._state = RiskState(
            metrics=metrics,
            suggestions=suggestions,
            updated_at=datetime.now(timezone.utc),
            ticks_processed=self._ticks_processed,
            ticks_rejected=self._ticks_rejected,
        )
        return self._state

    # ============ Action commands ============

    def apply_stop_loss(self, symbol: str) -> ActivityEntry:
        """
        Acknowledge a stop-loss request.

        Only records the action; prices and history are untouched.
        """
        symbol = self._store.snapshot(symbol).symbol
        entry = self._activity.record(f"STOP-LOSS applied to {symbol}")
        logger.info(entry.text)
        return entry

    # ============ Subscribers ============

    def subscribe(self) -> asyncio.Queue:
        """Queue receiving every published RiskState."""
        queue = asyncio.Queue(maxsize=self._subscriber_queue_size)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _publish(self, state: RiskState) -> None:
        for queue in self._subscribers:
            if queue.full():
                # Drop the oldest state for slow consumers
                queue.get_nowait()
            queue.put_nowait(state)


# Singleton instance
_dispatcher: Optional[TickDispatcher] = None


def get_dispatcher() -> TickDispatcher:
    """Get the tick dispatcher singleton."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = TickDispatcher.from_settings()
    return _dispatcher


async def start_dispatcher(settings: Optional[Settings] = None) -> TickDispatcher:
    """Start the dispatcher and, if enabled, the mock feed."""
    settings = settings or get_settings()
    dispatcher = get_dispatcher()
    await dispatcher.start()

    if settings.enable_mock_feed:
        feed = MockTickFeed.from_settings(
            settings,
            price_source=lambda symbol: dispatcher.store.snapshot(symbol).current_price,
        )
        dispatcher.attach_feed(feed)
    return dispatcher


async def stop_dispatcher() -> None:
    """Stop the dispatcher and drop the singleton."""
    global _dispatcher
    if _dispatcher:
        await _dispatcher.stop()
        _dispatcher = None
