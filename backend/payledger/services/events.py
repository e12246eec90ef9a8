"""
Event Bus — Fire-and-forget delivery of ledger events to side-effect consumers.

Handlers run on a worker pool after the record has been appended. A failing
handler is logged; it never reaches the publisher or alters the ledger.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Type

from payledger.schemas.schemas import PaymentRecord
from payledger.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentSucceeded:
    record: PaymentRecord
    published_at: datetime = field(default_factory=datetime.now)


Handler = Callable[[object], None]


class EventBus:
    """In-process publisher/subscriber with asynchronous handler execution."""

    def __init__(self, max_workers: int = 4):
        self._handlers: dict[Type, list[Handler]] = {}
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="payledger-events")

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def publish(self, event: object) -> list[Future]:
        """Schedule every handler for ``event`` and return immediately."""
        futures = []
        for handler in self._handlers.get(type(event), []):
            future = self._executor.submit(handler, event)
            future.add_done_callback(self._make_reporter(handler, event))
            futures.append(future)
        return futures

    @staticmethod
    def _make_reporter(handler: Handler, event: object) -> Callable[[Future], None]:
        def report(future: Future) -> None:
            if future.cancelled():
                return
            exc = future.exception()
            if exc is not None:
                logger.error(
                    f"Event handler {getattr(handler, '__qualname__', handler)} failed "
                    f"for {type(event).__name__}: {exc}",
                    exc_info=exc,
                )
        return report

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
