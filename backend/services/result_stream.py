"""
Result Streams

A ResultStream wraps a producer callback that reports the outcome of one
synchronous call as events: at most one value, then exactly one terminal
event (completion or error).

Streams are lazy and cold. Nothing runs until a consumer subscribes, and
every subscription runs the producer again on the subscribing thread.

Consumption styles:
- stream.subscribe(on_next, on_error, on_complete)
- value = await stream
- value = await stream.to_future(executor)  (producer runs on the executor)
- async for value in stream: ...
- stream.materialize() for the raw list of notifications
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from constants import NotificationKind
from exceptions import UnhandledStreamError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Notification(Generic[T]):
    """One event delivered by a stream."""

    kind: NotificationKind
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def is_terminal(self) -> bool:
        return NotificationKind.is_terminal(self.kind)


class Subscription:
    """Handle returned by subscribe; disposing it stops further deliveries."""

    def __init__(self):
        self._disposed = False

    def dispose(self):
        self._disposed = True

    @property
    def is_disposed(self) -> bool:
        return self._disposed


class StreamEmitter(Generic[T]):
    """
    Producer-side view of a subscription.

    Enforces the single-notification contract: after the first terminal
    event, or once the subscription is disposed, every call is dropped.
    A second value before termination is dropped as well.

    An exception raised by the consumer's on_error or on_complete handler
    is recorded in consumer_error and re-raised by subscribe once the
    producer returns. One raised by on_next becomes the stream's error.
    """

    def __init__(
        self,
        subscription: Subscription,
        on_next: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None
    ):
        self._subscription = subscription
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete
        self._terminated = False
        self._value_emitted = False
        self.unhandled_error: Optional[BaseException] = None
        self.consumer_error: Optional[BaseException] = None

    @property
    def is_disposed(self) -> bool:
        return self._terminated or self._subscription.is_disposed

    def on_next(self, value: T):
        if self.is_disposed:
            return
        if self._value_emitted:
            logger.warning("Dropping additional value: a result stream carries at most one value")
            return
        self._value_emitted = True
        if self._on_next is not None:
            self._on_next(value)

    def on_error(self, error: BaseException):
        if self.is_disposed:
            if error is not self.consumer_error:
                logger.warning(f"Dropping error after stream ended: {error!r}")
            return
        self._terminate()
        if self._on_error is None:
            self.unhandled_error = error
            return
        self._deliver_terminal(self._on_error, error)

    def on_complete(self):
        if self.is_disposed:
            return
        self._terminate()
        if self._on_complete is not None:
            self._deliver_terminal(self._on_complete)

    def _deliver_terminal(self, handler: Callable[..., Any], *args):
        try:
            handler(*args)
        except Exception as e:
            self.consumer_error = e
            raise

    def _terminate(self):
        self._terminated = True
        self._subscription.dispose()


class ResultStream(Generic[T]):
    """
    Lazy single-notification stream.

    Example:
        def producer(emitter):
            try:
                emitter.on_next(compute())
                emitter.on_complete()
            except Exception as e:
                emitter.on_error(e)

        stream = ResultStream.create(producer)
        value = await stream
    """

    def __init__(self, producer: Callable[[StreamEmitter[T]], None]):
        self._producer = producer

    @classmethod
    def create(cls, producer: Callable[[StreamEmitter[T]], None]) -> 'ResultStream[T]':
        """Build a stream from a producer callback."""
        return cls(producer)

    @classmethod
    def from_callable(cls, func: Callable[[], T]) -> 'ResultStream[T]':
        """
        Stream that emits the return value of func, then completes.

        An exception raised by func becomes the stream's error.
        """
        def producer(emitter: StreamEmitter[T]):
            try:
                result = func()
                emitter.on_next(result)
                emitter.on_complete()
            except Exception as e:
                emitter.on_error(e)

        return cls(producer)

    @classmethod
    def from_action(cls, action: Callable[[], Any]) -> 'ResultStream[None]':
        """
        Stream that runs action and completes without emitting a value.

        An exception raised by action becomes the stream's error.
        """
        def producer(emitter: StreamEmitter[None]):
            try:
                action()
                emitter.on_complete()
            except Exception as e:
                emitter.on_error(e)

        return cls(producer)

    def subscribe(
        self,
        on_next: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None
    ) -> Subscription:
        """
        Run the producer on the calling thread and deliver its events.

        Args:
            on_next: Called with the value, if one is emitted
            on_error: Called with the error; when omitted the error is raised
                as UnhandledStreamError
            on_complete: Called on successful completion

        Raises:
            Whatever on_error or on_complete raised, unchanged. An exception
            from on_next is delivered to on_error instead.

        Returns:
            Subscription for the run (already disposed once the stream ended)
        """
        subscription = Subscription()
        emitter = StreamEmitter(subscription, on_next, on_error, on_complete)
        try:
            self._producer(emitter)
        except Exception as e:
            emitter.on_error(e)
        if emitter.consumer_error is not None:
            raise emitter.consumer_error
        if emitter.unhandled_error is not None:
            raise UnhandledStreamError(emitter.unhandled_error) from emitter.unhandled_error
        return subscription

    def materialize(self) -> List[Notification[T]]:
        """Subscribe and return every delivered event, in order."""
        notifications: List[Notification[T]] = []
        self.subscribe(
            on_next=lambda value: notifications.append(
                Notification(NotificationKind.NEXT, value=value)
            ),
            on_error=lambda error: notifications.append(
                Notification(NotificationKind.ERROR, error=error)
            ),
            on_complete=lambda: notifications.append(
                Notification(NotificationKind.COMPLETE)
            )
        )
        return notifications

    def blocking_get(self) -> Optional[T]:
        """
        Subscribe on the calling thread and return the outcome.

        Returns:
            The emitted value, or None for a stream that only completes

        Raises:
            The stream's error, unchanged
        """
        value = None
        for notification in self.materialize():
            if notification.kind is NotificationKind.NEXT:
                value = notification.value
            elif notification.kind is NotificationKind.ERROR:
                raise notification.error
        return value

    def to_future(self, executor=None) -> asyncio.Future:
        """
        Resolve the stream into a future on the running event loop.

        Without an executor the producer runs immediately on the loop thread.
        With one, it runs via loop.run_in_executor so a blocking repository
        call does not stall the loop.

        Must be called from a coroutine.
        """
        loop = asyncio.get_running_loop()
        if executor is not None:
            return loop.run_in_executor(executor, self.blocking_get)

        future = loop.create_future()
        try:
            future.set_result(self.blocking_get())
        except Exception as e:
            future.set_exception(e)
        return future

    def __await__(self):
        return self._resolve().__await__()

    async def _resolve(self) -> Optional[T]:
        return self.blocking_get()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for notification in self.materialize():
            if notification.kind is NotificationKind.NEXT:
                yield notification.value
            elif notification.kind is NotificationKind.ERROR:
                raise notification.error
