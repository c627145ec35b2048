import queue
import threading
from typing import Generic, Iterator, TypeVar

from procsnitch.exceptions import ChannelClosedError

T = TypeVar("T")

_CLOSED = object()


class DeliveryChannel(Generic[T]):
    """Queue that is closed exactly once; iterating drains it until closed.

    Closing a closed channel raises instead of reopening or re-closing it.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("put on closed channel")
            self._queue.put(item)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("channel already closed")
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                # Leave the marker for any other reader
                self._queue.put(_CLOSED)
                return
            yield item
