"""Channels and pipeline stages: generate, square, fan out and merge, with cancellation."""

from __future__ import annotations

import argparse
import itertools
import threading
import time
from collections import deque
from collections.abc import Iterator, Sequence
from typing import Any

_CLOSED = object()
_STOPPED = object()
_POLL = 0.01


def _is_set(stop: threading.Event | None) -> bool:
    return stop is not None and stop.is_set()


class Channel:
    """A closable FIFO between threads.

    With capacity 0 a send waits until a receiver has taken the item; with a
    positive capacity a send waits only while the buffer is full. A stop event
    passed to a blocking call abandons it once the event is set.
    """

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._cond = threading.Condition()
        self._items: deque[tuple[int, Any]] = deque()
        self._pending: set[int] = set()
        self._tickets = itertools.count()
        self._closed = False

    def _wait(self, stop: threading.Event | None) -> None:
        self._cond.wait(_POLL if stop is not None else None)

    def send(self, item: Any, stop: threading.Event | None = None) -> bool:
        """Deliver item; return False if stop was set first.

        Raises RuntimeError when the channel is closed.
        """
        slots = max(self.capacity, 1)
        with self._cond:
            while True:
                if self._closed:
                    raise RuntimeError("send on closed channel")
                if _is_set(stop):
                    return False
                if len(self._items) < slots:
                    break
                self._wait(stop)
            ticket = next(self._tickets)
            self._items.append((ticket, item))
            self._cond.notify_all()
            if self.capacity > 0:
                return True
            self._pending.add(ticket)
            while ticket in self._pending:
                if _is_set(stop):
                    self._pending.discard(ticket)
                    self._items = deque(e for e in self._items if e[0] != ticket)
                    self._cond.notify_all()
                    return False
                self._wait(stop)
            return True

    def close(self) -> None:
        """Mark the channel closed; receivers drain what is left, then stop."""
        with self._cond:
            if self._closed:
                raise RuntimeError("close of closed channel")
            self._closed = True
            self._cond.notify_all()

    def _receive(self, stop: threading.Event | None = None) -> Any:
        with self._cond:
            while not self._items:
                if self._closed:
                    return _CLOSED
                if _is_set(stop):
                    return _STOPPED
                self._wait(stop)
            ticket, item = self._items.popleft()
            self._pending.discard(ticket)
            self._cond.notify_all()
            return item

    def __iter__(self) -> Iterator[Any]:
        while True:
            item = self._receive()
            if item is _CLOSED:
                return
            yield item


def _spawn(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def producer(stop: threading.Event | None, *nums: int) -> Channel:
    """Send each number on a new channel, closing it when done or stopped."""
    out = Channel()

    def run() -> None:
        try:
            for n in nums:
                if not out.send(n, stop):
                    return
        finally:
            out.close()

    _spawn(run)
    return out


def square(stop: threading.Event | None, source: Channel, delay: float = 0.1) -> Channel:
    """Read numbers from source and send their squares, pausing delay seconds each."""
    out = Channel()

    def run() -> None:
        try:
            while True:
                n = source._receive(stop)
                if n is _CLOSED or n is _STOPPED:
                    return
                if delay > 0:
                    time.sleep(delay)
                if not out.send(n * n, stop):
                    return
        finally:
            out.close()

    _spawn(run)
    return out


def merge(stop: threading.Event | None, *sources: Channel) -> Channel:
    """Forward every source into one channel, closed once all sources are done."""
    out = Channel()

    def forward(source: Channel) -> None:
        while True:
            item = source._receive(stop)
            if item is _CLOSED or item is _STOPPED:
                return
            if not out.send(item, stop):
                return

    forwarders = [_spawn(forward, source) for source in sources]

    def close_when_done() -> None:
        for thread in forwarders:
            thread.join()
        out.close()

    _spawn(close_when_done)
    return out


def main(argv: Sequence[str] | None = None) -> int:
    """Square six numbers on two workers, cancelling after the third result."""
    parser = argparse.ArgumentParser(prog="pipelines")
    parser.add_argument("--delay", type=float, default=0.1)
    args = parser.parse_args(argv)

    stop = threading.Event()
    source = producer(stop, 1, 2, 3, 4, 5, 6)
    first = square(stop, source, args.delay)
    second = square(stop, source, args.delay)

    count = 0
    for n in merge(stop, first, second):
        print("result:", n)
        count += 1
        if count == 3:
            stop.set()

    print("done without leaking blocked goroutines")
    return 0