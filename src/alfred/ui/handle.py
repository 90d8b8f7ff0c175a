"""Streamable UI handle.

A StreamableHandle is a mutable placeholder that the chat core fills in
while a reply is being produced: skeleton first, then partial content,
then a final view. It is sealed exactly once; any further mutation is
rejected with HandleClosedError.

Readers never mutate it. They either read `value` after `wait()` or
follow every change through `watch()`.
"""

import asyncio
from collections.abc import AsyncIterator
from enum import Enum

from ..errors import HandleClosedError
from .views import SpinnerView, View

_SEALED = object()


class HandleState(str, Enum):
    OPEN = "open"
    UPDATED = "updated"
    DONE = "done"


class StreamableHandle:
    """Append-then-seal placeholder for incrementally produced UI content."""

    def __init__(self, initial: View | None = None) -> None:
        self._value: View = initial if initial is not None else SpinnerView()
        self._state = HandleState.OPEN
        self._update_count = 0
        self._done_event = asyncio.Event()
        self._watchers: list[asyncio.Queue] = []

    @property
    def value(self) -> View:
        """The view currently shown."""
        return self._value

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def update_count(self) -> int:
        return self._update_count

    @property
    def is_done(self) -> bool:
        return self._state is HandleState.DONE

    def update(self, view: View) -> None:
        """Replace the current view.

        Raises:
            HandleClosedError: If the handle has already been sealed
        """
        if self.is_done:
            raise HandleClosedError("Cannot update a handle after done()")
        self._value = view
        self._state = HandleState.UPDATED
        self._update_count += 1
        self._publish(view)

    def done(self, view: View | None = None) -> None:
        """Seal the handle, optionally replacing the view one last time.

        Raises:
            HandleClosedError: If the handle has already been sealed
        """
        if self.is_done:
            raise HandleClosedError("done() called twice on the same handle")
        if view is not None:
            self._value = view
            self._publish(view)
        self._state = HandleState.DONE
        self._done_event.set()
        for queue in self._watchers:
            queue.put_nowait(_SEALED)
        self._watchers.clear()

    async def wait(self) -> View:
        """Wait until the handle is sealed and return its final view."""
        await self._done_event.wait()
        return self._value

    async def watch(self) -> AsyncIterator[View]:
        """Yield the current view and then every change until sealed.

        The watcher is registered before the first view is yielded, so a
        slow consumer still receives every later change and the final view.
        """
        if self.is_done:
            yield self._value
            return

        queue: asyncio.Queue = asyncio.Queue()
        self._watchers.append(queue)
        try:
            yield self._value
            while True:
                item = await queue.get()
                if item is _SEALED:
                    return
                yield item
        finally:
            if queue in self._watchers:
                self._watchers.remove(queue)

    def _publish(self, view: View) -> None:
        for queue in self._watchers:
            queue.put_nowait(view)

    def __repr__(self) -> str:
        return (
            f"StreamableHandle(state={self._state.value}, "
            f"updates={self._update_count}, view={self._value.kind})"
        )
