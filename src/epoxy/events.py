"""Named-event dispatch for models and observables.

Minimal synchronous event bus: subscribe to named events, trigger them, and
track subscriptions made on *other* objects so they can be released in one
call. Several events can be named at once, separated by spaces:

    model.on("change:first change:last", on_name_change)
    model.trigger("change change:first", model)
"""

from __future__ import annotations

from typing import Callable

Callback = Callable[..., None]
Disposer = Callable[[], None]


class Events:
    """Mixin providing on/off/trigger and listen_to/stop_listening."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callback]] = {}
        self._listening: list[tuple[Events, Disposer]] = []

    def on(self, events: str, callback: Callback) -> Disposer:
        """Register callback for each named event. Returns a function that removes it."""
        names = events.split()
        for name in names:
            # Handler lists are replaced, never mutated, so dispatch can
            # iterate the list it started with.
            self._handlers[name] = self._handlers.get(name, []) + [callback]

        def _off() -> None:
            for name in names:
                handlers = self._handlers.get(name)
                if not handlers:
                    continue
                for i, h in enumerate(handlers):
                    if h is callback:
                        self._handlers[name] = handlers[:i] + handlers[i + 1:]
                        break

        return _off

    def off(self, events: str | None = None, callback: Callback | None = None) -> None:
        """Remove handlers. No arguments removes everything."""
        names = events.split() if events is not None else list(self._handlers)
        for name in names:
            if callback is None:
                self._handlers.pop(name, None)
                continue
            handlers = self._handlers.get(name)
            if handlers:
                # == so bound methods match a fresh reference to the same method.
                self._handlers[name] = [h for h in handlers if h != callback]

    def trigger(self, events: str, *args) -> None:
        """Call every handler of each named event, in subscription order."""
        for name in events.split():
            handlers = self._handlers.get(name)
            if not handlers:
                continue
            for callback in handlers:
                live = self._handlers.get(name)
                # A handler may unsubscribe others during dispatch; skip those.
                if live is not handlers and (live is None or callback not in live):
                    continue
                callback(*args)

    def has_handlers(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    def listen_to(self, other: Events, events: str, callback: Callback) -> Disposer:
        """Subscribe to events on another object, tracked for stop_listening()."""
        dispose = other.on(events, callback)
        entry = (other, dispose)
        self._listening.append(entry)

        def _stop() -> None:
            dispose()
            try:
                self._listening.remove(entry)
            except ValueError:
                pass

        return _stop

    def stop_listening(self, other: Events | None = None) -> None:
        """Release subscriptions made via listen_to(), on `other` or on everything."""
        keep = []
        for target, dispose in self._listening:
            if other is None or target is other:
                dispose()
            else:
                keep.append((target, dispose))
        self._listening = keep

    @property
    def listening_count(self) -> int:
        """Number of live listen_to() subscriptions. Useful for testing."""
        return len(self._listening)
