"""AttributeModel — key/value attribute storage that announces changes.

The plain model that observables are layered on top of. A write applies all
of its values first, then fires "change:<name>" for every attribute that
actually changed, then a single generic "change":

    m = AttributeModel({"x": 1})
    m.on("change:x", lambda model, value: print("x is now", value))
    m.set({"x": 2, "y": 3})   # prints "x is now 2"
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from epoxy.dependency import change_event
from epoxy.events import Events
from epoxy.observable import values_equal

_MISSING = object()


class AttributeModel(Events):
    """Generic attribute store with change events."""

    # Per-class default attributes. Callable values are invoked per instance.
    defaults: Mapping[str, Any] = {}

    def __init__(self, attributes: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self.attributes: dict[str, Any] = {}
        self.changed: dict[str, Any] = {}
        self._previous: dict[str, Any] = {}
        self.destroyed = False
        initial = {
            key: value() if callable(value) else value
            for key, value in self.defaults.items()
        }
        if attributes:
            initial.update(attributes)
        self._base_set(initial, silent=True)

    def get(self, name: str, default: Any = None) -> Any:
        return self._base_get(name, default)

    def _base_get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def has(self, name: str) -> bool:
        """Whether the property holds a value other than None."""
        return self.get(name) is not None

    def set(
        self,
        key: str | Mapping[str, Any],
        value: Any = _MISSING,
        *,
        unset: bool = False,
        silent: bool = False,
    ) -> AttributeModel:
        """Write one attribute (`set("x", 1)`) or several (`set({"x": 1})`)."""
        return self._base_set(_as_params(key, value), unset=unset, silent=silent)

    def _base_set(
        self,
        params: Mapping[str, Any],
        *,
        unset: bool = False,
        silent: bool = False,
    ) -> AttributeModel:
        self._previous = dict(self.attributes)
        self.changed = {}
        for name, new in params.items():
            old = self.attributes.get(name, _MISSING)
            if unset:
                if old is _MISSING:
                    continue
                del self.attributes[name]
                self.changed[name] = None
            elif old is _MISSING or not values_equal(old, new):
                self.attributes[name] = new
                self.changed[name] = new

        if silent or not self.changed:
            return self
        for name, new in self.changed.items():
            self.trigger(change_event(name), self, new)
        self.trigger("change", self)
        return self

    def unset(self, name: str, *, silent: bool = False) -> AttributeModel:
        return self.set(name, None, unset=True, silent=silent)

    def clear(self, *, silent: bool = False) -> AttributeModel:
        return self.set(dict.fromkeys(self.attributes), unset=True, silent=silent)

    def previous(self, name: str) -> Any:
        """Value an attribute held before the most recent write."""
        return self._previous.get(name)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.attributes)

    def destroy(self) -> None:
        """Announce destruction, then release every subscription in both directions."""
        self.trigger("destroy", self)
        self.off()
        self.stop_listening()
        self.destroyed = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attributes!r})"


def _as_params(key: str | Mapping[str, Any], value: Any) -> dict[str, Any]:
    """Normalize set() arguments into a name -> value mapping."""
    if isinstance(key, Mapping):
        return dict(key)
    if value is _MISSING:
        value = None
    return {key: value}
