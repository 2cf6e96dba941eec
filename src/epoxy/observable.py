"""Observables — property slots owned by a model.

An Observable caches one property value on behalf of its model. Writing a
value that differs from the cache replaces it and fires both "change" and
"change:<name>" on the model; writing an equal value does nothing, which is
what stops chains of computed properties from re-firing needlessly.

Observables initialize in two phases: construction only stores configuration,
and init() performs the first evaluation. A model builds all of its declared
observables before initializing any of them, so computed properties can
reference each other regardless of declaration order.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable

from epoxy.dependency import change_event
from epoxy.events import Events

if TYPE_CHECKING:
    from epoxy.model import Model

# ─── Equality ────────────────────────────────────────────────────────────────
_equality: Callable[[Any, Any], bool] | None = None


def _default_equality(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    # 1 == True, but a switch between them is still a change.
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    # == is structural for lists, dicts, tuples and sets.
    return a == b


def set_equality(fn: Callable[[Any, Any], bool] | None) -> None:
    """Set the equality predicate used to suppress redundant change events.

    Call once at startup, for example to compare numpy arrays:
        epoxy.set_equality(lambda a, b: bool(np.array_equal(a, b)))

    Passing None restores the default: identity, then ==, with NaN equal to
    NaN and bools never equal to numbers.
    """
    global _equality
    _equality = fn


def values_equal(a: Any, b: Any) -> bool:
    """Compare two property values with the configured equality."""
    if _equality is not None:
        return _equality(a, b)
    return _default_equality(a, b)


class Observable(Events):
    """A plain observable property: a cached value that announces changes."""

    is_computed = False

    def __init__(self, model: Model, name: str, value: Any = None) -> None:
        super().__init__()
        self.model: Model | None = model
        self.name = name
        self.value: Any = value
        self.initialized = False
        self.disposed = False

    def init(self) -> None:
        """Second initialization phase. A plain value is ready at construction."""
        self.initialized = True

    def get(self, *, force_update: bool = False) -> Any:
        """Return the cached value. Plain observables have nothing to recompute."""
        return self.value

    def set(self, value: Any) -> Mapping | None:
        """Store a new value. Returns no further writes to merge."""
        self.change(value)
        return None

    def change(self, value: Any) -> None:
        """Replace the cached value and fire, unless it is equal to the current one."""
        if not values_equal(value, self.value):
            self.value = value
            self.fire()

    def fire(self) -> None:
        """Announce a change of this property on the owning model."""
        model = self.model
        if model is not None:
            model.trigger("change", model)
            model.trigger(change_event(self.name), model, self.value)

    def dispose(self) -> None:
        """Release subscriptions and references. The observable becomes inert."""
        self.stop_listening()
        self.off()
        self.model = None
        self.value = None
        self.disposed = True

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else f"value={self.value!r}"
        return f"{type(self).__name__}({self.name!r}, {state})"
