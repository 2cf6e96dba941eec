"""Computed observables — properties derived from other properties.

A computed property wraps a getter called with the model. The first time it
is initialized, the getter runs inside a dependency trace: every property it
reads becomes a dependency, and the computed subscribes to "change:<name>" on
each. When any dependency fires, the getter re-runs and the new value is
cached (and announced, if it differs).

Dependencies are discovered once. A getter whose reads depend on control flow
only listens to what it read on its first run; declare the others explicitly
with deps=[...] and they are subscribed in addition to the traced ones.

A computed property may have a setter. The setter receives the assigned value
and may return a mapping of further writes, which the model merges into the
same write call:

    class Person(Model):
        defaults = {"first": "", "last": ""}

        @computed
        def full_name(self):
            return f"{self.get('first')} {self.get('last')}".strip()

        @full_name.setter
        def full_name(self, value):
            first, _, last = value.partition(" ")
            return {"first": first, "last": last}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from epoxy._tracking import tracing
from epoxy.dependency import Dependency, as_dependency, resolve
from epoxy.errors import UnsettablePropertyError
from epoxy.observable import Observable

if TYPE_CHECKING:
    from epoxy.model import Model

logger = logging.getLogger("epoxy.computed")

Getter = Callable[["Model"], Any]
Setter = Callable[["Model", Any], "Mapping[str, Any] | None"]


class ComputedObservable(Observable):
    """An observable whose value comes from a getter over other properties."""

    is_computed = True

    def __init__(
        self,
        model: Model,
        name: str,
        getter: Getter,
        setter: Setter | None = None,
        deps: Iterable | None = None,
    ) -> None:
        super().__init__(model, name)
        self.getter = getter
        self.setter = setter
        self.deps: list[Dependency] = [as_dependency(d) for d in deps or ()]
        self._declared = len(self.deps)

    @property
    def settable(self) -> bool:
        return self.setter is not None

    def init(self) -> None:
        """Evaluate once while tracing reads, then subscribe to every dependency."""
        self.initialized = True
        with tracing(self.deps):
            value = self.getter(self.model)
        self.change(value)

        bindings = resolve(self.deps, self.model)
        for target, event in bindings:
            self.listen_to(target, event, self._on_dependency_change)
        logger.debug(
            "Computed %r: %d declared + %d traced reads -> %d subscriptions",
            self.name, self._declared, len(self.deps) - self._declared, len(bindings),
        )

    def _on_dependency_change(self, *args) -> None:
        # Event payloads are ignored; a dependency change always re-evaluates.
        if not self.disposed:
            self.get(force_update=True)

    def get(self, *, force_update: bool = False) -> Any:
        """Return the cached value, re-running the getter first if force_update."""
        if force_update:
            self.change(self.getter(self.model))
        return self.value

    def set(self, value: Any) -> Mapping[str, Any] | None:
        """Pass an assigned value to the setter. Returns its writes to merge."""
        if self.setter is None:
            raise UnsettablePropertyError(self.name)
        return self.setter(self.model, value)

    def dispose(self) -> None:
        super().dispose()
        self.deps = []


# ─── Declarations ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ObservableSpec:
    """Declares a plain observable. A callable value is invoked per model."""

    value: Any = None

    def create(self, model: Model, name: str) -> Observable:
        value = self.value() if callable(self.value) else self.value
        return Observable(model, name, value)


class ComputedSpec:
    """Declares a computed property: getter, optional setter, optional deps.

    Declared on a Model class (via @computed) it also acts as an attribute:
    `person.full_name` reads the property and `person.full_name = ...`
    assigns it through the model's write path.
    """

    def __init__(
        self,
        fget: Getter,
        fset: Setter | None = None,
        deps: Iterable | None = None,
    ) -> None:
        if not callable(fget):
            raise TypeError(f"Computed getter must be callable, got {fget!r}")
        if fset is not None and not callable(fset):
            raise TypeError(f"Computed setter must be callable, got {fset!r}")
        self.fget = fget
        self.fset = fset
        self.deps = [as_dependency(d) for d in deps] if deps is not None else None
        self.name: str | None = None
        self.__doc__ = getattr(fget, "__doc__", None)

    def setter(self, fset: Setter) -> ComputedSpec:
        """Decorator: return a copy of this declaration with a setter."""
        spec = ComputedSpec(self.fget, fset, self.deps)
        spec.name = self.name
        return spec

    def create(self, model: Model, name: str) -> ComputedObservable:
        return ComputedObservable(model, name, self.fget, self.fset, self.deps)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.get(self.name)

    def __set__(self, instance, value: Any) -> None:
        instance.set(self.name, value)

    def __repr__(self) -> str:
        name = getattr(self.fget, "__name__", "getter")
        return f"ComputedSpec({name}, settable={self.fset is not None})"


def computed(fget: Getter | None = None, *, deps: Iterable | None = None):
    """Decorator/factory to declare a computed property on a Model class.

    Usage:
        class Cart(Model):
            defaults = {"items": list, "tax": 0.2}

            @computed
            def total(self):
                return sum(self.get("items")) * (1 + self.get("tax"))

            @computed(deps=["mode"])
            def label(self):
                return self.get("short") if self.get("mode") else self.get("long")
    """
    if fget is None:
        return lambda fn: ComputedSpec(fn, deps=deps)
    return ComputedSpec(fget, deps=deps)
