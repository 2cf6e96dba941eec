"""Model — an AttributeModel with observable and computed properties.

Observable-backed properties are transparent to callers: model.get() and
model.set() work the same for stored attributes, plain observables and
computed properties. Declare them on the class:

    class Order(Model):
        defaults = {"price": 10, "qty": 1}
        observables = {"discount": 0}

        @computed
        def total(self):
            return self.get("price") * self.get("qty") - self.get("discount")

or register them on an instance with add_observable() / add_computed().

Writes go through a merge step: each observable-backed entry is handed to its
observable (computed setters may return further writes, merged into the same
call); everything else falls through to the attribute store.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Iterable

from epoxy._tracking import record
from epoxy.base import _MISSING, AttributeModel, _as_params
from epoxy.computed import ComputedSpec, Getter, ObservableSpec, Setter
from epoxy.errors import RecursiveSetterError
from epoxy.observable import Observable

logger = logging.getLogger("epoxy.model")

Spec = ObservableSpec | ComputedSpec


class Model(AttributeModel):
    """Key/value model whose properties may be observable or computed."""

    # Plain observables: name -> default (callables are invoked per instance).
    observables: Mapping[str, Any] = {}
    # Computed properties: name -> ComputedSpec or getter.
    computeds: Mapping[str, Any] = {}

    # Collected from @computed class attributes by __init_subclass__.
    _computed_attrs: dict[str, ComputedSpec] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        found: dict[str, ComputedSpec] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, ComputedSpec):
                    found[name] = attr
                else:
                    found.pop(name, None)
        cls._computed_attrs = found

    def __init__(self, attributes: Mapping[str, Any] | None = None) -> None:
        self.obs: dict[str, Observable] = {}
        self._deferring = False

        specs = self._declarations()
        attributes = dict(attributes or {})
        overrides = {name: attributes.pop(name) for name in list(attributes) if name in specs}
        super().__init__(attributes)

        # Construct everything first so getters can reference any declared
        # property, then initialize.
        self._deferring = True
        try:
            for name, spec in specs.items():
                if isinstance(spec, ObservableSpec) and name in overrides:
                    # Stored as given: only class-level defaults are invoked.
                    self._install(Observable(self, name, overrides.pop(name)))
                    continue
                self._install(spec.create(self, name))
            for observable in list(self.obs.values()):
                if not observable.initialized:
                    observable.init()
        finally:
            self._deferring = False

        # Initial values for computed properties go through their setters.
        if overrides:
            self.set(overrides)

    def _declarations(self) -> dict[str, Spec]:
        specs: dict[str, Spec] = {}
        for name, value in self.observables.items():
            specs[name] = value if isinstance(value, ObservableSpec) else ObservableSpec(value)
        for name, value in self.computeds.items():
            specs[name] = value if isinstance(value, ComputedSpec) else ComputedSpec(value)
        specs.update(self._computed_attrs)
        return specs

    # --- Registration ---

    def add_observable(self, name: str, value: Any = None) -> Observable:
        """Register a plain observable property, replacing any existing one."""
        self.remove_observable(name)
        return self._install(Observable(self, name, value))

    def add_computed(
        self,
        name: str,
        getter: Getter | ComputedSpec,
        setter: Setter | None = None,
        deps: Iterable | None = None,
    ) -> Observable:
        """Register a computed property, replacing any existing one.

        getter(model) produces the value. setter(model, value), if given, makes
        the property writable and may return a mapping of further writes.
        deps lists property names or (name, other_model) pairs to listen to in
        addition to whatever the getter reads on its first run.
        """
        spec = getter if isinstance(getter, ComputedSpec) else ComputedSpec(getter, setter, deps)
        self.remove_observable(name)
        return self._install(spec.create(self, name))

    def _install(self, observable: Observable) -> Observable:
        self.obs[observable.name] = observable
        logger.debug(
            "Registered %s %r on %s",
            "computed" if observable.is_computed else "observable",
            observable.name, type(self).__name__,
        )
        # Ad hoc registrations initialize now; declared ones wait for the batch.
        if not self._deferring:
            try:
                observable.init()
            except Exception:
                # A getter that fails on its first run leaves nothing registered.
                self.obs.pop(observable.name, None)
                observable.dispose()
                raise
        return observable

    def has_observable(self, name: str) -> bool:
        return name in self.obs

    def observable(self, name: str) -> Observable:
        """The observable backing `name`. Raises KeyError if there is none."""
        return self.obs[name]

    def observable_names(self) -> list[str]:
        return list(self.obs)

    def remove_observable(self, name: str) -> None:
        """Dispose and unregister one observable. No-op if absent."""
        observable = self.obs.pop(name, None)
        if observable is not None:
            observable.dispose()
            logger.debug("Removed observable %r from %s", name, type(self).__name__)

    def clear_observables(self) -> None:
        for name in list(self.obs):
            self.remove_observable(name)

    # --- Access ---

    def get(self, name: str, default: Any = None) -> Any:
        """Read a property. Reads are recorded while a dependency trace is active."""
        record(name, self)
        observable = self.obs.get(name)
        if observable is not None:
            # Declared observables read by another's getter during the initial
            # batch initialize first, so declaration order does not matter.
            if not observable.initialized:
                observable.init()
            return observable.get()
        return self._base_get(name, default)

    def get_copy(self, name: str) -> Any:
        """Read a property, returning a shallow copy of list, dict and set values."""
        value = self.get(name)
        if isinstance(value, (list, dict, set)):
            return copy.copy(value)
        return value

    def set(
        self,
        key: str | Mapping[str, Any],
        value: Any = _MISSING,
        *,
        unset: bool = False,
        silent: bool = False,
    ) -> Model:
        """Write properties. Observable-backed entries are routed to their observables.

        Observables announce their own changes, so `silent` only applies to
        stored attributes. Unsetting bypasses observables entirely.
        """
        params = _as_params(key, value)
        if not unset:
            params = self._merge(params, {}, [])
        self._base_set(params, unset=unset, silent=silent)
        return self

    def _merge(
        self, incoming: Mapping[str, Any], keep: dict[str, Any], stack: list[str]
    ) -> dict[str, Any]:
        """Route writes to observables, collecting the rest into `keep`.

        `stack` holds the properties whose setters led here. Meeting one of
        them again means the setters write into each other in a cycle.
        """
        for name, value in incoming.items():
            observable = self.obs.get(name)
            if observable is None:
                keep[name] = value
                continue
            if name in stack:
                path = stack + [name]
                logger.debug("Recursive setter on %s: %s", type(self).__name__, " > ".join(path))
                raise RecursiveSetterError(path)
            result = observable.set(value)
            if isinstance(result, Mapping):
                # Each branch gets its own copy of the stack.
                keep = self._merge(result, keep, stack + [name])
        return keep

    def to_dict(self, include_observables: bool = False) -> dict[str, Any]:
        data = super().to_dict()
        if include_observables:
            data.update({name: observable.get() for name, observable in self.obs.items()})
        return data

    def destroy(self) -> None:
        """Dispose every observable, then destroy the underlying model."""
        self.clear_observables()
        super().destroy()
