"""Dependency descriptors — what a computed property listens to.

A dependency is either local (a property of the model that owns the computed)
or remote (a property of some other model). Declarations accept bare names
and (name, model) pairs; both are normalized to descriptors here and resolved
to (target, event) subscriptions once, at wiring time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Union

if TYPE_CHECKING:
    from epoxy.base import AttributeModel

CHANGE_PREFIX = "change:"


@dataclass(frozen=True, slots=True)
class LocalDependency:
    """A property on the owning model."""

    name: str


@dataclass(frozen=True, slots=True)
class RemoteDependency:
    """A property on another model."""

    name: str
    model: AttributeModel


Dependency = Union[LocalDependency, RemoteDependency]


def as_dependency(item) -> Dependency:
    """Coerce a declared dependency into a descriptor.

    Accepts a property name, a (name, model) pair, or a descriptor.
    """
    if isinstance(item, (LocalDependency, RemoteDependency)):
        return item
    if isinstance(item, str):
        return LocalDependency(item)
    if isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str):
        return RemoteDependency(item[0], item[1])
    raise TypeError(f"Invalid dependency declaration: {item!r}")


def change_event(name: str) -> str:
    """Event fired when property `name` changes: "change:<name>"."""
    if name.startswith(CHANGE_PREFIX):
        return name
    return CHANGE_PREFIX + name


def resolve(
    deps: Iterable[Dependency], owner: AttributeModel
) -> list[tuple[AttributeModel, str]]:
    """Resolve descriptors to unique (target, event) pairs, in first-seen order.

    Reading the same property several times during one evaluation yields a
    single subscription.
    """
    seen: set[tuple[int, str]] = set()
    bindings: list[tuple[AttributeModel, str]] = []
    for dep in deps:
        dep = as_dependency(dep)
        target = dep.model if isinstance(dep, RemoteDependency) else owner
        event = change_event(dep.name)
        key = (id(target), event)
        if key not in seen:
            seen.add(key)
            bindings.append((target, event))
    return bindings
