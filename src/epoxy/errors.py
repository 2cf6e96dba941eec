"""Errors raised by observable-backed writes."""

from __future__ import annotations


class EpoxyError(Exception):
    """Base class for epoxy errors."""


class UnsettablePropertyError(EpoxyError):
    """Raised when assigning to a computed property that has no setter."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot set read-only computed property {name!r}")


class RecursiveSetterError(EpoxyError):
    """Raised when computed setters write into each other in a cycle.

    `path` lists the properties being resolved, ending with the one that was
    encountered a second time.
    """

    def __init__(self, path: list[str]) -> None:
        self.path = list(path)
        super().__init__("Recursive setter: " + " > ".join(self.path))
