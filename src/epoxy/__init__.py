"""Epoxy: observable and computed properties for key/value models."""

from importlib.metadata import version as _version

__version__ = _version("epoxy-model")

from epoxy._tracking import is_tracing
from epoxy.base import AttributeModel
from epoxy.computed import ComputedObservable, ComputedSpec, ObservableSpec, computed
from epoxy.dependency import LocalDependency, RemoteDependency
from epoxy.errors import EpoxyError, RecursiveSetterError, UnsettablePropertyError
from epoxy.events import Events
from epoxy.model import Model
from epoxy.observable import Observable, set_equality

__all__ = [
    "AttributeModel",
    "Model",
    "Events",
    "Observable",
    "ComputedObservable",
    "ObservableSpec",
    "ComputedSpec",
    "computed",
    "LocalDependency",
    "RemoteDependency",
    "EpoxyError",
    "UnsettablePropertyError",
    "RecursiveSetterError",
    "set_equality",
    "is_tracing",
]
