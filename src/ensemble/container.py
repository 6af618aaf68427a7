"""Ordered container of built components.

A Container maps component IDs to instances in build order: every component
appears after all the components it depends on. The set of IDs and the
instances stored under them never change after construction; only the
lifecycle state of each component is updated while the container is started
and stopped.

When a container is printed, components injected into other components are
shown as ``<<component ID>>`` placeholders rather than being rendered again
in full inside every component that holds them.
"""

import dataclasses
from collections.abc import Hashable, Iterator, Mapping
from typing import Any

from ensemble.domain import ComponentState
from ensemble.walk import rewrite

__all__ = ["Container", "ReferencedComponent"]


class ReferencedComponent:
    """Display placeholder for an injected component, naming its ID."""

    __slots__ = ("component_id",)

    def __init__(self, component_id: Hashable):
        self.component_id = component_id

    def __eq__(self, other):
        return isinstance(other, ReferencedComponent) and other.component_id == self.component_id

    def __hash__(self):
        return hash((ReferencedComponent, self.component_id))

    def __repr__(self):
        return f"<<component {self.component_id}>>"


class _ComponentView:
    """Structural rendering of an object as ``TypeName(field=value, ...)``."""

    def __init__(self, type_name: str, fields: dict[str, Any]):
        self.type_name = type_name
        self.fields = fields

    def __repr__(self):
        rendered = ", ".join(f"{name}={value!r}" for name, value in self.fields.items())
        return f"{self.type_name}({rendered})"


def _fields_of(instance: Any) -> Any:
    if dataclasses.is_dataclass(instance) and not isinstance(instance, type):
        return {f.name: getattr(instance, f.name) for f in dataclasses.fields(instance)}
    if hasattr(instance, "__dict__") and not callable(instance) and not isinstance(instance, type):
        return dict(vars(instance))
    return None


class Container(Mapping):
    """
    Built components keyed by ID, in dependency order.

    Supports the read-only mapping protocol and ``reversed()``. Iteration
    yields IDs from the components without dependencies up to the ones at the
    top of the dependency graph.

    Example:
        >>> container = build({"db": (Database,), "service": (Service, component_ref("db"))})
        >>> list(container)
        ['db', 'service']
        >>> container["service"].db is container["db"]
        True
    """

    def __init__(
        self,
        components: Mapping[Hashable, Any],
        dependencies: Mapping[Hashable, frozenset],
    ):
        self._components = dict(components)
        self._dependencies = {
            component_id: frozenset(dependencies.get(component_id, ()))
            for component_id in self._components
        }
        self._states = {
            component_id: ComponentState.UNSTARTED for component_id in self._components
        }

    def __getitem__(self, component_id: Hashable) -> Any:
        return self._components[component_id]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._components)

    def __reversed__(self) -> Iterator[Hashable]:
        return reversed(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def dependencies_of(self, component_id: Hashable) -> frozenset:
        """IDs of the components directly injected into ``component_id``."""
        return self._dependencies[component_id]

    def state_of(self, component_id: Hashable) -> ComponentState:
        return self._states[component_id]

    def set_state(self, component_id: Hashable, state: ComponentState):
        """Record the lifecycle state of a component. Called by the lifecycle orchestrator."""
        self._states[component_id] = state

    def describe(self) -> dict[Hashable, Any]:
        """Return a structural view of every component for display.

        Dataclass fields and instance attributes are rendered one level deep;
        wherever a component holds one of its dependencies, the placeholder
        :class:`ReferencedComponent` is shown instead.
        """
        return {
            component_id: self._describe_component(component_id)
            for component_id in self._components
        }

    def _describe_component(self, component_id: Hashable) -> Any:
        instance = self._components[component_id]
        injected = {
            id(self._components[dependency_id]): dependency_id
            for dependency_id in self._dependencies[component_id]
        }

        def is_injected(value):
            return id(value) in injected

        def placeholder(value):
            return ReferencedComponent(injected[id(value)])

        fields = _fields_of(instance)
        if fields is None:
            return rewrite(instance, placeholder, is_injected)
        return _ComponentView(
            type(instance).__name__, rewrite(fields, placeholder, is_injected)
        )

    def __repr__(self):
        return f"{type(self).__name__}({self.describe()!r})"
