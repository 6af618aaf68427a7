"""Domain models used throughout the framework."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable

from ensemble.errors import InvalidArgument

__all__ = [
    "Reference",
    "ComponentRef",
    "ParamRef",
    "ComponentSpec",
    "ComponentState",
    "component_ref",
    "param_ref",
    "component",
    "is_reference",
    "to_component_spec",
]

ComponentId = Hashable


class Reference:
    """Marker base for placeholders resolved while a container is built.

    Only instances of the subclasses below are treated as references, so user
    supplied tuples, lists and dicts are never mistaken for one regardless of
    their shape.
    """

    __slots__ = ()


@dataclass(frozen=True)
class ComponentRef(Reference):
    """Placeholder for the built instance of the component identified by ``component_id``."""

    component_id: ComponentId


@dataclass(frozen=True)
class ParamRef(Reference):
    """Placeholder for the value found by following ``path`` into the parameters.

    Attributes:
        path: Non-empty tuple of keys, outermost first.
    """

    path: tuple

    def __post_init__(self):
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))
        if not self.path:
            raise InvalidArgument("Parameter reference requires a non-empty path")


@dataclass(frozen=True)
class ComponentSpec:
    """How to construct one component.

    Attributes:
        factory: Callable invoked to create the component.
        args: Positional arguments; may contain references at any depth.
        kwargs: Keyword arguments; may contain references at any depth.
    """

    factory: Callable
    args: tuple = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)


def component_ref(component_id: ComponentId) -> ComponentRef:
    """Create a reference to the component registered under ``component_id``.

    Example:
        >>> spec = {"service": (Service, component_ref("db"))}
    """
    return ComponentRef(component_id)


def param_ref(*path: Hashable) -> ParamRef:
    """Create a reference to the parameter found at ``path``.

    Raises:
        InvalidArgument: If no path segments are given.

    Example:
        >>> param_ref("smtp", "port")  # resolves parameters["smtp"]["port"]
    """
    return ParamRef(path)


def component(factory: Callable, *args: Any, **kwargs: Any) -> ComponentSpec:
    """Shorthand for building a :class:`ComponentSpec` from a call-like signature."""
    return ComponentSpec(factory, args, kwargs)


def is_reference(value: Any) -> bool:
    return isinstance(value, Reference)


def to_component_spec(component_id: ComponentId, entry: Any) -> ComponentSpec:
    """Normalise one container specification entry into a :class:`ComponentSpec`.

    Entries are either a ``ComponentSpec`` or a sequence ``(factory, *args)``.

    Raises:
        InvalidArgument: If the entry is empty, of an unsupported type, or its
            factory slot is not callable.
    """
    if isinstance(entry, ComponentSpec):
        spec = entry
    elif isinstance(entry, Sequence) and not isinstance(entry, (str, bytes)):
        if len(entry) == 0:
            raise InvalidArgument(
                f"Specification of component '{component_id}' is empty - "
                "expected (factory, *args)"
            )
        factory, *args = entry
        spec = ComponentSpec(factory, tuple(args))
    else:
        raise InvalidArgument(
            f"Specification of component '{component_id}' must be a ComponentSpec "
            f"or a (factory, *args) sequence, got {type(entry).__name__}"
        )

    if not callable(spec.factory):
        raise InvalidArgument(
            f"Factory of component '{component_id}' is not callable: {spec.factory!r}"
        )
    return spec


class ComponentState(Enum):
    """Lifecycle state of a component within a container."""

    UNSTARTED = "unstarted"
    STARTED = "started"
    STOPPED = "stopped"
    FAILED = "failed"
