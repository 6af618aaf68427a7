"""Exceptions raised while building, starting and stopping containers."""

from typing import Hashable, Iterable

__all__ = [
    "ContainerError",
    "InvalidArgument",
    "UnknownComponent",
    "CyclicDependency",
    "StartupFailed",
]


class ContainerError(Exception):
    """Base class for all errors raised by ensemble."""

    pass


class InvalidArgument(ContainerError, ValueError):
    """Raised for malformed input: a bad reference, specification entry or lookup."""

    pass


class UnknownComponent(ContainerError, LookupError):
    """Raised when a component reference names an ID absent from the specification.

    Attributes:
        component_id: The ID of the component holding the dangling reference.
        unknown_ids: The referenced IDs that have no specification entry.
    """

    def __init__(self, component_id: Hashable, unknown_ids: Iterable[Hashable]):
        self.component_id = component_id
        self.unknown_ids = frozenset(unknown_ids)
        super().__init__(
            f"Component '{component_id}' references unknown components: "
            f"{', '.join(sorted(map(repr, self.unknown_ids)))}"
        )


class CyclicDependency(ContainerError):
    """Raised when the dependency graph of a specification is not acyclic.

    Attributes:
        remaining: IDs that could not be placed in dependency order.
        cycle: One concrete cycle among them, first and last element equal.
    """

    def __init__(self, remaining: list[Hashable], cycle: list[Hashable]):
        self.remaining = remaining
        self.cycle = cycle
        path = " -> ".join(repr(component_id) for component_id in cycle)
        super().__init__(f"Cyclic dependency between components: {path}")


class StartupFailed(ContainerError):
    """Raised by start_container after already started components were stopped.

    The original exception is chained as ``__cause__`` and also kept in ``cause``.
    """

    def __init__(self, component_id: Hashable, cause: BaseException):
        self.component_id = component_id
        self.cause = cause
        super().__init__(f"Failed starting component '{component_id}': {cause}")
