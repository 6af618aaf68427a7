"""Dependency extraction and build ordering.

This module finds the components each specification entry refers to and
sorts component IDs so that every component comes after everything it
depends on. Both steps run before any factory is invoked, so a malformed
specification is rejected without side effects.
"""

import heapq
from collections.abc import Hashable, Iterable, Mapping
from typing import Any

from ensemble.domain import ComponentRef, ComponentSpec
from ensemble.errors import CyclicDependency, UnknownComponent
from ensemble.walk import iter_matching

__all__ = ["collect_component_ids", "dependency_map", "topological_sort"]


def _is_component_ref(value: Any) -> bool:
    return isinstance(value, ComponentRef)


def collect_component_ids(spec: ComponentSpec) -> frozenset:
    """Return the IDs of all components referenced anywhere in ``spec``'s arguments."""
    return frozenset(
        ref.component_id
        for ref in iter_matching((spec.args, spec.kwargs), _is_component_ref)
    )


def dependency_map(specs: Mapping[Hashable, ComponentSpec]) -> dict[Hashable, frozenset]:
    """Map each component ID to the set of IDs it depends on.

    Args:
        specs: Normalised component specifications, in specification order.

    Returns:
        A dict in the same order as ``specs``.

    Raises:
        UnknownComponent: If a reference names an ID that is not a key of ``specs``.
    """
    dependencies = {}
    for component_id, spec in specs.items():
        referenced = collect_component_ids(spec)
        unknown = referenced - specs.keys()
        if unknown:
            raise UnknownComponent(component_id, unknown)
        dependencies[component_id] = referenced
    return dependencies


class _DependencyGraph:
    """
    Internal helper to traverse a graph of component dependencies in build order.

    Nodes are kept with their insertion position; whenever several nodes are
    ready to be placed, the one inserted first wins. Edges to IDs that are not
    nodes of the graph are ignored.
    """

    def __init__(self, dependencies: Mapping[Hashable, Iterable[Hashable]]):
        self._position = {node: index for index, node in enumerate(dependencies)}
        self._pending: dict[Hashable, set[Hashable]] = {
            node: {dep for dep in deps if dep in self._position}
            for node, deps in dependencies.items()
        }
        self._dependents: dict[Hashable, list[Hashable]] = {node: [] for node in self._pending}
        for node, deps in self._pending.items():
            for dep in deps:
                self._dependents[dep].append(node)

    def traverse(self):
        """
        Perform a topological traversal of the dependency graph.

        Yields:
            Node IDs, each after all of its dependencies.

        Raises:
            CyclicDependency: If nodes remain that can never become ready.
        """
        ready = [self._position[node] for node, deps in self._pending.items() if not deps]
        heapq.heapify(ready)
        nodes = list(self._position)

        while ready:
            next_item = nodes[heapq.heappop(ready)]
            yield next_item
            del self._pending[next_item]

            for dependent in self._dependents[next_item]:
                waiting_on = self._pending[dependent]
                waiting_on.discard(next_item)
                if not waiting_on:
                    heapq.heappush(ready, self._position[dependent])

        if self._pending:
            raise CyclicDependency(list(self._pending), self._find_cycle())

    def _find_cycle(self) -> list[Hashable]:
        """Follow unplaced dependencies from the first unplaced node until a node repeats.

        Every unplaced node still waits on at least one unplaced node, so the
        walk cannot dead-end.
        """
        path: list[Hashable] = []
        seen: dict[Hashable, int] = {}
        node = next(iter(self._pending))
        while node not in seen:
            seen[node] = len(path)
            path.append(node)
            node = min(self._pending[node], key=self._position.__getitem__)
        return path[seen[node]:] + [node]


def topological_sort(dependencies: Mapping[Hashable, Iterable[Hashable]]) -> list[Hashable]:
    """Order the keys of ``dependencies`` so that each follows all of its dependencies.

    Ties are broken by insertion order of ``dependencies``.

    Example:
        >>> topological_sort({"a": {"b"}, "b": set(), "c": set()})
        ['b', 'a', 'c']

    Raises:
        CyclicDependency: If the graph contains a cycle.
    """
    return list(_DependencyGraph(dependencies).traverse())
