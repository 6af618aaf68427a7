"""Traversal of nested construction arguments.

Arguments are built from a closed set of shapes: lists, tuples (including
named tuples), sets, frozensets and dicts, nested in any combination, with
anything else treated as an opaque leaf. The walker never mutates its input;
rewritten structures are rebuilt as the same kind of container.
"""

import copy
from typing import Any, Callable, Iterator

from ensemble.domain import is_reference

__all__ = ["rewrite", "iter_matching"]

Matcher = Callable[[Any], bool]


def rewrite(
    value: Any, replace: Callable[[Any], Any], matches: Matcher = is_reference
) -> Any:
    """Return a copy of ``value`` with every matching node swapped for ``replace(node)``.

    Matching is tested before the shape of a node is inspected, and a
    replacement is used as-is: the walker does not descend into it.

    Args:
        value: The structure to walk.
        replace: Called with each matching node; its result takes the node's place.
        matches: Predicate selecting the nodes to replace. Defaults to references.

    Returns:
        The rewritten structure. Unmatched leaves are returned unchanged.

    Example:
        >>> rewrite([1, {"a": component_ref("x")}], lambda ref: ref.component_id)
        [1, {'a': 'x'}]
    """
    if matches(value):
        return replace(value)

    if isinstance(value, dict):
        rewritten = copy.copy(value)
        for key, item in value.items():
            rewritten[key] = rewrite(item, replace, matches)
        return rewritten

    if isinstance(value, tuple):
        items = [rewrite(item, replace, matches) for item in value]
        if hasattr(value, "_make"):
            return value._make(items)
        return type(value)(items)

    if isinstance(value, (list, set, frozenset)):
        return type(value)(rewrite(item, replace, matches) for item in value)

    return value


def iter_matching(value: Any, matches: Matcher = is_reference) -> Iterator[Any]:
    """Yield every node of ``value`` selected by ``matches``, depth first."""
    if matches(value):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_matching(item, matches)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            yield from iter_matching(item, matches)
