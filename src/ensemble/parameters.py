"""Lookup of parameter values by path."""

from collections.abc import Mapping, Sequence
from typing import Any

from ensemble.domain import ParamRef
from ensemble.errors import InvalidArgument

__all__ = ["lookup_parameter"]

_MISSING = object()


def _step(node: Any, key: Any) -> Any:
    if isinstance(node, Mapping):
        return node.get(key, _MISSING)
    if (
        isinstance(node, Sequence)
        and not isinstance(node, (str, bytes))
        and isinstance(key, int)
        and not isinstance(key, bool)
        and -len(node) <= key < len(node)
    ):
        return node[key]
    return _MISSING


def lookup_parameter(parameters: Mapping, ref: ParamRef) -> Any:
    """Follow ``ref.path`` into ``parameters`` and return the value found there.

    Mapping levels are indexed by key, sequence levels by integer position.
    A present value of ``None`` is a valid result.

    Raises:
        InvalidArgument: If any segment of the path is missing.
    """
    node = parameters
    for depth, key in enumerate(ref.path):
        node = _step(node, key)
        if node is _MISSING:
            raise InvalidArgument(
                f"Invalid parameter reference - no parameter provided with path "
                f"{list(ref.path)} (missing at {list(ref.path[:depth + 1])})"
            )
    return node
