"""High level entry points for constructing containers."""

import logging
from collections.abc import Hashable, Mapping
from typing import Any, Optional

from ensemble.component_builder import ComponentBuilder
from ensemble.container import Container
from ensemble.dependency_graph import dependency_map, topological_sort
from ensemble.domain import to_component_spec
from ensemble.errors import InvalidArgument

__all__ = ["make_container", "build"]

logger = logging.getLogger(__name__)


def make_container(
    container_spec: Mapping[Hashable, Any],
    parameters: Optional[Mapping] = None,
) -> Container:
    """Construct and return a fully built :class:`Container`.

    Every entry of ``container_spec`` is either a
    :class:`~ensemble.domain.ComponentSpec` or a ``(factory, *args)`` sequence.
    Arguments may contain component references (created via
    :func:`~ensemble.domain.component_ref`), which are replaced with the
    referenced component, and parameter references (created via
    :func:`~ensemble.domain.param_ref`), which are replaced with the value at
    that path in ``parameters``. References may be nested at any depth inside
    lists, tuples, sets and dicts.

    Components are built once each, in dependency order, so a component
    referenced from several places is injected as the same instance
    everywhere.

    Args:
        container_spec: Mapping of component IDs to specifications.
        parameters: Optional nested mapping looked up by parameter references.

    Returns:
        The built :class:`Container`, ordered from components without
        dependencies up to the top of the dependency graph.

    Raises:
        InvalidArgument: If an entry is malformed or a parameter is missing.
        UnknownComponent: If a component reference names an unspecified ID.
        CyclicDependency: If the dependency graph contains a cycle.

    Example:
        >>> make_container(
        ...     {
        ...         "mailer": (Mailer, {"host": param_ref("smtp", "host"),
        ...                             "port": param_ref("smtp", "port")}),
        ...         "signup": (Signup, component_ref("mailer"), 66),
        ...     },
        ...     {"smtp": {"host": "mail.example.com", "port": 25}},
        ... )
    """
    if parameters is None:
        parameters = {}
    if not isinstance(container_spec, Mapping):
        raise InvalidArgument(
            f"Container specification must be a mapping, got {type(container_spec).__name__}"
        )
    if not isinstance(parameters, Mapping):
        raise InvalidArgument(f"Parameters must be a mapping, got {type(parameters).__name__}")

    specs = {
        component_id: to_component_spec(component_id, entry)
        for component_id, entry in container_spec.items()
    }
    dependencies = dependency_map(specs)
    build_order = topological_sort(dependencies)
    logger.debug("Build order: %s", build_order)

    component_builder = ComponentBuilder(parameters)
    built: dict[Hashable, Any] = {}
    for component_id in build_order:
        built[component_id] = component_builder.build(component_id, specs[component_id], built)

    return Container(built, dependencies)


build = make_container
