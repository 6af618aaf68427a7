"""Ensemble: declarative component containers.

Ensemble builds a set of interdependent components from a plain mapping of
component IDs to factories and arguments, then starts and stops them in
dependency order. There is no annotation scanning, proxying or runtime
reconfiguration: a container is resolved once into an ordered mapping of
live instances.

Key Features:
    - Component and parameter references nested anywhere in factory arguments
    - Dependency ordering with cycle and unknown-reference detection
    - Start/stop orchestration with rollback when startup fails

Basic Usage:
    >>> from ensemble import build, component_ref, param_ref, start_container, stop_container
    >>>
    >>> container = build(
    ...     {
    ...         "db": (Database, param_ref("db", "url")),
    ...         "service": (Service, {"db": component_ref("db")}),
    ...     },
    ...     {"db": {"url": "postgres://localhost/app"}},
    ... )
    >>> start_container(container)
    >>> container["service"].handle(request)
    >>> stop_container(container)

The framework consists of several core modules:
    - domain: References and component specifications
    - builders: High-level container construction functions
    - container: The ordered Container and its display rendering
    - lifecycle: The Lifecycle protocol and start/stop orchestration
    - dependency_graph: Dependency extraction and topological sorting
    - walk: Rewriting of nested argument structures
    - errors: Framework-specific exceptions
"""

import logging

from ensemble.builders import build, make_container
from ensemble.container import Container, ReferencedComponent
from ensemble.dependency_graph import topological_sort
from ensemble.domain import (
    ComponentRef,
    ComponentSpec,
    ComponentState,
    ParamRef,
    component,
    component_ref,
    param_ref,
)
from ensemble.errors import (
    ContainerError,
    CyclicDependency,
    InvalidArgument,
    StartupFailed,
    UnknownComponent,
)
from ensemble.lifecycle import Lifecycle, running, start_container, stop_container
from ensemble.walk import rewrite

__all__ = [
    "build",
    "make_container",
    "Container",
    "ReferencedComponent",
    "topological_sort",
    "ComponentRef",
    "ComponentSpec",
    "ComponentState",
    "ParamRef",
    "component",
    "component_ref",
    "param_ref",
    "ContainerError",
    "CyclicDependency",
    "InvalidArgument",
    "StartupFailed",
    "UnknownComponent",
    "Lifecycle",
    "running",
    "start_container",
    "stop_container",
    "rewrite",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
