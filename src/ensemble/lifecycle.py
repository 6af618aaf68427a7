"""Starting and stopping the components of a container.

Components opt into lifecycle management by providing ``start`` and ``stop``
methods, i.e. by satisfying the :class:`Lifecycle` protocol; all other
components are skipped. Components are started in container order and
stopped in reverse, so a component is only ever running while everything it
depends on is running too.

Calls are made one at a time on the calling thread. There is no timeout: a
``start`` or ``stop`` that never returns blocks the whole sequence.
"""

import logging
from collections.abc import Hashable, Iterable
from contextlib import contextmanager
from typing import Iterator, Protocol, runtime_checkable

from ensemble.container import Container
from ensemble.domain import ComponentState
from ensemble.errors import StartupFailed

__all__ = ["Lifecycle", "is_lifecycle", "start_container", "stop_container", "running"]

logger = logging.getLogger(__name__)


@runtime_checkable
class Lifecycle(Protocol):
    """Implemented by components that need start/stop logic."""

    def start(self) -> None:
        """Starts the component."""
        ...

    def stop(self) -> None:
        """Stops the component. May be called on an already stopped component."""
        ...


def is_lifecycle(component) -> bool:
    """True if ``component`` has callable ``start`` and ``stop`` methods.

    The protocol check alone only tests that the attributes exist, which data
    fields such as ``range.start`` also satisfy.
    """
    return (
        isinstance(component, Lifecycle)
        and callable(component.start)
        and callable(component.stop)
    )


def _stop_components(container: Container, component_ids: Iterable[Hashable]):
    """Stop each lifecycle component in ``component_ids``, logging and absorbing failures."""
    for component_id in component_ids:
        component = container[component_id]
        if not is_lifecycle(component):
            continue
        logger.debug("Stopping component '%s'", component_id)
        try:
            component.stop()
        except Exception:
            logger.exception("Error while stopping component '%s'", component_id)
        container.set_state(component_id, ComponentState.STOPPED)


def start_container(container: Container) -> None:
    """Start all lifecycle components, in dependency order.

    If a component fails to start, every component started before it is
    stopped in reverse order and the failure is raised.

    Raises:
        StartupFailed: Naming the component that failed, with the original
            exception as its cause.
    """
    started = []
    for component_id, component in container.items():
        if not is_lifecycle(component):
            continue
        logger.debug("Starting component '%s'", component_id)
        try:
            component.start()
        except Exception as e:
            container.set_state(component_id, ComponentState.FAILED)
            logger.error(
                "Failed starting component '%s', stopping %d started component(s)",
                component_id,
                len(started),
            )
            _stop_components(container, reversed(started))
            raise StartupFailed(component_id, e) from e
        container.set_state(component_id, ComponentState.STARTED)
        started.append(component_id)


def stop_container(container: Container) -> None:
    """Stop all lifecycle components, in reverse dependency order.

    Every component's ``stop`` is invoked even if the container was already
    stopped. Failures are logged and never raised.
    """
    _stop_components(container, reversed(container))


@contextmanager
def running(container: Container) -> Iterator[Container]:
    """Start ``container`` for the duration of a ``with`` block.

    Example:
        >>> with running(build(spec, parameters)) as container:
        ...     container["server"].serve_forever()
    """
    start_container(container)
    try:
        yield container
    finally:
        stop_container(container)
