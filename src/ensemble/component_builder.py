"""Construction of individual components.

The ComponentBuilder replaces the references inside a component's arguments
with built components and parameter values, then invokes the component's
factory with the result.
"""

import logging
from collections.abc import Hashable, Mapping
from typing import Any

from ensemble.domain import ComponentRef, ComponentSpec, ParamRef
from ensemble.errors import InvalidArgument
from ensemble.parameters import lookup_parameter
from ensemble.walk import rewrite

__all__ = ["ComponentBuilder"]

logger = logging.getLogger(__name__)


class ComponentBuilder:
    """Build component instances from their specifications."""

    def __init__(self, parameters: Mapping):
        self._parameters = parameters

    def build(
        self,
        component_id: Hashable,
        spec: ComponentSpec,
        built: Mapping[Hashable, Any],
    ) -> Any:
        """Resolve the references in ``spec`` and invoke its factory.

        Args:
            component_id: ID of the component being built, used in error messages.
            spec: The component's specification.
            built: Components constructed so far, keyed by ID.

        Returns:
            Whatever the factory returns.

        Raises:
            InvalidArgument: If a reference cannot be resolved.
        """

        def resolve(ref):
            if isinstance(ref, ComponentRef):
                if ref.component_id not in built:
                    raise InvalidArgument(
                        f"Invalid component reference in '{component_id}' - "
                        f"no component built under ID '{ref.component_id}'"
                    )
                return built[ref.component_id]
            if isinstance(ref, ParamRef):
                return lookup_parameter(self._parameters, ref)
            raise InvalidArgument(f"Unsupported reference {ref!r} in '{component_id}'")

        try:
            args = rewrite(spec.args, resolve)
            kwargs = rewrite(dict(spec.kwargs), resolve)
        except TypeError as e:
            # a set or frozenset received an unhashable component or parameter value
            raise InvalidArgument(
                f"Invalid arguments for component '{component_id}' - "
                f"set elements must resolve to hashable values: {e}"
            ) from e

        logger.debug("Building component '%s'", component_id)
        try:
            return spec.factory(*args, **kwargs)
        except Exception:
            logger.exception("Factory of component '%s' failed", component_id)
            raise
