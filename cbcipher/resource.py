"""
Resource Lifecycle

Objects that need setup and teardown (configuration, logging) implement
:class:`Resource` and are driven by a :class:`ResourceManager`, which
initializes them in the order they were added and finalizes them in reverse.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class ResourceError(Exception):
    """Raised when a managed resource fails to initialize."""


class Resource(ABC):
    """A named object with an initialization and a finalization step."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name of the resource, e.g. "configuration"."""

    @abstractmethod
    def initialize(self) -> None:
        """Acquire whatever the resource needs."""

    @abstractmethod
    def finalize(self) -> None:
        """Release whatever :meth:`initialize` acquired."""


class ResourceManager:
    """Initializes and finalizes a list of resources."""

    def __init__(self, resources: Optional[Iterable[Resource]] = None):
        self.resources: List[Resource] = list(resources or [])
        self.initialized: List[Resource] = []

    def add_resource(self, resource: Resource) -> "ResourceManager":
        """Append resource to the managed list and return the manager."""
        self.resources.append(resource)
        return self

    def initialize(self) -> None:
        """
        Initialize resources in insertion order.

        Stops at the first failure; resources after it are left untouched.
        The resources initialized before the failure are kept in
        ``initialized`` so the caller can finalize them.

        Raises:
            ResourceError: Wrapping the exception raised by the failing resource
        """
        self.initialized = []
        for resource in self.resources:
            logger.debug("Initializing %s", resource.name)
            try:
                resource.initialize()
            except Exception as e:
                raise ResourceError(f"failed to initialize {resource.name}") from e
            self.initialized.append(resource)

    def finalize(self) -> List[Exception]:
        """
        Finalize resources in reverse insertion order.

        Every resource is finalized even when an earlier one fails.

        Returns:
            The exceptions raised while finalizing, in the order they occurred
        """
        return self._finalize(self.resources)

    def _finalize(self, resources: List[Resource]) -> List[Exception]:
        errors = []
        for resource in reversed(resources):
            logger.debug("Finalizing %s", resource.name)
            try:
                resource.finalize()
            except Exception as e:
                logger.warning("Failed to finalize %s: %s", resource.name, e)
                errors.append(e)
        self.initialized = []
        return errors

    def __enter__(self) -> "ResourceManager":
        try:
            self.initialize()
        except ResourceError:
            self._finalize(self.initialized)
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.finalize()
