"""Registry of unified resource names and their record shapes.

Resource bindings are generated outside this package; they register here so
the client can look up the model for a resource name.

Usage:
    ResourceRegistry.register("contacts", Contact)
    contacts = client.resource("contacts", connection_key)
"""

from typing import Dict, List, Optional, Type

from pydantic import BaseModel

from picaunified.models import UnifiedEntity


class ResourceRegistryError(ValueError):
    """Error raised by the resource registry."""

    pass


class ResourceRegistry:
    """Class-level map of resource name to pydantic model.

    Names are case-insensitive. Unregistered names are still usable; they
    resolve to UnifiedEntity.
    """

    _resources: Dict[str, Type[BaseModel]] = {}

    @classmethod
    def register(cls, name: str, model: Type[BaseModel] = UnifiedEntity) -> None:
        """Register a resource.

        Args:
            name: Resource name as used in the URL (e.g., "contacts")
            model: Pydantic model describing one record

        Raises:
            ResourceRegistryError: If the name is empty or contains "/"
        """
        if not name or "/" in name:
            raise ResourceRegistryError(f"Invalid resource name: {name!r}")
        cls._resources[name.lower()] = model

    @classmethod
    def unregister(cls, name: str) -> None:
        """Unregister a resource (mainly for testing)."""
        cls._resources.pop(name.lower(), None)

    @classmethod
    def get(cls, name: str) -> Optional[Type[BaseModel]]:
        """Get the model registered for a resource, or None."""
        return cls._resources.get(name.lower())

    @classmethod
    def model_for(cls, name: str) -> Type[BaseModel]:
        """Get the model for a resource, falling back to UnifiedEntity."""
        return cls.get(name) or UnifiedEntity

    @classmethod
    def list_resources(cls) -> List[str]:
        """List all registered resource names."""
        return list(cls._resources.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a resource is registered."""
        return name.lower() in cls._resources
