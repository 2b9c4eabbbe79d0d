"""
Global registry for available domains.
"""

from leastpath.types import Domain
from .base import DomainDefinition


class DomainRegistry:
    """
    Global registry of available domains.

    Domains are registered at startup; a SimulationState selects one by its
    ``domain`` tag.
    """
    _domains: dict[str, DomainDefinition] = {}

    @classmethod
    def register(cls, definition: DomainDefinition) -> None:
        """Register a domain definition."""
        if definition.name in cls._domains:
            raise ValueError(f"Domain '{definition.name}' is already registered")
        cls._domains[definition.name] = definition

    @classmethod
    def get(cls, name: "str | Domain") -> DomainDefinition:
        """Get a specific domain definition by name or tag."""
        if isinstance(name, Domain):
            name = name.value
        if not cls._domains:
            raise RuntimeError("No domains registered. Call register_all_domains() first.")
        if name not in cls._domains:
            raise ValueError(f"Unknown domain: {name}. Available: {list(cls._domains.keys())}")
        return cls._domains[name]

    @classmethod
    def list_available(cls) -> list[str]:
        """List all registered domain names."""
        return list(cls._domains.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registered domains (mainly for testing)."""
        cls._domains.clear()
