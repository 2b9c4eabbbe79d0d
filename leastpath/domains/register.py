"""
Domain registration module.

Call register_all_domains() at application startup to register all available domains.
"""

from .registry import DomainRegistry
from .refraction import REFRACTION_DOMAIN
from .mechanics import MECHANICS_DOMAIN
from .interference import INTERFERENCE_DOMAIN


def register_all_domains() -> None:
    """
    Register all available domains with the global registry.

    This should be called once at application startup.
    """
    # Clear any existing registrations
    DomainRegistry.clear()

    # Refraction (Fermat's principle of least time)
    DomainRegistry.register(REFRACTION_DOMAIN)

    # Projectile (Hamilton's principle of least action)
    DomainRegistry.register(MECHANICS_DOMAIN)

    # Double slit (sum over two paths)
    DomainRegistry.register(INTERFERENCE_DOMAIN)
