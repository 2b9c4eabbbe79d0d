"""
Domain abstraction: the three demos as variants of one engine interface.
"""

from .base import DomainDefinition, DomainOutput
from .registry import DomainRegistry
from .register import register_all_domains

__all__ = [
    'DomainDefinition',
    'DomainOutput',
    'DomainRegistry',
    'register_all_domains',
]
