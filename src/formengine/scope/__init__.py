"""
Environment builders: the generic `ScopeBuilder` and the MOIS domain builder.
"""

from .builder import STATEFUL_BINDING_NAMES, ScopeBuilder, ScopeConfig, core_bindings
from .mois import DEFAULT_IDENTITY, MoisScopeBuilder

__all__ = [
    "STATEFUL_BINDING_NAMES",
    "ScopeBuilder",
    "ScopeConfig",
    "core_bindings",
    "DEFAULT_IDENTITY",
    "MoisScopeBuilder",
]
